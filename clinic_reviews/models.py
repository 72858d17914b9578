"""Pydantic models for reviews and review statistics.

Python attributes are snake_case; the JSON wire format uses the camelCase
names the booking frontend expects (appointmentId, reviewText, canEdit, ...).
"""
from datetime import datetime, UTC
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from clinic_reviews import config


def reject_bool(value):
    """JSON true/false must not pass as a 1/0 rating."""
    if isinstance(value, bool):
        raise ValueError("rating must be an integer, not a boolean")
    return value


class WireModel(BaseModel):
    """Base model serialised with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        """Dump to a JSON-ready dict using wire names."""
        return self.model_dump(by_alias=True, mode="json")


class ReviewCreate(WireModel):
    """Validated input for a new review."""
    appointment_id: str = Field(..., min_length=1)
    patient_id: str = Field(..., min_length=1)
    doctor_id: str = Field(..., min_length=1)
    patient_name: str = ""
    doctor_name: str = ""
    rating: int = Field(..., ge=config.MIN_RATING, le=config.MAX_RATING)
    review_text: str = Field(..., min_length=1)
    appointment_date: Optional[datetime] = None

    @field_validator("rating", mode="before")
    @classmethod
    def rating_not_bool(cls, value):
        return reject_bool(value)


class ReviewRecord(WireModel):
    """A review as held by the store."""
    id: str
    appointment_id: str
    patient_id: str
    doctor_id: str
    patient_name: str = ""
    doctor_name: str = ""
    rating: int = Field(..., ge=config.MIN_RATING, le=config.MAX_RATING)
    review_text: str
    created_at: datetime
    updated_at: datetime
    appointment_date: datetime

    @field_validator("rating", mode="before")
    @classmethod
    def rating_not_bool(cls, value):
        return reject_bool(value)

    @field_validator("created_at", "updated_at", "appointment_date")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        """Treat naive timestamps as UTC so edit-window math never mixes zones."""
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class Review(ReviewRecord):
    """A review as returned to callers, with its edit flag computed at read time."""
    can_edit: bool = False


class ReviewStats(WireModel):
    """Summary statistics for one doctor's reviews."""
    doctor_id: str
    total_reviews: int
    average_rating: float
    rating_distribution: Dict[int, int]
    rating_percentages: Dict[int, int]
    recent_reviews: List[Review] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "doctorId": "doctor_001",
                "totalReviews": 3,
                "averageRating": 4.7,
                "ratingDistribution": {"1": 0, "2": 0, "3": 0, "4": 1, "5": 2},
                "ratingPercentages": {"1": 0, "2": 0, "3": 0, "4": 33, "5": 67},
                "recentReviews": []
            }
        }
    )
