"""In-memory review store.

Pattern: process-wide collection guarded by a re-entrant lock.
Good for: Development, single-process deployments.
NOT for: Multi-process deployments (every process holds its own copy, and
everything is lost on restart).

Business rules:
- one review per appointment
- rating is an integer from 1 to 5
- a review can be edited or deleted only within 24 hours of creation
"""
import threading
import uuid
from datetime import datetime, timedelta, UTC
from typing import Callable, Dict, Iterable, List, Optional

import pydantic
from pydantic.alias_generators import to_camel

from clinic_reviews import config
from clinic_reviews.errors import (
    DuplicateError,
    EditWindowExpiredError,
    NotFoundError,
    ValidationError,
)
from clinic_reviews.logging_config import get_logger
from clinic_reviews.models import Review, ReviewCreate, ReviewRecord

logger = get_logger(__name__)

EDIT_WINDOW = timedelta(hours=config.REVIEW_EDIT_WINDOW_HOURS)

REQUIRED_FIELDS = ("appointment_id", "patient_id", "doctor_id", "rating", "review_text")


def utc_now() -> datetime:
    return datetime.now(UTC)


def is_within_edit_window(created_at: datetime, now: datetime) -> bool:
    """True while no more than the edit window has elapsed since creation."""
    return now - created_at <= EDIT_WINDOW


def generate_review_id() -> str:
    """Generate unique review ID."""
    return f"review_{uuid.uuid4().hex[:12]}"


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _validate(model, data: dict):
    """Validate data against a model, raising the domain ValidationError."""
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        error = e.errors()[0]
        name = str(error["loc"][0]) if error["loc"] else "input"
        field = to_camel(name) if name in model.model_fields else name

        if name == "rating":
            message = (
                f"Invalid rating: must be an integer between "
                f"{config.MIN_RATING} and {config.MAX_RATING}"
            )
        else:
            message = f"Invalid {field}: {error['msg']}"
        raise ValidationError(message) from e


class ReviewStore:
    """
    Authoritative set of reviews for the process.

    Records are kept in an insertion-ordered mapping keyed by id, with a
    secondary index from appointment id to review id. Every public method
    holds the lock for its whole check-then-mutate sequence.

    Returned reviews are fresh views; mutating them does not touch the store.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        """
        Initialize an empty store.

        Args:
            clock: Returns the current UTC time (injectable for tests)
        """
        self._clock = clock
        self._reviews: Dict[str, ReviewRecord] = {}
        self._by_appointment: Dict[str, str] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._reviews)

    def list(
        self,
        doctor_id: Optional[str] = None,
        patient_id: Optional[str] = None,
        appointment_id: Optional[str] = None,
    ) -> List[Review]:
        """
        List reviews matching every supplied filter, most recent first.

        Args:
            doctor_id: Only reviews for this doctor
            patient_id: Only reviews written by this patient
            appointment_id: Only the review for this appointment

        Returns:
            Matching reviews ordered by creation time descending; reviews
            created at the same instant keep insertion order
        """
        filters = {
            "doctor_id": doctor_id,
            "patient_id": patient_id,
            "appointment_id": appointment_id,
        }
        active = {name: value for name, value in filters.items() if value}

        with self._lock:
            now = self._clock()

            if appointment_id:
                review_id = self._by_appointment.get(appointment_id)
                candidates = [self._reviews[review_id]] if review_id else []
            else:
                candidates = self._reviews.values()

            matches = [
                record for record in candidates
                if all(getattr(record, name) == value for name, value in active.items())
            ]

        matches = sorted(matches, key=lambda record: record.created_at, reverse=True)
        return [self._view(record, now) for record in matches]

    def get(self, review_id: str) -> Review:
        """
        Get a review by id.

        Raises:
            NotFoundError: If no review has this id
            ValidationError: If the id is not a string
        """
        with self._lock:
            return self._view(self._get_record(review_id), self._clock())

    def create(
        self,
        appointment_id: Optional[str] = None,
        patient_id: Optional[str] = None,
        doctor_id: Optional[str] = None,
        patient_name: Optional[str] = None,
        doctor_name: Optional[str] = None,
        rating=None,
        review_text: Optional[str] = None,
        appointment_date=None,
    ) -> Review:
        """
        Create a review for a completed appointment.

        Args:
            appointment_id: Appointment being reviewed (one review each)
            patient_id: Reviewing patient
            doctor_id: Reviewed doctor
            patient_name: Patient display name
            doctor_name: Doctor display name
            rating: 1-5, anything that coerces exactly to an integer
            review_text: Review body
            appointment_date: When the appointment took place (default: now)

        Returns:
            The stored review, editable

        Raises:
            ValidationError: If a required field is missing or invalid
            DuplicateError: If the appointment already has a review
        """
        fields = {
            "appointment_id": appointment_id,
            "patient_id": patient_id,
            "doctor_id": doctor_id,
            "patient_name": patient_name,
            "doctor_name": doctor_name,
            "rating": rating,
            "review_text": review_text,
            "appointment_date": appointment_date,
        }

        missing = [to_camel(name) for name in REQUIRED_FIELDS if _is_blank(fields[name])]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        payload = _validate(
            ReviewCreate,
            {name: value for name, value in fields.items() if not _is_blank(value)}
        )

        with self._lock:
            if payload.appointment_id in self._by_appointment:
                logger.warning(
                    "duplicate_review_rejected",
                    appointment_id=payload.appointment_id
                )
                raise DuplicateError("Review already exists for this appointment")

            now = self._clock()
            record = ReviewRecord(
                id=self._new_review_id(),
                appointment_id=payload.appointment_id,
                patient_id=payload.patient_id,
                doctor_id=payload.doctor_id,
                patient_name=payload.patient_name,
                doctor_name=payload.doctor_name,
                rating=payload.rating,
                review_text=payload.review_text,
                created_at=now,
                updated_at=now,
                appointment_date=payload.appointment_date or now,
            )
            self._insert(record)

            logger.info(
                "review_created",
                review_id=record.id,
                appointment_id=record.appointment_id,
                doctor_id=record.doctor_id,
                rating=record.rating
            )
            return self._view(record, now)

    def update(self, review_id: str, rating=None, review_text: Optional[str] = None) -> Review:
        """
        Update rating and/or text of a review still inside its edit window.

        Falsy values keep the current rating or text.

        Raises:
            NotFoundError: If no review has this id
            EditWindowExpiredError: If the edit window has closed
            ValidationError: If the new rating or text is invalid
        """
        with self._lock:
            record = self._get_record(review_id)
            now = self._clock()
            self._check_edit_window(record, now, "edited")

            data = record.model_dump()
            if rating:
                data["rating"] = rating
            if review_text:
                data["review_text"] = review_text
            data["updated_at"] = now

            updated = _validate(ReviewRecord, data)
            self._reviews[review_id] = updated

            logger.info("review_updated", review_id=review_id, rating=updated.rating)
            return self._view(updated, now)

    def delete(self, review_id: str) -> None:
        """
        Permanently remove a review still inside its edit window.

        Raises:
            NotFoundError: If no review has this id
            EditWindowExpiredError: If the edit window has closed
        """
        with self._lock:
            record = self._get_record(review_id)
            self._check_edit_window(record, self._clock(), "deleted")

            del self._reviews[review_id]
            del self._by_appointment[record.appointment_id]

            logger.info("review_deleted", review_id=review_id, appointment_id=record.appointment_id)

    def seed(self, reviews: Iterable[dict]) -> int:
        """
        Load fixture reviews (e.g. demo data at startup).

        Args:
            reviews: Review dicts with id and timestamps already set

        Returns:
            Number of reviews loaded

        Raises:
            ValidationError: If a fixture is malformed
            DuplicateError: If a fixture reuses an id or appointment
        """
        count = 0
        with self._lock:
            for data in reviews:
                record = _validate(ReviewRecord, data)
                if record.id in self._reviews or record.appointment_id in self._by_appointment:
                    raise DuplicateError(f"Seed review {record.id} duplicates an existing review")
                self._insert(record)
                count += 1

        logger.info("reviews_seeded", count=count)
        return count

    def clear(self) -> None:
        """Drop every review."""
        with self._lock:
            self._reviews.clear()
            self._by_appointment.clear()

    def _insert(self, record: ReviewRecord):
        self._reviews[record.id] = record
        self._by_appointment[record.appointment_id] = record.id

    def _new_review_id(self) -> str:
        review_id = generate_review_id()
        while review_id in self._reviews:
            review_id = generate_review_id()
        return review_id

    def _get_record(self, review_id: str) -> ReviewRecord:
        if not isinstance(review_id, str):
            raise ValidationError("Review ID must be a string")
        record = self._reviews.get(review_id)
        if record is None:
            raise NotFoundError("Review not found")
        return record

    def _check_edit_window(self, record: ReviewRecord, now: datetime, action: str):
        if not is_within_edit_window(record.created_at, now):
            logger.warning("edit_window_expired", review_id=record.id, action=action)
            raise EditWindowExpiredError(
                f"Review can only be {action} within {config.REVIEW_EDIT_WINDOW_HOURS} hours"
            )

    @staticmethod
    def _view(record: ReviewRecord, now: datetime) -> Review:
        return Review(
            **record.model_dump(),
            can_edit=is_within_edit_window(record.created_at, now)
        )
