"""Tests for review wire models."""
from datetime import datetime, UTC

from clinic_reviews.models import Review, ReviewRecord, ReviewStats


def make_review(**overrides) -> Review:
    data = {
        "id": "review_abc",
        "appointment_id": "apt_001",
        "patient_id": "patient_001",
        "doctor_id": "doctor_001",
        "patient_name": "John Doe",
        "doctor_name": "Dr. Priya Sharma",
        "rating": 5,
        "review_text": "Great",
        "created_at": datetime(2025, 8, 10, 10, 0, tzinfo=UTC),
        "updated_at": datetime(2025, 8, 10, 10, 0, tzinfo=UTC),
        "appointment_date": datetime(2025, 8, 10, 9, 0, tzinfo=UTC),
        "can_edit": True,
    }
    data.update(overrides)
    return Review(**data)


def test_wire_format_uses_camel_case():
    wire = make_review().to_wire()

    assert wire["appointmentId"] == "apt_001"
    assert wire["reviewText"] == "Great"
    assert wire["canEdit"] is True
    assert wire["createdAt"].startswith("2025-08-10T10:00:00")
    assert "appointment_id" not in wire


def test_parses_wire_format():
    review = Review.model_validate(make_review().to_wire())

    assert review.patient_id == "patient_001"
    assert review.can_edit is True
    assert review.created_at == datetime(2025, 8, 10, 10, 0, tzinfo=UTC)


def test_naive_timestamps_treated_as_utc():
    record = ReviewRecord.model_validate({
        "id": "r1",
        "appointment_id": "apt_1",
        "patient_id": "p1",
        "doctor_id": "d1",
        "rating": 3,
        "review_text": "ok",
        "created_at": "2025-08-10T10:00:00",
        "updated_at": "2025-08-10T10:00:00",
        "appointment_date": "2025-08-10T09:00:00",
    })

    assert record.created_at.tzinfo is not None
    assert record.created_at == datetime(2025, 8, 10, 10, 0, tzinfo=UTC)


def test_stats_parse_string_bucket_keys():
    """JSON object keys arrive as strings and come back as ints."""
    stats = ReviewStats.model_validate({
        "doctorId": "doctor_001",
        "totalReviews": 1,
        "averageRating": 4.0,
        "ratingDistribution": {"1": 0, "2": 0, "3": 0, "4": 1, "5": 0},
        "ratingPercentages": {"1": 0, "2": 0, "3": 0, "4": 100, "5": 0},
        "recentReviews": [make_review(rating=4).to_wire()],
    })

    assert stats.rating_distribution[4] == 1
    assert stats.rating_percentages[4] == 100
    assert stats.recent_reviews[0].rating == 4
