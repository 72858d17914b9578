"""Tests for per-doctor review statistics."""
from unittest.mock import Mock

import pytest

from clinic_reviews.errors import AggregationError
from clinic_reviews.review_stats import compute_review_stats, round_half_up


def add_reviews(store, clock, ratings, doctor_id="doctor_001"):
    """Create one review per rating, one minute apart."""
    created = []
    for i, rating in enumerate(ratings):
        created.append(store.create(
            appointment_id=f"{doctor_id}_apt_{i}",
            patient_id=f"patient_{i}",
            doctor_id=doctor_id,
            rating=rating,
            review_text=f"Review number {i}"
        ))
        clock.advance(minutes=1)
    return created


def test_no_reviews(store):
    """Doctor without reviews gets zeros everywhere."""
    stats = compute_review_stats(store, "doctor_001")

    assert stats.doctor_id == "doctor_001"
    assert stats.total_reviews == 0
    assert stats.average_rating == 0
    assert stats.rating_distribution == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}
    assert stats.rating_percentages == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}
    assert stats.recent_reviews == []


def test_five_five_four(store, clock):
    """[5, 5, 4] -> 4.7 average, 33/67 split."""
    add_reviews(store, clock, [5, 5, 4])

    stats = compute_review_stats(store, "doctor_001")

    assert stats.total_reviews == 3
    assert stats.average_rating == 4.7
    assert stats.rating_distribution == {1: 0, 2: 0, 3: 0, 4: 1, 5: 2}
    assert stats.rating_percentages == {1: 0, 2: 0, 3: 0, 4: 33, 5: 67}


def test_only_counts_requested_doctor(store, clock):
    add_reviews(store, clock, [1, 1], doctor_id="doctor_002")
    add_reviews(store, clock, [5], doctor_id="doctor_001")

    stats = compute_review_stats(store, "doctor_001")

    assert stats.total_reviews == 1
    assert stats.average_rating == 5
    assert stats.rating_percentages[5] == 100


def test_average_rounds_half_up(store, clock):
    """4.25 rounds to 4.3, not banker's 4.2."""
    add_reviews(store, clock, [5, 4, 4, 4])

    stats = compute_review_stats(store, "doctor_001")

    assert stats.average_rating == 4.3


def test_percentages_rounded_per_bucket(store, clock):
    """Three equal buckets round to 33 each and sum to 99."""
    add_reviews(store, clock, [1, 3, 5])

    stats = compute_review_stats(store, "doctor_001")

    assert stats.rating_percentages == {1: 33, 2: 0, 3: 33, 4: 0, 5: 33}
    assert sum(stats.rating_percentages.values()) == 99


def test_recent_reviews_are_five_newest(store, clock):
    created = add_reviews(store, clock, [5, 4, 3, 2, 1, 5, 4])

    stats = compute_review_stats(store, "doctor_001")

    assert stats.total_reviews == 7
    assert len(stats.recent_reviews) == 5
    newest_first = [r.id for r in reversed(created)][:5]
    assert [r.id for r in stats.recent_reviews] == newest_first


def test_reflects_store_changes_immediately(store, clock):
    """Nothing is cached between calls."""
    reviews = add_reviews(store, clock, [2, 4])
    assert compute_review_stats(store, "doctor_001").average_rating == 3

    store.delete(reviews[0].id)

    stats = compute_review_stats(store, "doctor_001")
    assert stats.total_reviews == 1
    assert stats.average_rating == 4


def test_listing_failure_raises_aggregation_error():
    broken_store = Mock()
    broken_store.list.side_effect = RuntimeError("store unavailable")

    with pytest.raises(AggregationError) as exc_info:
        compute_review_stats(broken_store, "doctor_001")

    assert isinstance(exc_info.value.__cause__, RuntimeError)


@pytest.mark.parametrize("value,places,expected", [
    (4.25, 1, 4.3),
    (4.666666, 1, 4.7),
    (2.5, 0, 3),
    (33.333, 0, 33),
    (66.667, 0, 67),
    (0.5, 0, 1),
])
def test_round_half_up(value, places, expected):
    assert round_half_up(value, places) == expected
