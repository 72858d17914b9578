"""Per-doctor review statistics.

Recomputed from the store on every call; nothing is cached.
"""
from decimal import Decimal, ROUND_HALF_UP

from clinic_reviews import config
from clinic_reviews.errors import AggregationError
from clinic_reviews.logging_config import get_logger
from clinic_reviews.models import ReviewStats

logger = get_logger(__name__)

RATINGS = range(config.MIN_RATING, config.MAX_RATING + 1)


def round_half_up(value: float, places: int = 0) -> float:
    """Round like a person would: 0.5 goes up, not to the nearest even."""
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def compute_review_stats(store, doctor_id: str) -> ReviewStats:
    """
    Summarize a doctor's reviews.

    Args:
        store: ReviewStore to read from
        doctor_id: Doctor to summarize

    Returns:
        ReviewStats with count, average (1 decimal), 1-5 distribution,
        per-bucket percentages and the most recent reviews

    Raises:
        AggregationError: If the reviews could not be listed
    """
    try:
        reviews = store.list(doctor_id=doctor_id)
    except Exception as e:
        logger.exception("review_listing_failed", doctor_id=doctor_id)
        raise AggregationError("Failed to fetch review statistics") from e

    total_reviews = len(reviews)

    rating_distribution = {rating: 0 for rating in RATINGS}
    for review in reviews:
        rating_distribution[review.rating] += 1

    if total_reviews > 0:
        average_rating = round_half_up(sum(r.rating for r in reviews) / total_reviews, 1)
        # Each bucket is rounded on its own, so the total may be 99 or 101
        rating_percentages = {
            rating: int(round_half_up(100 * count / total_reviews))
            for rating, count in rating_distribution.items()
        }
    else:
        average_rating = 0
        rating_percentages = {rating: 0 for rating in RATINGS}

    return ReviewStats(
        doctor_id=doctor_id,
        total_reviews=total_reviews,
        average_rating=average_rating,
        rating_distribution=rating_distribution,
        rating_percentages=rating_percentages,
        recent_reviews=reviews[:config.RECENT_REVIEWS_LIMIT]
    )
