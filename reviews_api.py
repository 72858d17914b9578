"""Reviews API for the appointment booking platform.

Flask server with endpoints for:
- Listing reviews (by doctor, patient or appointment)
- Creating, editing and deleting reviews (edit/delete within 24 hours)
- Per-doctor review statistics

Run with: python reviews_api.py
"""
import functools
from datetime import datetime, UTC
from typing import Optional

from flask import Flask, request, jsonify, current_app
from flask_cors import CORS

from clinic_reviews import config
from clinic_reviews.errors import ReviewError, ValidationError
from clinic_reviews.logging_config import (
    RequestIDMiddleware,
    get_logger,
    setup_structured_logging,
)
from clinic_reviews.review_stats import compute_review_stats
from clinic_reviews.review_store import ReviewStore

logger = get_logger(__name__)


def error_response(message: str, status_code: int, code: str):
    """Build the failure envelope shared by every endpoint."""
    return jsonify({
        "success": False,
        "error": message,
        "code": code
    }), status_code


def handles_review_errors(fault_message: str):
    """
    Convert failures raised by a route into JSON error envelopes.

    Domain errors keep their message and status. Anything else is logged with
    its traceback and answered with a generic 500 carrying fault_message.
    """
    def decorator(view):
        @functools.wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ReviewError as e:
                if e.status_code >= 500:
                    logger.exception("review_operation_failed", endpoint=request.endpoint)
                    return error_response(fault_message, e.status_code, e.code)
                return error_response(e.message, e.status_code, e.code)
            except Exception:
                logger.exception("unexpected_error", endpoint=request.endpoint)
                return error_response(fault_message, 500, "INTERNAL_ERROR")
        return wrapper
    return decorator


def get_store() -> ReviewStore:
    return current_app.extensions["review_store"]


def get_json_body() -> dict:
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        raise ValidationError("Request body is required")
    return data


def create_app(store: Optional[ReviewStore] = None) -> Flask:
    """
    Create the reviews Flask app.

    Args:
        store: Review store to serve (default: a new store seeded with the
               demo reviews when SEED_DEMO_REVIEWS is on)

    Returns:
        Configured Flask app
    """
    app = Flask(__name__)
    CORS(app)
    app.wsgi_app = RequestIDMiddleware(app.wsgi_app)

    if store is None:
        store = ReviewStore()
        if config.SEED_DEMO_REVIEWS:
            store.seed(config.SEED_REVIEWS)
    app.extensions["review_store"] = store

    @app.route('/api/reviews', methods=['GET'])
    @handles_review_errors("Failed to fetch reviews")
    def list_reviews():
        """GET /api/reviews?doctorId=doctor_001&patientId=...&appointmentId=...

        Filters are optional and combined; results are most recent first.
        """
        reviews = get_store().list(
            doctor_id=request.args.get('doctorId'),
            patient_id=request.args.get('patientId'),
            appointment_id=request.args.get('appointmentId')
        )

        return jsonify({
            "success": True,
            "reviews": [review.to_wire() for review in reviews],
            "total": len(reviews)
        })

    @app.route('/api/reviews', methods=['POST'])
    @handles_review_errors("Failed to create review")
    def create_review():
        """POST /api/reviews - Submit a review for a completed appointment.

        Expected JSON body:
        {
            "appointmentId": "apt_001",
            "patientId": "patient_001",
            "doctorId": "doctor_001",
            "patientName": "John Doe",
            "doctorName": "Dr. Priya Sharma",
            "rating": 5,
            "reviewText": "Very thorough consultation",
            "appointmentDate": "2025-08-10T09:00:00Z"   (optional)
        }
        """
        data = get_json_body()

        review = get_store().create(
            appointment_id=data.get('appointmentId'),
            patient_id=data.get('patientId'),
            doctor_id=data.get('doctorId'),
            patient_name=data.get('patientName'),
            doctor_name=data.get('doctorName'),
            rating=data.get('rating'),
            review_text=data.get('reviewText'),
            appointment_date=data.get('appointmentDate')
        )

        return jsonify({
            "success": True,
            "review": review.to_wire(),
            "message": "Review submitted successfully"
        }), 201

    @app.route('/api/reviews', methods=['PUT'])
    @handles_review_errors("Failed to update review")
    def update_review():
        """PUT /api/reviews - Edit a review within 24 hours of submitting it.

        Request body:
        {
            "reviewId": "review_1a2b3c4d5e6f",
            "rating": 4,              (optional)
            "reviewText": "Updated"   (optional)
        }
        """
        data = get_json_body()
        review_id = data.get('reviewId')
        if not review_id:
            raise ValidationError("Review ID is required")

        review = get_store().update(
            review_id,
            rating=data.get('rating'),
            review_text=data.get('reviewText')
        )

        return jsonify({
            "success": True,
            "review": review.to_wire(),
            "message": "Review updated successfully"
        })

    @app.route('/api/reviews', methods=['DELETE'])
    @handles_review_errors("Failed to delete review")
    def delete_review():
        """DELETE /api/reviews?reviewId=review_1a2b3c4d5e6f - Delete within 24 hours."""
        review_id = request.args.get('reviewId')
        if not review_id:
            raise ValidationError("Review ID is required")

        get_store().delete(review_id)

        return jsonify({
            "success": True,
            "message": "Review deleted successfully"
        })

    @app.route('/api/reviews/stats/<doctor_id>', methods=['GET'])
    @handles_review_errors("Failed to fetch review statistics")
    def get_review_stats(doctor_id):
        """GET /api/reviews/stats/doctor_001 - Rating summary for a doctor."""
        stats = compute_review_stats(get_store(), doctor_id)

        return jsonify({
            "success": True,
            "stats": stats.to_wire()
        })

    @app.route('/health', methods=['GET'])
    def health_check():
        """GET /health - Health check endpoint."""
        return jsonify({
            "success": True,
            "status": "healthy",
            "total_reviews": len(get_store()),
            "timestamp": datetime.now(UTC).isoformat()
        })

    return app


app = create_app()


def print_startup_info():
    """Print server startup information."""
    print("=" * 70)
    print("REVIEWS API SERVER")
    print("=" * 70)
    print(f"\nServer: http://localhost:{config.REVIEWS_API_PORT}")
    print(f"Reviews loaded: {len(app.extensions['review_store'])}")
    print(f"Edit window: {config.REVIEW_EDIT_WINDOW_HOURS} hours")

    print("\nEndpoints:")
    print("   GET    /api/reviews?doctorId=...     - List reviews")
    print("   POST   /api/reviews                  - Submit review")
    print("   PUT    /api/reviews                  - Edit review (24h)")
    print("   DELETE /api/reviews?reviewId=...     - Delete review (24h)")
    print("   GET    /api/reviews/stats/<doctorId> - Doctor rating stats")
    print("   GET    /health                       - Health check")

    print("\nServer ready! Waiting for requests...")
    print("=" * 70)


if __name__ == '__main__':
    setup_structured_logging(config.LOG_LEVEL)
    print_startup_info()
    app.run(
        debug=True,
        port=config.REVIEWS_API_PORT,
        host=config.REVIEWS_API_HOST
    )
