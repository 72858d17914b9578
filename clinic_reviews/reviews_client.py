"""Client for the reviews API.

Used by other platform services (booking backend, doctor dashboards) to read
and write reviews. Failure envelopes are turned back into the same domain
errors the API raised, keyed by their "code" field.
"""
from datetime import datetime
from typing import List, Optional

import requests

from clinic_reviews import config
from clinic_reviews.circuit_breaker import CircuitBreaker
from clinic_reviews.errors import ERRORS_BY_CODE, ReviewsAPIError
from clinic_reviews.http_client import ServerError, create_http_session
from clinic_reviews.models import Review, ReviewStats


class ReviewsClient:
    """
    Reviews API client with retries and a circuit breaker.

    Raises from every call:
        ValidationError, DuplicateError, NotFoundError, EditWindowExpiredError:
            The API rejected the request
        ReviewsAPIError: Server fault, unreachable API or unknown error code
        CircuitBreakerOpen: Too many recent failures, call not attempted
    """

    def __init__(
        self,
        base_url: str = config.REVIEWS_API_BASE_URL,
        session: Optional[requests.Session] = None,
        breaker: Optional[CircuitBreaker] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or create_http_session()
        self.breaker = breaker or CircuitBreaker(name="reviews-api")

    def list_reviews(
        self,
        doctor_id: Optional[str] = None,
        patient_id: Optional[str] = None,
        appointment_id: Optional[str] = None
    ) -> List[Review]:
        """List reviews, most recent first."""
        params = {
            key: value
            for key, value in {
                "doctorId": doctor_id,
                "patientId": patient_id,
                "appointmentId": appointment_id,
            }.items()
            if value
        }
        data = self._request("GET", "/api/reviews", params=params)
        return [Review.model_validate(review) for review in data.get("reviews", [])]

    def create_review(
        self,
        appointment_id: str,
        patient_id: str,
        doctor_id: str,
        rating: int,
        review_text: str,
        patient_name: str = "",
        doctor_name: str = "",
        appointment_date: Optional[datetime] = None
    ) -> Review:
        """Submit a review for a completed appointment."""
        body = {
            "appointmentId": appointment_id,
            "patientId": patient_id,
            "doctorId": doctor_id,
            "patientName": patient_name,
            "doctorName": doctor_name,
            "rating": rating,
            "reviewText": review_text,
        }
        if appointment_date is not None:
            body["appointmentDate"] = appointment_date.isoformat()

        data = self._request("POST", "/api/reviews", json=body)
        return Review.model_validate(data["review"])

    def update_review(
        self,
        review_id: str,
        rating: Optional[int] = None,
        review_text: Optional[str] = None
    ) -> Review:
        """Edit a review within its edit window."""
        body = {"reviewId": review_id}
        if rating is not None:
            body["rating"] = rating
        if review_text is not None:
            body["reviewText"] = review_text

        data = self._request("PUT", "/api/reviews", json=body)
        return Review.model_validate(data["review"])

    def delete_review(self, review_id: str) -> None:
        """Delete a review within its edit window."""
        self._request("DELETE", "/api/reviews", params={"reviewId": review_id})

    def get_stats(self, doctor_id: str) -> ReviewStats:
        """Get rating statistics for a doctor."""
        data = self._request("GET", f"/api/reviews/stats/{doctor_id}")
        return ReviewStats.model_validate(data["stats"])

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = self.breaker.call(self.session.request, method, url, **kwargs)
        except ServerError as e:
            response = e.response
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            raise ReviewsAPIError(f"Could not connect to reviews API: {e}", status_code=503) from e

        return self._parse_envelope(response)

    @staticmethod
    def _parse_envelope(response: requests.Response) -> dict:
        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code < 400 and data.get("success"):
            return data

        message = data.get("error") or f"Reviews API returned {response.status_code}"
        error_class = ERRORS_BY_CODE.get(data.get("code"))
        if error_class:
            raise error_class(message)
        raise ReviewsAPIError(message, status_code=response.status_code)
