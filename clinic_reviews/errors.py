"""Review domain errors.

Each error carries the HTTP status and machine-readable code it maps to, so the
API layer and the client agree on one table.
"""


class ReviewError(Exception):
    """Base class for review failures surfaced to callers."""
    status_code = 400
    code = "REVIEW_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ReviewError):
    """Raised when a required field is missing or a rating is out of range."""
    status_code = 400
    code = "VALIDATION_ERROR"


class DuplicateError(ReviewError):
    """Raised when the appointment already has a review."""
    status_code = 409
    code = "DUPLICATE_REVIEW"


class NotFoundError(ReviewError):
    """Raised when no review matches the given id."""
    status_code = 404
    code = "REVIEW_NOT_FOUND"


class EditWindowExpiredError(ReviewError):
    """Raised when a review is modified after its edit window closed."""
    status_code = 403
    code = "EDIT_WINDOW_EXPIRED"


class AggregationError(ReviewError):
    """Raised when review statistics could not be computed."""
    status_code = 500
    code = "INTERNAL_ERROR"


class ReviewsAPIError(ReviewError):
    """Raised by the client for failures without a known error code."""
    code = "UNKNOWN_ERROR"

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


ERRORS_BY_CODE = {
    cls.code: cls
    for cls in (ValidationError, DuplicateError, NotFoundError, EditWindowExpiredError)
}
