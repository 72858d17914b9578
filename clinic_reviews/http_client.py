"""HTTP session with retry and connection pooling for the reviews client.

Pattern: requests.Session whose request method is wrapped with a tenacity
retry (exponential backoff). Connection errors, timeouts and 5xx responses
are retried; 4xx responses are returned untouched because they carry the
API's error envelope and retrying them cannot help.
"""
import logging

import requests
from requests.adapters import HTTPAdapter
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log
)

from clinic_reviews import config

logger = logging.getLogger(__name__)


class ServerError(requests.exceptions.HTTPError):
    """Raised for 5xx responses so they can be retried."""
    pass


RETRYABLE_ERRORS = (
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
    ServerError
)


def raise_for_server_error(response: requests.Response):
    """Raise ServerError for a 5xx response."""
    if response.status_code >= 500:
        raise ServerError(
            f"{response.status_code} Server Error for url: {response.url}",
            response=response
        )


def create_http_session(
    max_retries: int = 3,
    backoff_factor: float = 1.0,
    timeout: int = config.REQUEST_TIMEOUT_SECONDS
) -> requests.Session:
    """
    Create HTTP session with retry and connection pooling.

    Args:
        max_retries: Maximum number of retry attempts (default: 3)
        backoff_factor: Backoff multiplier (default: 1.0)
                       Retry delays: 1s, 2s, 4s; 0 retries immediately
        timeout: Request timeout in seconds (default: REQUEST_TIMEOUT_SECONDS)

    Returns:
        requests.Session whose get/post/put/delete all retry
    """
    session = requests.Session()

    adapter = HTTPAdapter(pool_connections=10, pool_maxsize=10)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    # Session.get/post/put/delete all go through Session.request
    original_request = session.request

    @retry(
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_exponential(
            multiplier=backoff_factor,
            min=backoff_factor,
            max=8 * backoff_factor
        ),
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True
    )
    def request_with_retry(method, url, **kwargs):
        kwargs.setdefault('timeout', timeout)
        response = original_request(method, url, **kwargs)
        raise_for_server_error(response)
        return response

    session.request = request_with_retry

    return session
