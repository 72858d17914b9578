"""Tests for structured logging and request ids."""
import structlog
from flask import Flask, jsonify

from clinic_reviews.logging_config import (
    RequestIDMiddleware,
    generate_request_id,
    get_logger,
    setup_structured_logging,
)


class TestStructuredLogging:
    """Test structured logging with request IDs."""

    def test_logger_methods_work(self):
        """Configured logger accepts key-value events."""
        setup_structured_logging(log_level="INFO")
        logger = get_logger(__name__)

        logger.info("review_created", review_id="review_1", rating=5)
        logger.warning("edit_window_expired", review_id="review_1")
        logger.error("unexpected_error")

    def test_generate_request_id_format(self):
        """Request ids are 'req-' plus 12 hex chars and unique."""
        request_id = generate_request_id()

        assert request_id.startswith("req-")
        assert len(request_id) == 16
        int(request_id[4:], 16)
        assert generate_request_id() != request_id

    def test_request_id_middleware_adds_header(self):
        """Every response carries an X-Request-ID header."""
        app = Flask(__name__)

        @app.route('/test')
        def test_route():
            return "OK"

        app.wsgi_app = RequestIDMiddleware(app.wsgi_app)

        with app.test_client() as client:
            response = client.get('/test')

        request_id = response.headers['X-Request-ID']
        assert request_id.startswith('req-')
        assert len(request_id) == 16

    def test_request_id_from_caller_is_kept(self):
        app = Flask(__name__)

        @app.route('/test')
        def test_route():
            return "OK"

        app.wsgi_app = RequestIDMiddleware(app.wsgi_app)

        with app.test_client() as client:
            response = client.get('/test', headers={'X-Request-ID': 'req-fromgateway'})

        assert response.headers['X-Request-ID'] == 'req-fromgateway'

    def test_request_id_bound_to_log_context(self):
        """Handlers see the request id in structlog's context."""
        app = Flask(__name__)

        @app.route('/context')
        def context_route():
            return jsonify(structlog.contextvars.get_contextvars())

        app.wsgi_app = RequestIDMiddleware(app.wsgi_app)

        with app.test_client() as client:
            response = client.get('/context')

        assert response.get_json()["request_id"] == response.headers['X-Request-ID']
