"""Tests for logging and error handling."""

import pytest

from shopledger.core.errors import (
    ConflictError,
    DuplicateFieldError,
    ErrorDetail,
    InvalidStateError,
    NotFoundError,
    StaleBillError,
    ValidationError,
)
from shopledger.core.logging import get_request_id, set_request_id


class TestErrorClasses:
    """Test custom exception classes."""

    def test_validation_error_creates_correct_response(self):
        exc = ValidationError("No changes provided", details={"field": "total_amount"})

        assert exc.code == "VALIDATION_ERROR"
        assert exc.status_code == 422
        assert exc.details == {"field": "total_amount"}

        response = exc.to_response()
        assert isinstance(response, ErrorDetail)
        assert response.code == "VALIDATION_ERROR"

    def test_not_found_error_includes_resource_context(self):
        exc = NotFoundError(resource="Bill", resource_id="123")

        assert exc.code == "NOT_FOUND"
        assert exc.status_code == 404
        assert exc.message == "Bill with ID 123 not found"
        assert exc.details == {"resource": "Bill", "resource_id": "123"}

    def test_duplicate_field_error_names_field(self):
        exc = DuplicateFieldError("Wholesaler", "whatsapp_number", "9000000001")

        assert isinstance(exc, ConflictError)
        assert exc.status_code == 409
        assert exc.message == "Whatsapp number already exists for another wholesaler"
        assert exc.details["field"] == "whatsapp_number"

    def test_stale_bill_error_is_conflict(self):
        exc = StaleBillError()

        assert isinstance(exc, ConflictError)
        assert exc.code == "CONFLICT"
        assert exc.status_code == 409
        assert exc.message == "Bill was modified by another request, reload and retry"

    def test_invalid_state_error(self):
        exc = InvalidStateError("Bill BILL-000001 is deleted and cannot be modified")

        assert exc.code == "INVALID_STATE"
        assert exc.status_code == 400
        assert exc.to_response().details is None


class TestRequestIDContext:
    """Test request ID injection."""

    def test_set_and_get_request_id(self):
        set_request_id("test-request-123")

        assert get_request_id() == "test-request-123"


class TestErrorHandling:
    """Test global error handlers and the request id middleware."""

    @pytest.mark.asyncio
    async def test_request_id_header_in_response(self, unauthenticated_client):
        response = await unauthenticated_client.get("/health", headers={"X-Request-ID": "external-123"})

        assert response.headers.get("X-Request-ID") == "external-123"

    @pytest.mark.asyncio
    async def test_request_id_generated_when_missing(self, unauthenticated_client):
        response = await unauthenticated_client.get("/health")

        assert len(response.headers["X-Request-ID"]) > 0

    @pytest.mark.asyncio
    async def test_app_error_rendered_as_json(self, client):
        response = await client.get("/bills/00000000-0000-0000-0000-000000000000")

        assert response.status_code == 404
        assert response.json() == {
            "code": "NOT_FOUND",
            "message": "Bill with ID 00000000-0000-0000-0000-000000000000 not found",
            "details": {
                "resource": "Bill",
                "resource_id": "00000000-0000-0000-0000-000000000000",
            },
        }

    @pytest.mark.asyncio
    async def test_unknown_route_is_404(self, client):
        response = await client.get("/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"detail": "Not Found"}
