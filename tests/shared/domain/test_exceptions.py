"""Tests for the exception taxonomy."""

from shared.exceptions import (
    CaptureError,
    CheckoutInProgressError,
    GatewayError,
    GatewayTimeout,
    InvalidOperationError,
    ObjectNotFoundError,
    ServiceError,
    ValidationError,
)


class TestExceptions:
    def test_first_message(self):
        error = ValidationError({"shipping_address": [], "phone_number": ["Phone number is required"]})
        assert error.first_message() == "Phone number is required"
        assert ValidationError({}).first_message() == "Invalid input"

    def test_only_timeouts_are_retryable(self):
        assert GatewayTimeout("t").retryable is True
        assert CaptureError("c").retryable is False
        assert GatewayError("g").retryable is False

    def test_hierarchy(self):
        assert issubclass(CheckoutInProgressError, InvalidOperationError)
        assert issubclass(ObjectNotFoundError, ServiceError)

    def test_gateway_error_details(self):
        error = CaptureError("declined", status_code=422, debug_id="abc")
        assert (error.message, error.status_code, error.debug_id) == ("declined", 422, "abc")
