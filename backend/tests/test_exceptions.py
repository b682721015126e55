"""
Tests for custom exception classes
"""
import pytest
from cvstudio.utils.exceptions import (
    CVStudioException,
    ValidationError,
    InvalidPathError,
    AuthenticationError,
    PaymentRequiredError,
    EntitlementExpiredError,
    NotFoundError,
    DocumentUnavailableError,
    ExternalAPIError,
    ExportFormatError,
    RateLimitError,
)


class TestCVStudioException:
    """Test base exception class"""

    def test_basic_exception(self):
        """Test basic exception creation"""
        exc = CVStudioException("Test error")
        assert exc.message == "Test error"
        assert exc.status_code == 500
        assert exc.error_code == "INTERNAL_ERROR"

    def test_exception_to_dict(self):
        """Test exception serialization"""
        exc = CVStudioException("Test error", details={"key": "value"})
        result = exc.to_dict()
        assert result["error"] == "Test error"
        assert result["error_code"] == "INTERNAL_ERROR"
        assert result["details"] == {"key": "value"}

    def test_exception_to_response(self, app):
        """Test exception to Flask response"""
        exc = CVStudioException("Test error")
        with app.app_context():
            response, status = exc.to_response()
        assert status == 500
        assert response.get_json()["error"] == "Test error"


class TestValidationError:
    """Test validation error"""

    def test_validation_error(self):
        exc = ValidationError("Invalid input", field="month")
        assert exc.message == "Validation error for field 'month': Invalid input"
        assert exc.status_code == 400
        assert exc.error_code == "VALIDATION_ERROR"

    def test_invalid_path_error(self):
        exc = InvalidPathError("data.nope", "unknown field 'nope'")
        assert exc.status_code == 400
        assert exc.details["path"] == "data.nope"
        assert "data.nope" in exc.message


class TestEntitlementErrors:
    """Test payment and entitlement errors"""

    def test_payment_required(self):
        exc = PaymentRequiredError()
        assert exc.status_code == 402
        assert exc.error_code == "PAYMENT_REQUIRED"

    def test_entitlement_expired(self):
        exc = EntitlementExpiredError("Access expired (7-day window)")
        assert exc.status_code == 403
        assert exc.message == "Access expired (7-day window)"


class TestDocumentUnavailableError:
    """Load failures offer exactly one way out"""

    def test_recovery_action(self):
        exc = DocumentUnavailableError("cv-1")
        assert exc.status_code == 404
        assert exc.details["recovery_action"] == "return_to_list"
        assert exc.details["cv_id"] == "cv-1"


class TestOtherErrors:
    """Test remaining error types"""

    def test_auth_error(self):
        exc = AuthenticationError()
        assert exc.status_code == 401
        assert exc.error_code == "AUTH_ERROR"

    def test_not_found_error(self):
        exc = NotFoundError("CV")
        assert exc.message == "CV not found"
        assert exc.status_code == 404

    def test_external_api_error(self):
        exc = ExternalAPIError("CV API")
        assert "CV API" in exc.message
        assert exc.status_code == 502
        assert exc.details["service"] == "CV API"

    def test_export_format_error(self):
        exc = ExportFormatError("Payment required for Pro template", content_type="application/json")
        assert exc.status_code == 502
        assert exc.details["content_type"] == "application/json"

    def test_rate_limit_error(self):
        exc = RateLimitError(retry_after=30)
        assert exc.status_code == 429
        assert exc.details["retry_after"] == 30


class TestErrorHandlers:
    """Registered handlers turn exceptions into JSON"""

    def test_unknown_route_is_json(self, client):
        response = client.get('/api/does-not-exist')
        assert response.status_code == 404
        assert response.get_json()["error_code"] == "NOT_FOUND"
