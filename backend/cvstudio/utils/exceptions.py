"""
Custom exception classes for consistent error handling
"""
from flask import jsonify


class CVStudioException(Exception):
    """Base exception for all CV Studio errors"""
    status_code = 500
    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str, error_code: str = None, details: dict = None):
        self.message = message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self):
        return {
            'error': self.message,
            'error_code': self.error_code,
            'details': self.details
        }

    def to_response(self):
        return jsonify(self.to_dict()), self.status_code


class ValidationError(CVStudioException):
    """Input validation error"""
    status_code = 400
    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str = None, details: dict = None):
        if field:
            message = f"Validation error for field '{field}': {message}"
        super().__init__(message, self.error_code, details)


class InvalidPathError(CVStudioException):
    """Field path does not resolve inside the document"""
    status_code = 400
    error_code = "INVALID_PATH"

    def __init__(self, path: str, reason: str = "Unknown field", details: dict = None):
        message = f"Invalid field path '{path}': {reason}"
        super().__init__(message, self.error_code, {'path': path, **(details or {})})


class AuthenticationError(CVStudioException):
    """Authentication/authorization error"""
    status_code = 401
    error_code = "AUTH_ERROR"

    def __init__(self, message: str = "Authentication required", details: dict = None):
        super().__init__(message, self.error_code, details)


class PaymentRequiredError(CVStudioException):
    """Restricted template export without an entitlement"""
    status_code = 402
    error_code = "PAYMENT_REQUIRED"

    def __init__(self, message: str = "Payment required for this template", details: dict = None):
        super().__init__(message, self.error_code, details)


class EntitlementExpiredError(CVStudioException):
    """Entitlement existed but its access window has passed"""
    status_code = 403
    error_code = "ENTITLEMENT_EXPIRED"

    def __init__(self, message: str = "Access to this template has expired", details: dict = None):
        super().__init__(message, self.error_code, details)


class NotFoundError(CVStudioException):
    """Resource not found error"""
    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, resource: str = "Resource", details: dict = None):
        message = f"{resource} not found"
        super().__init__(message, self.error_code, details)


class DocumentUnavailableError(CVStudioException):
    """Document could not be loaded; the editor can only go back to the list"""
    status_code = 404
    error_code = "DOCUMENT_UNAVAILABLE"
    RECOVERY_ACTION = "return_to_list"

    def __init__(self, cv_id: str, message: str = None, details: dict = None):
        message = message or f"CV {cv_id} is no longer available"
        super().__init__(message, self.error_code, {
            'cv_id': cv_id,
            'recovery_action': self.RECOVERY_ACTION,
            **(details or {})
        })


class ExternalAPIError(CVStudioException):
    """Collaborator API unreachable or misbehaving"""
    status_code = 502
    error_code = "EXTERNAL_API_ERROR"

    def __init__(self, service: str, message: str = None, details: dict = None):
        if not message:
            message = f"{service} API error. Please try again later."
        super().__init__(message, self.error_code, {
            'service': service,
            **(details or {})
        })


class ExportFormatError(CVStudioException):
    """Export endpoint answered with something other than a PDF"""
    status_code = 502
    error_code = "EXPORT_FORMAT_ERROR"

    def __init__(self, message: str = "Failed to generate PDF", content_type: str = None, details: dict = None):
        super().__init__(message, self.error_code, {
            'content_type': content_type,
            **(details or {})
        })


class RateLimitError(CVStudioException):
    """Rate limit exceeded error"""
    status_code = 429
    error_code = "RATE_LIMIT_EXCEEDED"

    def __init__(self, message: str = "Rate limit exceeded. Please try again later.", retry_after: int = None, details: dict = None):
        error_details = details or {}
        if retry_after:
            error_details['retry_after'] = retry_after
        super().__init__(message, self.error_code, error_details)


def handle_cvstudio_exception(e: CVStudioException):
    """Flask error handler for CV Studio exceptions"""
    return e.to_response()


def register_error_handlers(app):
    """Register error handlers with Flask app"""
    app.register_error_handler(CVStudioException, handle_cvstudio_exception)

    @app.errorhandler(400)
    def bad_request(e):
        return jsonify({
            'error': 'Bad request',
            'error_code': 'BAD_REQUEST',
            'details': {'message': str(e)}
        }), 400

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({
            'error': 'Resource not found',
            'error_code': 'NOT_FOUND',
            'details': {}
        }), 404

    @app.errorhandler(429)
    def too_many_requests(e):
        return jsonify({
            'error': 'Rate limit exceeded. Please try again later.',
            'error_code': 'RATE_LIMIT_EXCEEDED',
            'details': {'message': str(e.description) if hasattr(e, 'description') else str(e)}
        }), 429

    @app.errorhandler(500)
    def internal_error(e):
        return jsonify({
            'error': 'An unexpected error occurred. Please try again later.',
            'error_code': 'INTERNAL_ERROR',
            'details': {}
        }), 500
