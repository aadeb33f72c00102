"""
Custom Exception Classes for the Applicant Tracker API
"""
from typing import Dict, Any
from fastapi import HTTPException


class ATSBaseException(Exception):
    """Base exception for the Applicant Tracker API"""

    def __init__(
        self,
        message: str,
        error_code: str = None,
        details: Dict[str, Any] = None,
        cause: Exception = None
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/response"""
        result = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ValidationError(ATSBaseException):
    """Raised when request data validation fails"""

    def __init__(self, message: str, field: str = None, value: Any = None, **kwargs):
        details = kwargs.pop('details', {})
        if field:
            details['field'] = field
        if value is not None:
            details['invalid_value'] = str(value)
        super().__init__(message, error_code="VALIDATION_ERROR", details=details, **kwargs)


class DatabaseError(ATSBaseException):
    """Raised when candidate store operations fail"""

    def __init__(self, message: str, operation: str = None, collection: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if operation:
            details['operation'] = operation
        if collection:
            details['collection'] = collection
        super().__init__(message, error_code="DATABASE_ERROR", details=details, **kwargs)


class DocumentConversionError(ATSBaseException):
    """Raised when an uploaded document cannot be converted to text"""

    def __init__(self, message: str, filename: str = None, content_type: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if filename:
            details['filename'] = filename
        if content_type:
            details['content_type'] = content_type
        super().__init__(message, error_code="DOCUMENT_CONVERSION_ERROR", details=details, **kwargs)


class UnsupportedDocumentError(DocumentConversionError):
    """Raised when an uploaded document type is not PDF, DOCX or plain text"""

    def __init__(self, message: str = "Unsupported file type. Please upload PDF or DOCX.", **kwargs):
        super().__init__(message, **kwargs)
        self.error_code = "UNSUPPORTED_DOCUMENT"


class ConfigurationError(ATSBaseException):
    """Raised when configuration is invalid or missing"""

    def __init__(self, message: str, config_key: str = None, config_value: Any = None, **kwargs):
        details = kwargs.pop('details', {})
        if config_key:
            details['config_key'] = config_key
        if config_value is not None:
            details['config_value'] = str(config_value)
        super().__init__(message, error_code="CONFIGURATION_ERROR", details=details, **kwargs)


class AuthenticationError(ATSBaseException):
    """Raised when no authenticated identity is present"""

    def __init__(self, message: str = "Authentication required", **kwargs):
        super().__init__(message, error_code="AUTHENTICATION_ERROR", **kwargs)


class AuthorizationError(ATSBaseException):
    """Raised when the identity may not access a resource"""

    def __init__(self, message: str = "Insufficient permissions", resource: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if resource:
            details['resource'] = resource
        super().__init__(message, error_code="AUTHORIZATION_ERROR", details=details, **kwargs)


# HTTP Exception Mapping
def map_to_http_exception(exc: ATSBaseException) -> HTTPException:
    """Map custom exceptions to HTTP exceptions"""

    status_code_mapping = {
        ValidationError: 400,
        DocumentConversionError: 400,
        UnsupportedDocumentError: 415,
        AuthenticationError: 401,
        AuthorizationError: 403,
        DatabaseError: 500,
        ConfigurationError: 500,
    }

    status_code = status_code_mapping.get(type(exc), 500)

    detail = {
        "error": exc.to_dict(),
        "message": exc.message
    }

    return HTTPException(status_code=status_code, detail=detail)


class ExceptionContext:
    """Context manager for handling exceptions with additional context.

    Custom exceptions pass through untouched. Anything else raised inside a
    storage operation is wrapped in a DatabaseError chained to the original.
    """

    def __init__(self, operation: str, logger=None, collection: str = None, **context):
        self.operation = operation
        self.logger = logger
        self.collection = collection
        self.context = context

    def __enter__(self):
        if self.logger:
            self.logger.debug(f"Starting operation: {self.operation}", extra=self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            if self.logger:
                self.logger.debug(f"Operation completed: {self.operation}", extra=self.context)
            return False

        if self.logger:
            self.logger.error(
                f"Operation failed: {self.operation} - {exc_val}",
                extra={**self.context, "exception_type": exc_type.__name__}
            )

        if isinstance(exc_val, ATSBaseException) or not isinstance(exc_val, Exception):
            return False

        raise DatabaseError(
            f"Could not complete {self.operation}",
            operation=self.operation,
            collection=self.collection,
            details=dict(self.context),
            cause=exc_val
        ) from exc_val
