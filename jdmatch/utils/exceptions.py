"""
Custom Exception Classes for the Matching Engine
"""
from typing import Dict, Any
from fastapi import HTTPException


class JDMatchBaseException(Exception):
    """Base exception for the matching engine"""

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


class ValidationError(JDMatchBaseException):
    """Raised when a request or fact payload is structurally invalid"""

    def __init__(self, message: str, field: str = None, value: Any = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if field:
            details['field'] = field
        if value is not None:
            details['invalid_value'] = str(value)
        super().__init__(message, error_code="VALIDATION_ERROR", details=details, **kwargs)


class ScoringError(JDMatchBaseException):
    """Raised when a scoring pipeline fails unexpectedly"""

    def __init__(self, message: str, jd_id: str = None, resume_id: str = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if jd_id:
            details['jd_id'] = jd_id
        if resume_id:
            details['resume_id'] = resume_id
        super().__init__(message, error_code="SCORING_ERROR", details=details, **kwargs)


class ConfigurationError(JDMatchBaseException):
    """Raised when configuration is invalid or missing"""

    def __init__(self, message: str, config_key: str = None, config_value: Any = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if config_key:
            details['config_key'] = config_key
        if config_value is not None:
            details['config_value'] = str(config_value)
        super().__init__(message, error_code="CONFIGURATION_ERROR", details=details, **kwargs)


class ReportError(JDMatchBaseException):
    """Raised when a ranking report cannot be written"""

    def __init__(self, message: str, path: str = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if path:
            details['path'] = path
        super().__init__(message, error_code="REPORT_ERROR", details=details, **kwargs)


def map_to_http_exception(exc: JDMatchBaseException) -> HTTPException:
    """Map custom exceptions to HTTP exceptions"""

    status_code_mapping = {
        ValidationError: 400,
        ConfigurationError: 500,
        ScoringError: 500,
        ReportError: 500,
    }

    status_code = status_code_mapping.get(type(exc), 500)

    detail = {
        "error": exc.to_dict(),
        "message": exc.message
    }

    return HTTPException(status_code=status_code, detail=detail)


class ExceptionContext:
    """Context manager for handling exceptions with additional context"""

    def __init__(self, operation: str, logger=None, **context):
        self.operation = operation
        self.logger = logger
        self.context = context

    def __enter__(self):
        if self.logger:
            self.logger.debug(f"Starting operation: {self.operation}", extra={"context": self.context})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            if self.logger:
                self.logger.debug(f"Operation completed: {self.operation}", extra={"context": self.context})
            return False

        if self.logger:
            self.logger.error(
                f"Operation failed: {self.operation} - {exc_val}",
                extra={"context": self.context, "exception_type": exc_type.__name__}
            )

        # Re-raise custom exceptions as-is
        if isinstance(exc_val, JDMatchBaseException):
            return False

        if isinstance(exc_val, (KeyError, ValueError, TypeError)):
            raise ValidationError(
                f"Validation error in {self.operation}: {str(exc_val)}",
                details=dict(self.context),
                cause=exc_val
            ) from exc_val

        raise ScoringError(
            f"Scoring error in {self.operation}: {str(exc_val)}",
            details=dict(self.context),
            cause=exc_val
        ) from exc_val
