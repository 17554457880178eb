"""Exception hierarchy shared by the service layer and the API."""

from typing import Any, Dict, Optional


class HeraldException(Exception):
    """Base exception for Herald application."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.request_id = request_id


class ValidationException(HeraldException):
    """Exception for validation errors."""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, str]] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            status_code=422,
            details={"field_errors": field_errors or {}},
            request_id=request_id,
        )


class NotFoundError(HeraldException):
    """Exception for resource not found errors."""

    def __init__(self, resource: str, identifier: Any, request_id: Optional[str] = None):
        message = f"{resource} with identifier '{identifier}' not found"
        super().__init__(
            message=message,
            status_code=404,
            details={"resource": resource, "identifier": str(identifier)},
            request_id=request_id,
        )
        self.resource = resource
        self.identifier = identifier


class AlertStateError(HeraldException):
    """Exception for operations not permitted in the alert's current status."""

    def __init__(
        self,
        alert_id: Any,
        status: str,
        operation: str,
        reason: Optional[str] = None,
        request_id: Optional[str] = None,
    ):
        message = reason or f"Alert {alert_id} cannot be {operation} in '{status}' status"
        super().__init__(
            message=message,
            status_code=409,
            details={"alert_id": str(alert_id), "status": status, "operation": operation},
            request_id=request_id,
        )
        self.status = status
        self.operation = operation


class ConfigurationError(HeraldException):
    """Exception for configuration errors."""

    def __init__(self, setting: str, message: str, request_id: Optional[str] = None):
        super().__init__(
            message=f"Configuration error for '{setting}': {message}",
            status_code=500,
            details={"setting": setting},
            request_id=request_id,
        )


class ExternalServiceError(HeraldException):
    """Exception for failures reported by a hosted provider."""

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int = 502,
        request_id: Optional[str] = None,
    ):
        super().__init__(
            message=message,
            status_code=status_code,
            details={"service": service},
            request_id=request_id,
        )
        self.service = service
