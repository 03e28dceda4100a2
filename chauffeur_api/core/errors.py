"""Error taxonomy for the inquiry API.

Every client-facing failure is an ``ApiError`` subclass carrying the HTTP
status, a stable machine-readable ``code`` and a message that tells the caller
what to fix. ``main.py`` turns them into ``{"success": false, ...}`` bodies.
"""

from typing import Any, Dict, List, Optional

from fastapi import status


class ApiError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        error: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            error["details"] = self.details
        return error


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"


class MissingFieldError(ValidationError):
    code = "missing_field"

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{_FIELD_LABELS.get(field, field)} is required", {"field": field})


class InvalidEmailError(ValidationError):
    code = "invalid_email"

    def __init__(self, email: str):
        super().__init__("Invalid email format", {"field": "email"})
        self.email = email


class InvalidDateError(ValidationError):
    code = "invalid_date"

    def __init__(self, value: Any):
        super().__init__("Invalid date format", {"field": "date"})
        self.value = value


class DateInPastError(ValidationError):
    code = "date_in_past"

    def __init__(self, value: Any):
        super().__init__("Date must be in the future", {"field": "date"})
        self.value = value


class VehicleNotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "vehicle_not_found"

    def __init__(self, vehicle_id: Any):
        super().__init__(f"Vehicle with ID {vehicle_id} not found", {"vehicleId": vehicle_id})
        self.vehicle_id = vehicle_id


class VerificationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "verification_error"


class MissingTokenError(VerificationError):
    code = "missing_token"

    def __init__(self):
        super().__init__("reCAPTCHA token is required")


class VerificationFailedError(VerificationError):
    code = "verification_failed"

    def __init__(self, reasons: Optional[List[str]] = None):
        self.reasons = list(reasons or [])
        super().__init__(
            "reCAPTCHA verification failed",
            {"errors": self.reasons} if self.reasons else None,
        )


class RateLimitExceededError(ApiError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = "rate_limited"

    def __init__(self, window_seconds: int):
        retry_after = max(1, -(-window_seconds // 60))
        super().__init__(
            "Too many requests, please try again later",
            {"retryAfter": f"{retry_after} minutes"},
        )
        self.window_seconds = window_seconds


class MailDispatchError(Exception):
    """A failed send. Recorded on the result, never returned to the client."""


_FIELD_LABELS = {
    "vehicleId": "Vehicle ID",
    "purpose": "Purpose",
    "date": "Date",
    "email": "Email",
}
