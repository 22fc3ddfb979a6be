# Error taxonomy for the InfluenceTie API
# Services raise these close to the failing check; core.responses maps them to HTTP.

from typing import Any, Dict, List, Optional
from fastapi import status


class ErrorCode:
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"

    # Accounts
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    EMAIL_ALREADY_EXISTS = "EMAIL_ALREADY_EXISTS"
    PHONE_ALREADY_EXISTS = "PHONE_ALREADY_EXISTS"
    INSTAGRAM_ALREADY_EXISTS = "INSTAGRAM_ALREADY_EXISTS"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    INVALID_OTP = "INVALID_OTP"
    OTP_EXPIRED = "OTP_EXPIRED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INCORRECT_PASSWORD = "INCORRECT_PASSWORD"
    NO_FIELDS = "NO_FIELDS"

    # Campaigns
    CAMPAIGN_NOT_FOUND = "CAMPAIGN_NOT_FOUND"
    INVALID_DATE_RANGE = "INVALID_DATE_RANGE"
    CAMPAIGN_NOT_ACTIVE = "CAMPAIGN_NOT_ACTIVE"
    CAMPAIGN_EXPIRED = "CAMPAIGN_EXPIRED"
    CAMPAIGN_HAS_PARTICIPANTS = "CAMPAIGN_HAS_PARTICIPANTS"
    ALREADY_APPLIED = "ALREADY_APPLIED"
    APPLICATION_NOT_FOUND = "APPLICATION_NOT_FOUND"
    APPLICATION_ALREADY_DECIDED = "APPLICATION_ALREADY_DECIDED"

    # Delegated identity
    OAUTH_NOT_CONFIGURED = "OAUTH_NOT_CONFIGURED"
    OAUTH_FAILED = "OAUTH_FAILED"


class Messages:
    SUCCESS = "Success"
    INTERNAL_ERROR = "Internal server error"
    VALIDATION_ERROR = "Validation failed"
    INVALID_CREDENTIALS = "Invalid email or password"
    EMAIL_ALREADY_EXISTS = "Email already exists"
    PHONE_ALREADY_EXISTS = "Phone number already exists"
    INSTAGRAM_ALREADY_EXISTS = "Instagram handle already exists"
    USER_NOT_FOUND = "User not found"
    INVALID_OTP = "Invalid or expired OTP"
    OTP_EXPIRED = "OTP has expired"
    AUTH_REQUIRED = "Access token required"
    INVALID_TOKEN = "Invalid or expired token"
    CAMPAIGN_NOT_FOUND = "Campaign not found"
    APPLICATION_NOT_FOUND = "Application not found"


class AppError(Exception):
    """Base application error carrying an HTTP status and a machine-readable code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: str = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def __repr__(self):
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class ValidationAppError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = ErrorCode.VALIDATION_ERROR

    def __init__(self, errors: Dict[str, List[str]], message: str = Messages.VALIDATION_ERROR):
        super().__init__(message, details=errors)
        self.errors = errors


class BadRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = ErrorCode.BAD_REQUEST


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_code = ErrorCode.UNAUTHORIZED


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_code = ErrorCode.FORBIDDEN


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_code = ErrorCode.NOT_FOUND


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_code = ErrorCode.CONFLICT


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = ErrorCode.INTERNAL_ERROR
