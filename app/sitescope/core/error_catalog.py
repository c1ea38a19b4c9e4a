from dataclasses import dataclass
from enum import Enum

from fastapi import status


class ErrorKind(str, Enum):
    AUTHENTICATION = "AUTHENTICATION"
    AUTHORIZATION = "AUTHORIZATION"
    CONFIGURATION = "CONFIGURATION"
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    UNAVAILABLE = "UNAVAILABLE"
    INTERNAL = "INTERNAL"


@dataclass(frozen=True)
class ErrorDefinition:
    code: str
    message: str
    status_code: int
    kind: ErrorKind


class ErrorCatalog:
    INVALID_TOKEN = ErrorDefinition(
        "INVALID_TOKEN",
        "Sign in required",
        status.HTTP_401_UNAUTHORIZED,
        ErrorKind.AUTHENTICATION,
    )
    PROFILE_NOT_FOUND = ErrorDefinition(
        "PROFILE_NOT_FOUND",
        "Profile not found",
        status.HTTP_404_NOT_FOUND,
        ErrorKind.NOT_FOUND,
    )
    USER_INACTIVE = ErrorDefinition(
        "USER_INACTIVE",
        "User is inactive or suspended",
        status.HTTP_403_FORBIDDEN,
        ErrorKind.AUTHORIZATION,
    )
    PERMISSION_DENIED = ErrorDefinition(
        "PERMISSION_DENIED",
        "Permission denied",
        status.HTTP_403_FORBIDDEN,
        ErrorKind.AUTHORIZATION,
    )
    ORG_ACCESS_DENIED = ErrorDefinition(
        "ORG_ACCESS_DENIED",
        "You do not have access to records outside your organization",
        status.HTTP_403_FORBIDDEN,
        ErrorKind.AUTHORIZATION,
    )
    SITE_ACCESS_DENIED = ErrorDefinition(
        "SITE_ACCESS_DENIED",
        "You do not have access to this site",
        status.HTTP_403_FORBIDDEN,
        ErrorKind.AUTHORIZATION,
    )
    PARTNER_SITE_ACCESS_DENIED = ErrorDefinition(
        "PARTNER_SITE_ACCESS_DENIED",
        "This site is not available to your partner account",
        status.HTTP_403_FORBIDDEN,
        ErrorKind.AUTHORIZATION,
    )
    MISSING_PARTNER_COMPANY = ErrorDefinition(
        "MISSING_PARTNER_COMPANY",
        "Account is not linked to a partner company",
        status.HTTP_403_FORBIDDEN,
        ErrorKind.AUTHORIZATION,
    )
    SCOPE_CONFIGURATION_ERROR = ErrorDefinition(
        "SCOPE_CONFIGURATION_ERROR",
        "Permission denied",
        status.HTTP_403_FORBIDDEN,
        ErrorKind.CONFIGURATION,
    )
    RESOURCE_NOT_FOUND = ErrorDefinition(
        "RESOURCE_NOT_FOUND",
        "Resource not found",
        status.HTTP_404_NOT_FOUND,
        ErrorKind.NOT_FOUND,
    )
    MAPPING_UNAVAILABLE = ErrorDefinition(
        "MAPPING_UNAVAILABLE",
        "Site assignments are temporarily unavailable",
        status.HTTP_503_SERVICE_UNAVAILABLE,
        ErrorKind.UNAVAILABLE,
    )
    DB_UNAVAILABLE = ErrorDefinition(
        "DB_UNAVAILABLE",
        "Database unavailable",
        status.HTTP_503_SERVICE_UNAVAILABLE,
        ErrorKind.UNAVAILABLE,
    )
    VALIDATION_ERROR = ErrorDefinition(
        "VALIDATION_ERROR",
        "Validation error",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        ErrorKind.VALIDATION,
    )
    INTERNAL_ERROR = ErrorDefinition(
        "INTERNAL_ERROR",
        "Internal server error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorKind.INTERNAL,
    )


class AppError(Exception):
    def __init__(self, error: ErrorDefinition, details: object | None = None):
        self.error = error
        self.details = details
        super().__init__(error.message)

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind


class ScopeConfigurationError(AppError):
    """Raised when an actor's scoping data violates an invariant.

    Rendered exactly like a denial so callers never widen access on it.
    """

    def __init__(self, reason: str):
        super().__init__(ErrorCatalog.SCOPE_CONFIGURATION_ERROR)
        self.reason = reason
