"""
Custom Exception Hierarchy
Domain and application-level exceptions, each tagged with an error kind
"""
from enum import Enum
from typing import Iterable, Optional


class ErrorKind(str, Enum):
    """Failure categories, mapped centrally to HTTP status codes"""
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    CONFLICT = "CONFLICT"
    UNCONFIGURED = "UNCONFIGURED"
    UPSTREAM_FAILURE = "UPSTREAM_FAILURE"
    UNAUTHENTICATED = "UNAUTHENTICATED"


ERROR_KIND_STATUS = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION_FAILED: 400,
    ErrorKind.CONFLICT: 409,
    ErrorKind.UNCONFIGURED: 503,
    ErrorKind.UPSTREAM_FAILURE: 500,
    ErrorKind.UNAUTHENTICATED: 401,
}


def status_for(kind: ErrorKind) -> int:
    """HTTP status code for an error kind"""
    return ERROR_KIND_STATUS[kind]


class DomainException(Exception):
    """Base exception for all domain errors"""

    kind: ErrorKind = ErrorKind.VALIDATION_FAILED

    @property
    def public_message(self) -> str:
        """Message safe to return to API callers"""
        return str(self)


class AuthenticationException(DomainException):
    """Caller identity missing or invalid"""

    kind = ErrorKind.UNAUTHENTICATED


class ValidationException(DomainException):
    """Data validation failed"""

    kind = ErrorKind.VALIDATION_FAILED

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        self.message = message
        super().__init__(message)


class ResourceNotFoundException(DomainException):
    """Requested resource not found"""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource_type: str, identifier: str):
        self.resource_type = resource_type
        self.identifier = identifier
        super().__init__(f"{resource_type} not found: {identifier}")

    @property
    def public_message(self) -> str:
        return f"{self.resource_type} not found"


class DuplicateResourceException(DomainException):
    """Resource already exists"""

    kind = ErrorKind.CONFLICT

    def __init__(self, resource_type: str, field: str, value: str, message: Optional[str] = None):
        self.resource_type = resource_type
        self.field = field
        self.value = value
        self._message = message
        super().__init__(f"{resource_type} with {field}='{value}' already exists")

    @property
    def public_message(self) -> str:
        return self._message or f"{self.resource_type} already exists"


class ProviderNotConfiguredException(DomainException):
    """External integration has no usable credentials"""

    kind = ErrorKind.UNCONFIGURED

    def __init__(self, provider: str, display_name: Optional[str] = None):
        self.provider = provider
        self.display_name = display_name or provider
        super().__init__(f"Social provider '{provider}' is not configured. Missing credentials.")

    @property
    def public_message(self) -> str:
        return f"{self.display_name} integration is not configured"


class OAuthStateException(DomainException):
    """OAuth state cookie missing, expired, tampered or mismatched"""

    kind = ErrorKind.VALIDATION_FAILED

    def __init__(self, message: str, expired: bool = False):
        self.expired = expired
        super().__init__(message)


class UpstreamServiceException(DomainException):
    """An external call (LLM, blob store, provider) failed"""

    kind = ErrorKind.UPSTREAM_FAILURE
    default_public_message = "Upstream service failure. Please try again."

    def __init__(self, message: str, public_message: Optional[str] = None):
        self._public_message = public_message
        super().__init__(message)

    @property
    def public_message(self) -> str:
        return self._public_message or self.default_public_message


class MalformedModelOutputException(UpstreamServiceException):
    """Model answered, but not in the expected shape"""

    default_public_message = "The AI returned an unexpected response. Please try again."


class StorageException(UpstreamServiceException):
    """Blob storage operation failed"""

    default_public_message = "File storage operation failed. Please try again."

    def __init__(
        self,
        message: str,
        failed_keys: Optional[Iterable[str]] = None,
        public_message: Optional[str] = None
    ):
        self.failed_keys = list(failed_keys or [])
        super().__init__(message, public_message)


class RepositoryException(UpstreamServiceException):
    """Database operation failed"""

    default_public_message = "Database operation failed. Please try again."
