"""
Social Integration Errors
Error codes for provider failures and the messages shown to users
"""
from enum import Enum
from typing import Any, Optional

import httpx


class SocialErrorCode(str, Enum):
    OAUTH_ERROR = "OAUTH_ERROR"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    TOKEN_INVALID = "TOKEN_INVALID"
    RATE_LIMITED = "RATE_LIMITED"
    SCOPE_INSUFFICIENT = "SCOPE_INSUFFICIENT"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    NOT_CONNECTED = "NOT_CONNECTED"
    ALREADY_CONNECTED = "ALREADY_CONNECTED"
    SYNC_FAILED = "SYNC_FAILED"


RETRYABLE_ERRORS = {
    SocialErrorCode.RATE_LIMITED,
    SocialErrorCode.NETWORK_ERROR,
    SocialErrorCode.PROVIDER_ERROR,
}

ERROR_MESSAGES = {
    SocialErrorCode.OAUTH_ERROR: "OAuth authentication failed",
    SocialErrorCode.TOKEN_EXPIRED: "Access token has expired",
    SocialErrorCode.TOKEN_INVALID: "Access token is invalid or revoked",
    SocialErrorCode.RATE_LIMITED: "Rate limit exceeded, please try again later",
    SocialErrorCode.SCOPE_INSUFFICIENT: "Additional permissions are required",
    SocialErrorCode.PROVIDER_ERROR: "The service provider returned an error",
    SocialErrorCode.NETWORK_ERROR: "Network error, please check your connection",
    SocialErrorCode.NOT_CONNECTED: "Account is not connected",
    SocialErrorCode.ALREADY_CONNECTED: "Account is already connected",
    SocialErrorCode.SYNC_FAILED: "Data synchronization failed",
}

USER_FRIENDLY_MESSAGES = {
    SocialErrorCode.OAUTH_ERROR: "We couldn't connect to your account. Please try again.",
    SocialErrorCode.TOKEN_EXPIRED: "Your session has expired. Please reconnect your account.",
    SocialErrorCode.TOKEN_INVALID: "Your connection is no longer valid. Please reconnect your account.",
    SocialErrorCode.RATE_LIMITED: "Too many requests. Please wait a few minutes and try again.",
    SocialErrorCode.SCOPE_INSUFFICIENT: "Additional permissions are needed. Please reconnect with the required permissions.",
    SocialErrorCode.PROVIDER_ERROR: "The service is temporarily unavailable. Please try again later.",
    SocialErrorCode.NETWORK_ERROR: "Connection failed. Please check your internet and try again.",
    SocialErrorCode.NOT_CONNECTED: "This account is not connected. Please connect it first.",
    SocialErrorCode.ALREADY_CONNECTED: "This account is already connected.",
    SocialErrorCode.SYNC_FAILED: "We couldn't sync your data. Please try again.",
}


class SocialIntegrationError(Exception):
    """A provider interaction failed"""

    def __init__(
        self,
        code: SocialErrorCode,
        message: Optional[str] = None,
        provider: Optional[str] = None,
        details: Any = None
    ):
        self.code = code
        self.provider = provider
        self.details = details
        super().__init__(message or ERROR_MESSAGES[code])

    @property
    def is_retryable(self) -> bool:
        return self.code in RETRYABLE_ERRORS

    @property
    def user_friendly_message(self) -> str:
        return USER_FRIENDLY_MESSAGES.get(self.code, "An unexpected error occurred. Please try again.")


def oauth_error(provider: str, details: Any = None) -> SocialIntegrationError:
    return SocialIntegrationError(SocialErrorCode.OAUTH_ERROR, provider=provider, details=details)


def rate_limit_error(provider: str, retry_after: Optional[int] = None) -> SocialIntegrationError:
    message = ERROR_MESSAGES[SocialErrorCode.RATE_LIMITED]
    if retry_after:
        message = f"{message}. Retry after {retry_after} seconds."
    return SocialIntegrationError(
        SocialErrorCode.RATE_LIMITED, message, provider=provider, details={"retry_after": retry_after}
    )


def parse_provider_error(provider: str, status_code: int, body: Any) -> SocialIntegrationError:
    """Map a failed provider API response to an error code"""
    if status_code == 429:
        retry_after = None
        if isinstance(body, dict) and "retry_after" in body:
            try:
                retry_after = int(body["retry_after"])
            except (TypeError, ValueError):
                retry_after = None
        return rate_limit_error(provider, retry_after)

    if status_code == 401:
        return SocialIntegrationError(SocialErrorCode.TOKEN_INVALID, provider=provider)

    if status_code == 403:
        return SocialIntegrationError(SocialErrorCode.SCOPE_INSUFFICIENT, provider=provider, details=body)

    return SocialIntegrationError(
        SocialErrorCode.PROVIDER_ERROR,
        provider=provider,
        details={"status": status_code, "body": body},
    )


def to_social_error(error: Exception, provider: Optional[str] = None) -> SocialIntegrationError:
    """Normalize any failure raised while talking to a provider"""
    if isinstance(error, SocialIntegrationError):
        return error

    if isinstance(error, httpx.RequestError):
        return SocialIntegrationError(SocialErrorCode.NETWORK_ERROR, provider=provider, details=str(error))

    return SocialIntegrationError(SocialErrorCode.PROVIDER_ERROR, str(error), provider=provider)
