"""
OAuth Provider Base
Authorization-code flow shared by the social providers
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx
from loguru import logger

from ..config import OAuthConfig, ProviderSettings, SocialProvider
from ..errors import oauth_error, parse_provider_error, to_social_error


@dataclass(frozen=True)
class OAuthTokens:
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[datetime] = None
    scope: Optional[str] = None


@dataclass(frozen=True)
class SocialUserProfile:
    provider: SocialProvider
    provider_id: str
    username: Optional[str] = None
    display_name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    profile_url: Optional[str] = None
    raw_data: Dict[str, Any] = field(default_factory=dict)


def token_expiry(expires_in: Optional[int]) -> Optional[datetime]:
    """Absolute expiry for a relative `expires_in` (seconds)"""
    if not expires_in:
        return None
    return datetime.now(timezone.utc) + timedelta(seconds=int(expires_in))


class OAuthProvider(ABC):
    """One OAuth 2.0 provider"""

    provider: SocialProvider

    def __init__(self, settings: ProviderSettings):
        self.settings = settings

    def get_authorization_url(self, state: str, oauth: OAuthConfig) -> str:
        """Provider authorization URL carrying the CSRF state"""
        params = {
            "client_id": oauth.client_id,
            "redirect_uri": oauth.redirect_uri,
            "scope": " ".join(oauth.scopes),
            "state": state,
        }
        params.update(self.extra_authorization_params())
        return f"{self.settings.auth_url}?{urlencode(params)}"

    def extra_authorization_params(self) -> Dict[str, str]:
        return {}

    async def exchange_code(self, code: str) -> OAuthTokens:
        """
        Exchange an authorization code for tokens

        Raises:
            SocialIntegrationError: OAUTH_ERROR when the provider refuses,
                NETWORK_ERROR when it cannot be reached
        """
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(self.settings.token_url, **self.token_request(code))
        except httpx.HTTPError as e:
            raise to_social_error(e, self.provider.value)

        if response.status_code != 200:
            logger.error(f"{self.provider.display_name} token exchange failed: {response.text}")
            raise oauth_error(self.provider.value, {"status": response.status_code, "body": response.text})

        data = response.json()
        if data.get("error") or not data.get("access_token"):
            logger.error(f"{self.provider.display_name} token exchange rejected: {data.get('error')}")
            raise oauth_error(
                self.provider.value,
                {"error": data.get("error"), "description": data.get("error_description")},
            )

        return OAuthTokens(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            expires_at=token_expiry(data.get("expires_in")),
            scope=data.get("scope"),
        )

    @abstractmethod
    def token_request(self, code: str) -> Dict[str, Any]:
        """Keyword arguments for the token endpoint POST"""
        pass

    @abstractmethod
    async def fetch_profile(self, access_token: str) -> SocialUserProfile:
        """Fetch the connected account's profile"""
        pass

    @abstractmethod
    def revoke_request(self, access_token: str) -> Dict[str, Any]:
        """Keyword arguments for the token revocation request (method and url included)"""
        pass

    def is_revoked(self, response: httpx.Response) -> bool:
        return response.is_success

    async def revoke_token(self, access_token: str) -> bool:
        """Revoke an access token; False when the provider did not confirm it"""
        try:
            async with httpx.AsyncClient() as client:
                response = await client.request(**self.revoke_request(access_token))
        except httpx.HTTPError as e:
            logger.warning(f"{self.provider.display_name} token revocation failed: {e}")
            return False

        if not self.is_revoked(response):
            logger.warning(f"{self.provider.display_name} token revocation refused: {response.status_code}")
            return False
        return True

    async def api_request(self, url: str, access_token: str, headers: Optional[Dict[str, str]] = None) -> Any:
        """Authenticated GET against the provider API"""
        request_headers = {"Authorization": f"Bearer {access_token}"}
        request_headers.update(headers or {})

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(url, headers=request_headers)
        except httpx.HTTPError as e:
            raise to_social_error(e, self.provider.value)

        if not response.is_success:
            try:
                body = response.json()
            except ValueError:
                body = {}
            raise parse_provider_error(self.provider.value, response.status_code, body)

        return response.json()

