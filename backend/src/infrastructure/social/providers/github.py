"""
GitHub OAuth Provider
Profile access for connected GitHub accounts
"""
from typing import Any, Dict

import httpx

from ..config import SocialProvider
from .base import OAuthProvider, SocialUserProfile


class GitHubProvider(OAuthProvider):
    """GitHub OAuth app. Tokens do not expire and have no refresh token."""

    provider = SocialProvider.GITHUB

    def extra_authorization_params(self) -> Dict[str, str]:
        # Login only, no sign-up screen
        return {"allow_signup": "false"}

    def token_request(self, code: str) -> Dict[str, Any]:
        return {
            "json": {
                "client_id": self.settings.client_id,
                "client_secret": self.settings.client_secret,
                "code": code,
                "redirect_uri": self.settings.redirect_uri,
            },
            "headers": {"Accept": "application/json"},
        }

    async def fetch_profile(self, access_token: str) -> SocialUserProfile:
        user = await self.api_request(
            f"{self.settings.api_url}/user",
            access_token,
            headers={
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
        )

        return SocialUserProfile(
            provider=self.provider,
            provider_id=str(user["id"]),
            username=user.get("login"),
            display_name=user.get("name") or user.get("login"),
            email=user.get("email"),
            avatar_url=user.get("avatar_url"),
            profile_url=user.get("html_url"),
            raw_data=user,
        )

    def revoke_request(self, access_token: str) -> Dict[str, Any]:
        # Revocation authenticates the OAuth app, not the user
        return {
            "method": "DELETE",
            "url": self.settings.revoke_url,
            "auth": (self.settings.client_id, self.settings.client_secret),
            "json": {"access_token": access_token},
            "headers": {"Accept": "application/vnd.github+json"},
        }

    def is_revoked(self, response: httpx.Response) -> bool:
        # 404: token already revoked
        return response.is_success or response.status_code == 404
