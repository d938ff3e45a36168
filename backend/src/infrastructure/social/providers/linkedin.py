"""
LinkedIn OAuth Provider
OpenID Connect sign-in; profile comes from /v2/userinfo
"""
from typing import Any, Dict

from ..config import SocialProvider
from .base import OAuthProvider, SocialUserProfile


class LinkedInProvider(OAuthProvider):
    provider = SocialProvider.LINKEDIN

    def extra_authorization_params(self) -> Dict[str, str]:
        return {"response_type": "code"}

    def token_request(self, code: str) -> Dict[str, Any]:
        return {
            "data": {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.settings.redirect_uri,
                "client_id": self.settings.client_id,
                "client_secret": self.settings.client_secret,
            },
            "headers": {"Content-Type": "application/x-www-form-urlencoded"},
        }

    async def fetch_profile(self, access_token: str) -> SocialUserProfile:
        user_info = await self.api_request(f"{self.settings.api_url}/userinfo", access_token)

        # LinkedIn no longer exposes the vanity URL
        return SocialUserProfile(
            provider=self.provider,
            provider_id=str(user_info["sub"]),
            display_name=user_info.get("name"),
            email=user_info.get("email"),
            avatar_url=user_info.get("picture"),
            profile_url="https://www.linkedin.com/in/me",
            raw_data=user_info,
        )

    def revoke_request(self, access_token: str) -> Dict[str, Any]:
        return {
            "method": "POST",
            "url": self.settings.revoke_url,
            "data": {
                "client_id": self.settings.client_id,
                "client_secret": self.settings.client_secret,
                "token": access_token,
            },
            "headers": {"Content-Type": "application/x-www-form-urlencoded"},
        }
