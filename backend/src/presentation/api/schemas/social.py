"""
Social Integration Schemas
Connection status per provider; tokens never leave the server
"""
from datetime import datetime
from typing import Optional

from pydantic import field_validator

from domain.entities import SocialProfile
from infrastructure.social.config import SocialProvider
from .base import CamelModel


class SocialProviderInput(CamelModel):
    """Accepts the provider in any case ("github", "GITHUB")"""

    provider: SocialProvider

    @field_validator("provider", mode="before")
    @classmethod
    def normalize_provider(cls, v):
        return v.lower() if isinstance(v, str) else v


class IntegrationStatus(CamelModel):
    provider: SocialProvider
    name: str
    connected: bool
    username: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    profile_url: Optional[str] = None
    last_sync_at: Optional[datetime] = None
    sync_status: Optional[str] = None

    @classmethod
    def for_provider(cls, provider: SocialProvider, profile: Optional[SocialProfile]) -> "IntegrationStatus":
        if profile is None:
            return cls(provider=provider, name=provider.display_name, connected=False)

        return cls(
            provider=provider,
            name=provider.display_name,
            connected=True,
            username=profile.username,
            display_name=profile.display_name,
            avatar_url=profile.avatar_url,
            profile_url=profile.profile_url,
            last_sync_at=profile.last_sync_at,
            sync_status=profile.sync_status.lower() if profile.sync_status else None,
        )
