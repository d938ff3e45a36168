"""
Social Integration Configuration
OAuth provider settings (GitHub, LinkedIn), built once from Settings
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from core.config import Settings
from core.exceptions import ProviderNotConfiguredException


class SocialProvider(str, Enum):
    """Supported OAuth providers"""
    GITHUB = "github"
    LINKEDIN = "linkedin"

    @property
    def display_name(self) -> str:
        return {"github": "GitHub", "linkedin": "LinkedIn"}[self.value]

    @property
    def stored_name(self) -> str:
        """Provider tag on social_profiles rows"""
        return self.value.upper()


@dataclass(frozen=True)
class ProviderSettings:
    """Everything needed to talk to one provider"""
    client_id: str
    client_secret: str
    redirect_uri: str
    scopes: Tuple[str, ...]
    auth_url: str
    token_url: str
    api_url: str
    revoke_url: str


@dataclass(frozen=True)
class OAuthConfig:
    """Credentials handed to an OAuth flow; only built for configured providers"""
    client_id: str
    client_secret: str
    redirect_uri: str
    scopes: List[str]


@dataclass(frozen=True)
class SocialConfig:
    github: ProviderSettings
    linkedin: ProviderSettings
    encryption_key: str = ""

    @classmethod
    def from_settings(cls, settings: Settings) -> "SocialConfig":
        return cls(
            github=ProviderSettings(
                client_id=settings.GITHUB_CLIENT_ID,
                client_secret=settings.GITHUB_CLIENT_SECRET,
                redirect_uri=_redirect_uri(settings, settings.GITHUB_REDIRECT_URI, SocialProvider.GITHUB),
                scopes=("read:user", "user:email", "repo"),
                auth_url="https://github.com/login/oauth/authorize",
                token_url="https://github.com/login/oauth/access_token",
                api_url="https://api.github.com",
                revoke_url=f"https://api.github.com/applications/{settings.GITHUB_CLIENT_ID}/token",
            ),
            linkedin=ProviderSettings(
                client_id=settings.LINKEDIN_CLIENT_ID,
                client_secret=settings.LINKEDIN_CLIENT_SECRET,
                redirect_uri=_redirect_uri(settings, settings.LINKEDIN_REDIRECT_URI, SocialProvider.LINKEDIN),
                scopes=("openid", "profile", "email"),
                auth_url="https://www.linkedin.com/oauth/v2/authorization",
                token_url="https://www.linkedin.com/oauth/v2/accessToken",
                api_url="https://api.linkedin.com/v2",
                revoke_url="https://www.linkedin.com/oauth/v2/revoke",
            ),
            encryption_key=settings.SOCIAL_ENCRYPTION_KEY,
        )

    def for_provider(self, provider: SocialProvider) -> ProviderSettings:
        return getattr(self, SocialProvider(provider).value)


def _redirect_uri(settings: Settings, configured: Optional[str], provider: SocialProvider) -> str:
    return configured or f"{settings.APP_URL}/api/auth/{provider.value}/callback"


def is_provider_configured(config: SocialConfig, provider: SocialProvider) -> bool:
    """True iff both client id and client secret are non-empty"""
    provider_settings = config.for_provider(provider)
    return bool(provider_settings.client_id and provider_settings.client_secret)


def get_provider_config(config: SocialConfig, provider: SocialProvider) -> OAuthConfig:
    """
    OAuth credentials for a provider

    Raises:
        ProviderNotConfiguredException: If the provider is not configured
    """
    provider = SocialProvider(provider)
    if not is_provider_configured(config, provider):
        raise ProviderNotConfiguredException(provider.value, provider.display_name)

    provider_settings = config.for_provider(provider)
    return OAuthConfig(
        client_id=provider_settings.client_id,
        client_secret=provider_settings.client_secret,
        redirect_uri=provider_settings.redirect_uri,
        scopes=list(provider_settings.scopes),
    )


def get_configured_providers(config: SocialConfig) -> List[SocialProvider]:
    return [provider for provider in SocialProvider if is_provider_configured(config, provider)]
