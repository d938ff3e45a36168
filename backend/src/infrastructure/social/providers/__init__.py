"""Social OAuth providers"""

from ..config import SocialConfig, SocialProvider
from .base import OAuthProvider, OAuthTokens, SocialUserProfile
from .github import GitHubProvider
from .linkedin import LinkedInProvider

PROVIDER_CLASSES = {
    SocialProvider.GITHUB: GitHubProvider,
    SocialProvider.LINKEDIN: LinkedInProvider,
}


def get_oauth_provider(config: SocialConfig, provider: SocialProvider) -> OAuthProvider:
    provider = SocialProvider(provider)
    return PROVIDER_CLASSES[provider](config.for_provider(provider))


__all__ = [
    "OAuthProvider",
    "OAuthTokens",
    "SocialUserProfile",
    "GitHubProvider",
    "LinkedInProvider",
    "get_oauth_provider",
]
