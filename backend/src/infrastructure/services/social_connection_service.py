"""
Social Connection Service
Connects accounts (code exchange, profile fetch, encrypted token storage) and disconnects them
"""
import json
from datetime import datetime, timezone

from application.repositories.interfaces import ISocialProfileRepository
from application.services.security.interfaces import IEncryptionService
from domain.entities import SocialProfile
from infrastructure.security.token_cipher import TokenCipherError
from infrastructure.social.config import SocialConfig, SocialProvider, is_provider_configured
from infrastructure.social.errors import to_social_error
from infrastructure.social.providers import get_oauth_provider
from core.logging_config import logger


class SocialConnectionService:
    """Connects GitHub/LinkedIn accounts to users"""

    def __init__(
        self,
        config: SocialConfig,
        profile_repository: ISocialProfileRepository,
        encryption_service: IEncryptionService
    ):
        self.config = config
        self.profile_repo = profile_repository
        self.encryption = encryption_service

    async def connect(self, provider: SocialProvider, user_id: str, code: str) -> SocialProfile:
        """
        Exchange the authorization code and store the connected profile

        Raises:
            SocialIntegrationError: Any provider failure, normalized
        """
        oauth_provider = get_oauth_provider(self.config, provider)

        try:
            tokens = await oauth_provider.exchange_code(code)
            profile = await oauth_provider.fetch_profile(tokens.access_token)
        except Exception as e:
            social_error = to_social_error(e, provider.value)
            logger.error(f"{provider.display_name} connection failed for user {user_id}: {social_error.code.value} {social_error}")
            raise social_error

        stored = await self.profile_repo.upsert(SocialProfile(
            user_id=user_id,
            provider=provider.stored_name,
            provider_id=profile.provider_id,
            access_token=self.encryption.encrypt(tokens.access_token),
            refresh_token=self.encryption.encrypt(tokens.refresh_token) if tokens.refresh_token else None,
            token_expiry=tokens.expires_at,
            scope=tokens.scope,
            username=profile.username,
            display_name=profile.display_name,
            avatar_url=profile.avatar_url,
            profile_url=profile.profile_url,
            profile_data=json.dumps(profile.raw_data) if profile.raw_data else None,
            last_sync_at=datetime.now(timezone.utc),
            sync_status="COMPLETED",
        ))

        logger.info(f"Connected {provider.display_name} account {profile.provider_id} to user {user_id}")
        return stored

    async def disconnect(self, provider: SocialProvider, user_id: str) -> bool:
        """
        Revoke the stored access token and delete the connected profile

        Revocation is best effort: the profile is deleted even when the
        provider cannot be reached or the stored token cannot be decrypted.

        Returns:
            False when the user had no profile for the provider
        """
        stored = await self.profile_repo.get(user_id, provider.stored_name)
        if stored is None:
            return False

        if is_provider_configured(self.config, provider):
            try:
                access_token = self.encryption.decrypt(stored.access_token)
            except TokenCipherError as e:
                logger.warning(f"Cannot decrypt stored {provider.display_name} token for user {user_id}: {e}")
            else:
                await get_oauth_provider(self.config, provider).revoke_token(access_token)

        deleted = await self.profile_repo.delete(user_id, provider.stored_name)
        logger.info(f"Disconnected {provider.display_name} account {stored.provider_id} from user {user_id}")
        return deleted
