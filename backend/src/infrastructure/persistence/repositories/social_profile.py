"""
Social Profile Repository Implementation
Connected OAuth accounts, one per (user, provider)
"""
from dataclasses import asdict
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from domain.entities import SocialProfile
from application.repositories.interfaces import ISocialProfileRepository
from infrastructure.persistence.models.social_profile import SocialProfileModel
from core.exceptions import RepositoryException


class SQLAlchemySocialProfileRepository(ISocialProfileRepository):
    """SQLAlchemy implementation of social profile repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: str, provider: str) -> Optional[SocialProfile]:
        try:
            model = await self._get_model(user_id, provider)
            return self._to_entity(model) if model else None

        except Exception as e:
            logger.error(f"Failed to get {provider} profile for user {user_id}: {str(e)}")
            await self.session.rollback()
            raise RepositoryException(f"Failed to get social profile: {str(e)}")

    async def list_by_user(self, user_id: str) -> List[SocialProfile]:
        try:
            result = await self.session.execute(
                select(SocialProfileModel)
                .where(SocialProfileModel.user_id == user_id)
                .order_by(SocialProfileModel.provider)
            )
            return [self._to_entity(model) for model in result.scalars().all()]

        except Exception as e:
            logger.error(f"Failed to list social profiles for user {user_id}: {str(e)}")
            await self.session.rollback()
            raise RepositoryException(f"Failed to list social profiles: {str(e)}")

    async def delete(self, user_id: str, provider: str) -> bool:
        try:
            model = await self._get_model(user_id, provider)
            if not model:
                return False

            await self.session.delete(model)
            await self.session.flush()
            return True

        except Exception as e:
            logger.error(f"Failed to delete {provider} profile for user {user_id}: {str(e)}")
            await self.session.rollback()
            raise RepositoryException(f"Failed to delete social profile: {str(e)}")

    async def upsert(self, profile: SocialProfile) -> SocialProfile:
        try:
            model = await self._get_model(profile.user_id, profile.provider)
            values = {k: v for k, v in asdict(profile).items() if k != "id"}

            if model is None:
                model = SocialProfileModel(**values)
                self.session.add(model)
            else:
                for name, value in values.items():
                    setattr(model, name, value)

            await self.session.flush()
            await self.session.refresh(model)

            return self._to_entity(model)

        except Exception as e:
            logger.error(f"Failed to upsert {profile.provider} profile for user {profile.user_id}: {str(e)}")
            await self.session.rollback()
            raise RepositoryException(f"Failed to store social profile: {str(e)}")

    async def _get_model(self, user_id: str, provider: str) -> Optional[SocialProfileModel]:
        result = await self.session.execute(
            select(SocialProfileModel).where(
                SocialProfileModel.user_id == user_id,
                SocialProfileModel.provider == provider,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _to_entity(model: SocialProfileModel) -> SocialProfile:
        return SocialProfile(
            id=model.id,
            user_id=model.user_id,
            provider=model.provider,
            provider_id=model.provider_id,
            access_token=model.access_token,
            refresh_token=model.refresh_token,
            token_expiry=model.token_expiry,
            scope=model.scope,
            username=model.username,
            display_name=model.display_name,
            avatar_url=model.avatar_url,
            profile_url=model.profile_url,
            profile_data=model.profile_data,
            last_sync_at=model.last_sync_at,
            sync_status=model.sync_status,
        )
