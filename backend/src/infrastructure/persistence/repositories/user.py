"""
User Repository Implementation
SQLAlchemy-based user repository
"""
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from domain.entities import User
from application.repositories.interfaces import IUserRepository
from infrastructure.persistence.models.user import UserModel
from core.exceptions import RepositoryException


UPDATABLE_FIELDS = {
    "name", "email", "phone", "location", "summary", "experience", "skills",
    "cv_pdf_url", "cv_latex_url", "cv_filename", "cv_uploaded_at",
}


class SQLAlchemyUserRepository(IUserRepository):
    """SQLAlchemy implementation of user repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID"""
        try:
            model = await self._get_model(user_id)
            return self._to_entity(model) if model else None

        except Exception as e:
            logger.error(f"Failed to get user by ID {user_id}: {str(e)}")
            await self.session.rollback()
            raise RepositoryException(f"Failed to get user: {str(e)}")

    async def get_first(self) -> Optional[User]:
        try:
            result = await self.session.execute(
                select(UserModel).order_by(UserModel.created_at.asc()).limit(1)
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None

        except Exception as e:
            logger.error(f"Failed to get first user: {str(e)}")
            await self.session.rollback()
            raise RepositoryException(f"Failed to get user: {str(e)}")

    async def create(self, user: User) -> User:
        """Create new user"""
        try:
            model = self._to_model(user)
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)

            return self._to_entity(model)

        except Exception as e:
            logger.error(f"Failed to create user {user.email}: {str(e)}")
            await self.session.rollback()
            raise RepositoryException(f"Failed to create user: {str(e)}")

    async def update_fields(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        """Update profile columns of an existing user"""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update user fields: {sorted(unknown)}")

        try:
            model = await self._get_model(user_id)
            if not model:
                return None

            for name, value in fields.items():
                setattr(model, name, value)

            await self.session.flush()
            await self.session.refresh(model)

            return self._to_entity(model)

        except Exception as e:
            logger.error(f"Failed to update user {user_id}: {str(e)}")
            await self.session.rollback()
            raise RepositoryException(f"Failed to update user: {str(e)}")

    async def exists_by_email(self, email: str) -> bool:
        try:
            result = await self.session.execute(
                select(UserModel.id).where(UserModel.email == email)
            )
            return result.scalar_one_or_none() is not None

        except Exception as e:
            logger.error(f"Failed to check user existence {email}: {str(e)}")
            await self.session.rollback()
            raise RepositoryException(f"Failed to check user existence: {str(e)}")

    async def _get_model(self, user_id: str) -> Optional[UserModel]:
        result = await self.session.execute(
            select(UserModel).where(UserModel.id == user_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            location=model.location or "",
            summary=model.summary or "",
            experience=model.experience or "",
            skills=model.skills or "",
            phone=model.phone,
            password_hash=model.password_hash,
            cv_pdf_url=model.cv_pdf_url,
            cv_latex_url=model.cv_latex_url,
            cv_filename=model.cv_filename,
            cv_uploaded_at=model.cv_uploaded_at,
            role=model.role or "user",
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _to_model(user: User) -> UserModel:
        return UserModel(
            id=user.id,
            name=user.name,
            email=user.email,
            password_hash=user.password_hash,
            phone=user.phone,
            role=user.role,
            location=user.location,
            summary=user.summary,
            experience=user.experience,
            skills=user.skills,
            cv_pdf_url=user.cv_pdf_url,
            cv_latex_url=user.cv_latex_url,
            cv_filename=user.cv_filename,
            cv_uploaded_at=user.cv_uploaded_at,
        )
