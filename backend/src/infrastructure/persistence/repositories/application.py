"""
Application Repository Implementation
SQLAlchemy-based job application repository
"""
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from domain.entities import Application
from domain.value_objects import ApplicationStatus
from application.repositories.interfaces import IApplicationRepository
from infrastructure.persistence.models.application import ApplicationModel
from core.exceptions import RepositoryException


UPDATABLE_FIELDS = {"status", "notes", "applied_at", "cover_letter", "analysis", "match_score"}


class SQLAlchemyApplicationRepository(IApplicationRepository):
    """SQLAlchemy implementation of application repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, application_id: str) -> Optional[Application]:
        try:
            model = await self._get_model(application_id)
            return self._to_entity(model) if model else None

        except Exception as e:
            logger.error(f"Failed to get application {application_id}: {str(e)}")
            await self.session.rollback()
            raise RepositoryException(f"Failed to get application: {str(e)}")

    async def list_by_user(self, user_id: str) -> List[Application]:
        try:
            result = await self.session.execute(
                select(ApplicationModel)
                .where(ApplicationModel.user_id == user_id)
                .order_by(ApplicationModel.created_at.desc(), ApplicationModel.id.desc())
            )
            return [self._to_entity(model) for model in result.scalars().all()]

        except Exception as e:
            logger.error(f"Failed to list applications for user {user_id}: {str(e)}")
            await self.session.rollback()
            raise RepositoryException(f"Failed to list applications: {str(e)}")

    async def create(self, application: Application) -> Application:
        try:
            model = ApplicationModel(
                id=application.id,
                user_id=application.user_id,
                company=application.company,
                role=application.role,
                job_description=application.job_description,
                job_url=application.job_url,
                match_score=application.match_score,
                analysis=application.analysis,
                cover_letter=application.cover_letter,
                status=application.status.value,
                applied_at=application.applied_at,
                notes=application.notes,
            )
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)

            return self._to_entity(model)

        except Exception as e:
            logger.error(f"Failed to create application for user {application.user_id}: {str(e)}")
            await self.session.rollback()
            raise RepositoryException(f"Failed to create application: {str(e)}")

    async def update_fields(self, application_id: str, fields: Dict[str, Any]) -> Optional[Application]:
        """Apply all column changes in one flush"""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update application fields: {sorted(unknown)}")

        try:
            model = await self._get_model(application_id)
            if not model:
                return None

            for name, value in fields.items():
                if isinstance(value, ApplicationStatus):
                    value = value.value
                setattr(model, name, value)

            await self.session.flush()
            await self.session.refresh(model)

            return self._to_entity(model)

        except Exception as e:
            logger.error(f"Failed to update application {application_id}: {str(e)}")
            await self.session.rollback()
            raise RepositoryException(f"Failed to update application: {str(e)}")

    async def delete(self, application_id: str) -> bool:
        try:
            model = await self._get_model(application_id)
            if not model:
                return False

            await self.session.delete(model)
            await self.session.flush()
            return True

        except Exception as e:
            logger.error(f"Failed to delete application {application_id}: {str(e)}")
            await self.session.rollback()
            raise RepositoryException(f"Failed to delete application: {str(e)}")

    async def _get_model(self, application_id: str) -> Optional[ApplicationModel]:
        result = await self.session.execute(
            select(ApplicationModel).where(ApplicationModel.id == application_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _to_entity(model: ApplicationModel) -> Application:
        return Application(
            id=model.id,
            user_id=model.user_id,
            company=model.company,
            role=model.role,
            job_description=model.job_description,
            job_url=model.job_url,
            match_score=model.match_score or 0,
            analysis=model.analysis or "",
            cover_letter=model.cover_letter or "",
            status=ApplicationStatus(model.status),
            applied_at=model.applied_at,
            notes=model.notes,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
