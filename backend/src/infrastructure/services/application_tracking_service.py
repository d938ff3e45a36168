"""
ApplicationTrackingService Implementation
Status lifecycle of tracked job applications
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from application.services.application_tracking import IApplicationTrackingService
from application.repositories.interfaces import IApplicationRepository
from domain.entities import Application
from domain.value_objects import ApplicationStatus
from core.exceptions import ResourceNotFoundException, ValidationException
from core.logging_config import logger


EDITABLE_FIELDS = {"status", "notes"}


class ApplicationTrackingService(IApplicationTrackingService):
    """Application tracking service backed by the application repository"""

    def __init__(self, application_repository: IApplicationRepository):
        self.application_repo = application_repository

    async def list_applications(self, user_id: str) -> List[Application]:
        applications = await self.application_repo.list_by_user(user_id)
        logger.info(f"Found {len(applications)} applications for user {user_id}")
        return applications

    async def get_application(self, application_id: str) -> Application:
        application = await self.application_repo.get_by_id(application_id)
        if application is None:
            raise ResourceNotFoundException("Application", application_id)
        return application

    async def create_application(
        self,
        user_id: str,
        company: str,
        role: str,
        job_description: str,
        job_url: Optional[str] = None,
        match_score: int = 0,
        analysis: str = "",
        cover_letter: str = "",
        status: ApplicationStatus = ApplicationStatus.SAVED,
        notes: Optional[str] = None
    ) -> Application:
        status = _parse_status(status)
        application = Application(
            id=str(uuid4()),
            user_id=user_id,
            company=company,
            role=role,
            job_description=job_description,
            job_url=job_url,
            match_score=match_score,
            analysis=analysis,
            cover_letter=cover_letter,
            status=status,
            applied_at=_now() if status.stamps_applied_at else None,
            notes=notes,
        )

        created = await self.application_repo.create(application)
        logger.info(f"Created application {created.id} for user {user_id} ({company} - {role})")
        return created

    async def update_application(
        self,
        application_id: str,
        changes: Dict[str, Any]
    ) -> Application:
        """
        Apply a partial update

        Keys absent from `changes` are left untouched. Setting status to
        APPLIED stamps applied_at in the same write; any other status
        leaves it alone.
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationException(f"Unknown fields: {', '.join(sorted(unknown))}")

        fields: Dict[str, Any] = dict(changes)
        if "status" in fields:
            if fields["status"] is None:
                raise ValidationException("Status cannot be null", field="status")
            status = _parse_status(fields["status"])
            fields["status"] = status
            if status.stamps_applied_at:
                fields["applied_at"] = _now()

        if not fields:
            return await self.get_application(application_id)

        updated = await self.application_repo.update_fields(application_id, fields)
        if updated is None:
            raise ResourceNotFoundException("Application", application_id)

        logger.info(f"Updated application {application_id}: {sorted(changes)}")
        return updated

    async def delete_application(self, application_id: str) -> None:
        deleted = await self.application_repo.delete(application_id)
        if not deleted:
            raise ResourceNotFoundException("Application", application_id)

        logger.info(f"Deleted application {application_id}")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_status(value: Any) -> ApplicationStatus:
    try:
        return ApplicationStatus(value)
    except ValueError:
        raise ValidationException(f"Invalid status: {value}", field="status")
