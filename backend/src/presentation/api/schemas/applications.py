"""
Application Request/Response Schemas
"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from domain.entities import Application
from domain.value_objects import ApplicationStatus
from .base import CamelModel


class ApplicationCreateRequest(CamelModel):
    """New tracked application"""

    user_id: str = Field(..., min_length=1)
    company: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    job_description: str = Field(..., min_length=1)
    job_url: Optional[str] = None
    match_score: int = Field(0, ge=0, le=100)
    analysis: str = ""
    cover_letter: str = ""
    status: ApplicationStatus = ApplicationStatus.SAVED
    notes: Optional[str] = None


class ApplicationUpdateRequest(CamelModel):
    """Partial update; only fields present in the body are applied"""

    status: Optional[ApplicationStatus] = None
    notes: Optional[str] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class ApplicationResponse(CamelModel):
    id: str
    user_id: str
    company: str
    role: str
    job_description: str
    job_url: Optional[str] = None
    match_score: int
    analysis: str
    cover_letter: str
    status: ApplicationStatus
    applied_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, application: Application) -> "ApplicationResponse":
        return cls(
            id=application.id,
            user_id=application.user_id,
            company=application.company,
            role=application.role,
            job_description=application.job_description,
            job_url=application.job_url,
            match_score=application.match_score,
            analysis=application.analysis,
            cover_letter=application.cover_letter,
            status=application.status,
            applied_at=application.applied_at,
            notes=application.notes,
            created_at=application.created_at,
            updated_at=application.updated_at,
        )


class DeleteResponse(CamelModel):
    success: bool = True
