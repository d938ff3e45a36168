"""
User Profile Schemas
"""
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from domain.entities import User
from .base import CamelModel


class UserProfileInput(CamelModel):
    """Create-or-update payload for the CV profile"""

    id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    location: str = Field(..., min_length=1, max_length=200)
    summary: str = Field(..., min_length=1, max_length=2000)
    experience: str = Field(..., min_length=1, max_length=10000)
    skills: str = Field(..., min_length=1, max_length=1000)
    phone: Optional[str] = Field(None, max_length=50)


class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    location: str
    summary: str
    experience: str
    skills: str
    phone: Optional[str] = None
    cv_pdf_url: Optional[str] = None
    cv_latex_url: Optional[str] = None
    cv_filename: Optional[str] = None
    cv_uploaded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            location=user.location,
            summary=user.summary,
            experience=user.experience,
            skills=user.skills,
            phone=user.phone,
            cv_pdf_url=user.cv_pdf_url,
            cv_latex_url=user.cv_latex_url,
            cv_filename=user.cv_filename,
            cv_uploaded_at=user.cv_uploaded_at,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
