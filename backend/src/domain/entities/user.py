"""
User Domain Entity
Identity plus the CV profile used for AI analysis
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class User:
    """User domain entity - immutable"""

    id: str
    name: str
    email: str

    # CV profile
    location: str = ""
    summary: str = ""
    experience: str = ""
    skills: str = ""
    phone: Optional[str] = None

    # Credentials (None for accounts not created through sign-up)
    password_hash: Optional[str] = None

    # Stored CV artifacts
    cv_pdf_url: Optional[str] = None
    cv_latex_url: Optional[str] = None
    cv_filename: Optional[str] = None
    cv_uploaded_at: Optional[datetime] = None

    role: str = "user"

    # Timestamps
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def has_cv(self) -> bool:
        """Check if a CV PDF has been stored"""
        return bool(self.cv_pdf_url)

    def to_cv_text(self) -> str:
        """Render the profile as the CV text sent to the model"""
        return "\n".join([
            f"Name: {self.name}",
            f"Email: {self.email}",
            f"Location: {self.location}",
            "",
            "Professional Summary:",
            self.summary,
            "",
            "Work Experience:",
            self.experience,
            "",
            "Skills:",
            self.skills,
        ]).strip()

    def __str__(self) -> str:
        return f"User({self.id}, {self.email})"
