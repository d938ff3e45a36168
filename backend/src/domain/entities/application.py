"""
Application Domain Entity
Immutable job application business object
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..value_objects import ApplicationStatus, MatchScore


@dataclass(frozen=True)
class Application:
    """Job application domain entity - immutable"""

    id: str
    user_id: str

    # Job details
    company: str
    role: str
    job_description: str
    job_url: Optional[str] = None

    # AI output
    match_score: int = 0
    analysis: str = ""  # Serialized JobAnalysisResult
    cover_letter: str = ""

    # Tracking
    status: ApplicationStatus = ApplicationStatus.SAVED
    applied_at: Optional[datetime] = None
    notes: Optional[str] = None

    # Timestamps
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate application data"""
        MatchScore(self.match_score)

    def __str__(self) -> str:
        return f"Application({self.id}, status={self.status.value})"
