"""Value Objects - Immutable objects defined by their attributes"""

from .application_status import ApplicationStatus
from .match_score import MatchScore
from .job_analysis import JobAnalysisResult
from .oauth_state import OAuthState

__all__ = [
    "ApplicationStatus",
    "MatchScore",
    "JobAnalysisResult",
    "OAuthState",
]
