"""
Application Status Enum
Lifecycle states of a tracked job application
"""
from enum import Enum


class ApplicationStatus(str, Enum):
    """Job application status"""
    SAVED = "saved"
    APPLIED = "applied"
    INTERVIEWING = "interviewing"
    OFFER = "offer"
    REJECTED = "rejected"

    @property
    def stamps_applied_at(self) -> bool:
        """Setting this status records the application date"""
        return self is ApplicationStatus.APPLIED
