"""
Application Tracking Service Interface
Create, list, update and delete tracked job applications
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from domain.entities import Application
from domain.value_objects import ApplicationStatus


class IApplicationTrackingService(ABC):
    """Application tracking service interface"""

    @abstractmethod
    async def list_applications(self, user_id: str) -> List[Application]:
        """All applications of a user, newest first"""
        pass

    @abstractmethod
    async def get_application(self, application_id: str) -> Application:
        """
        Get one application

        Raises:
            ResourceNotFoundException: If no application has this ID
        """
        pass

    @abstractmethod
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
        """Create an application; status APPLIED stamps applied_at"""
        pass

    @abstractmethod
    async def update_application(
        self,
        application_id: str,
        changes: Dict[str, Any]
    ) -> Application:
        """
        Partially update status and/or notes

        Args:
            application_id: Application ID
            changes: Only the keys the caller set ("status", "notes")

        Returns:
            Updated Application entity

        Raises:
            ResourceNotFoundException: If no application has this ID
        """
        pass

    @abstractmethod
    async def delete_application(self, application_id: str) -> None:
        """
        Delete an application

        Raises:
            ResourceNotFoundException: If no application has this ID
        """
        pass
