"""
Repository Interfaces (Abstract Base Classes)
Define contracts for data access without implementation details
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from domain.entities import User, Application, SocialProfile


class IUserRepository(ABC):
    """User repository interface"""

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_first(self) -> Optional[User]:
        """Get the oldest user (single-user mode)"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create new user"""
        pass

    @abstractmethod
    async def update_fields(self, user_id: str, fields: Dict[str, Any]) -> Optional[User]:
        """Update the given columns; None if the user does not exist"""
        pass

    @abstractmethod
    async def exists_by_email(self, email: str) -> bool:
        """Check if user exists by email"""
        pass


class IApplicationRepository(ABC):
    """Job application repository interface"""

    @abstractmethod
    async def get_by_id(self, application_id: str) -> Optional[Application]:
        """Get application by ID"""
        pass

    @abstractmethod
    async def list_by_user(self, user_id: str) -> List[Application]:
        """All applications of a user, newest first"""
        pass

    @abstractmethod
    async def create(self, application: Application) -> Application:
        """Create new application"""
        pass

    @abstractmethod
    async def update_fields(self, application_id: str, fields: Dict[str, Any]) -> Optional[Application]:
        """Update the given columns; None if the application does not exist"""
        pass

    @abstractmethod
    async def delete(self, application_id: str) -> bool:
        """Delete application; False if it did not exist"""
        pass


class ISocialProfileRepository(ABC):
    """Connected social account repository interface"""

    @abstractmethod
    async def get(self, user_id: str, provider: str) -> Optional[SocialProfile]:
        """Get the profile a user connected for a provider"""
        pass

    @abstractmethod
    async def upsert(self, profile: SocialProfile) -> SocialProfile:
        """Create or replace the profile for (user, provider)"""
        pass

    @abstractmethod
    async def list_by_user(self, user_id: str) -> List[SocialProfile]:
        """All profiles a user connected"""
        pass

    @abstractmethod
    async def delete(self, user_id: str, provider: str) -> bool:
        """Delete the profile for (user, provider); False if there was none"""
        pass
