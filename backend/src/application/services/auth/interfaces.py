"""
Authentication Service Interfaces
Abstract base classes for authentication services
"""
from abc import ABC, abstractmethod

from domain.entities import User


class IPasswordHasher(ABC):
    """Password hashing interface"""

    @abstractmethod
    def hash_password(self, password: str) -> str:
        """Hash a plain password"""
        pass


class IAuthService(ABC):
    """Authentication service interface"""

    @abstractmethod
    async def register(self, name: str, email: str, password: str) -> User:
        """
        Register a new user with email and password

        Raises:
            DuplicateResourceException: If the email is already taken
        """
        pass
