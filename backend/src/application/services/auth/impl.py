"""
Authentication Service Implementation
Concrete implementation of IAuthService
"""
from uuid import uuid4

from loguru import logger

from domain.entities import User
from core.exceptions import DuplicateResourceException
from application.repositories.interfaces import IUserRepository
from .interfaces import IAuthService, IPasswordHasher


DUPLICATE_EMAIL_MESSAGE = "An account with this email already exists"


class AuthService(IAuthService):
    """Authentication service implementation"""

    def __init__(
        self,
        user_repository: IUserRepository,
        password_hasher: IPasswordHasher
    ):
        self.user_repo = user_repository
        self.password_hasher = password_hasher

    async def register(self, name: str, email: str, password: str) -> User:
        """Register a new user"""

        logger.info(f"Registering new user: {email}")

        # Check if user already exists
        if await self.user_repo.exists_by_email(email):
            logger.warning(f"Registration rejected, email taken: {email}")
            raise DuplicateResourceException("User", "email", email, DUPLICATE_EMAIL_MESSAGE)

        # Profile fields start empty and are filled in from the profile page
        user = User(
            id=str(uuid4()),
            name=name,
            email=email,
            password_hash=self.password_hasher.hash_password(password),
        )

        created_user = await self.user_repo.create(user)

        logger.info(f"User registered successfully: {email}")

        return created_user
