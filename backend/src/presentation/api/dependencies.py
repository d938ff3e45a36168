"""
FastAPI Dependencies
Caller identity and user lookup
"""
from typing import Optional

from fastapi import Header

from domain.entities import User
from application.repositories.interfaces import IUserRepository
from core.exceptions import AuthenticationException, ResourceNotFoundException


async def get_caller_id(
    x_user_id: Optional[str] = Header(None, alias="X-User-ID")
) -> Optional[str]:
    """Caller user ID from the X-User-ID header, if sent"""
    if x_user_id is None or not x_user_id.strip():
        return None
    return x_user_id.strip()


def require_caller_id(caller_id: Optional[str]) -> str:
    """
    Raises:
        AuthenticationException: If no caller ID was sent
    """
    if not caller_id:
        raise AuthenticationException("Missing X-User-ID header")
    return caller_id


async def load_user(user_repo: IUserRepository, user_id: str) -> User:
    """
    Raises:
        ResourceNotFoundException: Public message "User not found"
    """
    user = await user_repo.get_by_id(user_id)
    if user is None:
        raise ResourceNotFoundException("User", user_id)
    return user
