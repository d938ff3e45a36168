"""
Authentication Request/Response Schemas
Pydantic v2 models with strict validation
"""
import re
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from domain.entities import User
from .base import CamelModel


PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


class SignUpRequest(CamelModel):
    """Email/password registration"""

    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        """Require upper, lower and digit within bcrypt's 72-byte input limit"""
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password must be at most 72 bytes when UTF-8 encoded")
        if not PASSWORD_PATTERN.match(v):
            raise ValueError(
                "Password must contain at least one uppercase letter, one lowercase letter, and one number"
            )
        return v


class SignUpUser(CamelModel):
    id: str
    name: str
    email: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: User) -> "SignUpUser":
        return cls(id=user.id, name=user.name, email=user.email, created_at=user.created_at)


class SignUpResponse(CamelModel):
    message: str = "Account created successfully"
    user: SignUpUser
