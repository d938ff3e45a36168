"""
User ORM Model
SQLAlchemy model for persistence
"""
import uuid
from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.sql import func

from core.database import Base


class UserModel(Base):
    """User table ORM model"""

    __tablename__ = "users"

    # Primary Key
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)

    # Identity
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    role = Column(String(20), nullable=False, default="user")

    # CV profile
    location = Column(String(255), nullable=False, default="")
    summary = Column(Text, nullable=False, default="")
    experience = Column(Text, nullable=False, default="")
    skills = Column(Text, nullable=False, default="")

    # Stored CV artifacts
    cv_pdf_url = Column(String(1000), nullable=True)
    cv_latex_url = Column(String(1000), nullable=True)
    cv_filename = Column(String(255), nullable=True)
    cv_uploaded_at = Column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<UserModel {self.email}>"
