"""
Application ORM Model
SQLAlchemy model for job applications
"""
import uuid
from sqlalchemy import Column, String, DateTime, Text, Integer, ForeignKey, Index
from sqlalchemy.sql import func

from core.database import Base


class ApplicationModel(Base):
    """Job application table ORM model"""

    __tablename__ = "applications"
    __table_args__ = (
        Index("ix_applications_user_status", "user_id", "status"),
        Index("ix_applications_user_created", "user_id", "created_at"),
    )

    # Primary Key
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), index=True)

    # Foreign Keys
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    # Job Details
    company = Column(String(255), nullable=False)
    role = Column(String(255), nullable=False)
    job_description = Column(Text, nullable=False)
    job_url = Column(String(1000), nullable=True)

    # AI output
    match_score = Column(Integer, nullable=False, default=0)
    analysis = Column(Text, nullable=False, default="")
    cover_letter = Column(Text, nullable=False, default="")

    # Tracking
    status = Column(String(50), nullable=False, default="saved")
    applied_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<ApplicationModel {self.id} - {self.status}>"
