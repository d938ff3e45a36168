"""
Social Profile ORM Model
Connected OAuth accounts with encrypted tokens
"""
import uuid
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func

from core.database import Base


class SocialProfileModel(Base):
    """Social profile table ORM model"""

    __tablename__ = "social_profiles"
    __table_args__ = (
        UniqueConstraint("user_id", "provider", name="uq_social_profiles_user_provider"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    provider = Column(String(20), nullable=False)
    provider_id = Column(String(255), nullable=False)

    # Tokens (AES-256-GCM, base64)
    access_token = Column(Text, nullable=False)
    refresh_token = Column(Text, nullable=True)
    token_expiry = Column(DateTime(timezone=True), nullable=True)
    scope = Column(String(500), nullable=True)

    # Profile
    username = Column(String(255), nullable=True)
    display_name = Column(String(255), nullable=True)
    avatar_url = Column(String(1000), nullable=True)
    profile_url = Column(String(1000), nullable=True)
    profile_data = Column(Text, nullable=True)

    # Sync
    last_sync_at = Column(DateTime(timezone=True), nullable=True)
    sync_status = Column(String(20), nullable=False, default="PENDING")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<SocialProfileModel {self.provider} - {self.user_id}>"
