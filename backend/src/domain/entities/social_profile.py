"""
Social Profile Domain Entity
A connected GitHub or LinkedIn account
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class SocialProfile:
    """Connected social account - tokens are stored encrypted"""

    user_id: str
    provider: str  # GITHUB | LINKEDIN
    provider_id: str
    access_token: str
    refresh_token: Optional[str] = None
    token_expiry: Optional[datetime] = None
    scope: Optional[str] = None
    username: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    profile_url: Optional[str] = None
    profile_data: Optional[str] = None
    last_sync_at: Optional[datetime] = None
    sync_status: str = "COMPLETED"
    id: Optional[str] = None
