"""ORM Models Package"""

from .application import ApplicationModel
from .social_profile import SocialProfileModel
from .user import UserModel

__all__ = [
    "ApplicationModel",
    "SocialProfileModel",
    "UserModel",
]
