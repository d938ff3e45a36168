"""Domain Entities - Core business objects"""

from .user import User
from .application import Application
from .social_profile import SocialProfile

__all__ = ["User", "Application", "SocialProfile"]
