"""
OAuth State Value Object
CSRF state bound to the user who started an OAuth connection
"""
import secrets
from dataclasses import dataclass


@dataclass(frozen=True)
class OAuthState:
    """Cookie-resident OAuth state. Never persisted."""

    state: str
    user_id: str
    provider: str

    @classmethod
    def issue(cls, user_id: str, provider: str) -> "OAuthState":
        """New state with a fresh unpredictable token"""
        return cls(state=secrets.token_hex(32), user_id=user_id, provider=provider)

    def matches(self, state: str, provider: str) -> bool:
        return secrets.compare_digest(self.state, state) and self.provider == provider
