"""
OAuth State Signer
HS256 JWT holding {state, userId, provider} for the oauth_state cookie
"""
from datetime import datetime, timedelta, timezone

from jose import jwt, ExpiredSignatureError, JWTError
from loguru import logger

from core.config import Settings
from core.exceptions import OAuthStateException
from domain.value_objects import OAuthState
from application.services.security.interfaces import IOAuthStateSigner


class JwtOAuthStateSigner(IOAuthStateSigner):
    """OAuth state signer using python-jose"""

    algorithm = "HS256"

    def __init__(self, settings: Settings):
        self.secret_key = settings.OAUTH_STATE_SECRET
        self.max_age = timedelta(seconds=settings.OAUTH_STATE_MAX_AGE_SECONDS)

    def sign(self, oauth_state: OAuthState) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "state": oauth_state.state,
            "userId": oauth_state.user_id,
            "provider": oauth_state.provider,
            "iat": now,
            "exp": now + self.max_age,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> OAuthState:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            logger.warning("OAuth state cookie expired")
            raise OAuthStateException("OAuth state expired", expired=True)
        except JWTError as e:
            logger.warning(f"OAuth state verification failed: {str(e)}")
            raise OAuthStateException("Invalid OAuth state")

        try:
            return OAuthState(
                state=str(payload["state"]),
                user_id=str(payload["userId"]),
                provider=str(payload["provider"]),
            )
        except KeyError as e:
            raise OAuthStateException(f"OAuth state missing field {e}")
