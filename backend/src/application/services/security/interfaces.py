"""
Security Service Interfaces
Token encryption and OAuth state signing
"""
from abc import ABC, abstractmethod

from domain.value_objects import OAuthState


class IEncryptionService(ABC):
    """Symmetric encryption for provider tokens at rest"""

    @abstractmethod
    def encrypt(self, plaintext: str) -> str:
        """Encrypt plaintext string"""
        pass

    @abstractmethod
    def decrypt(self, ciphertext: str) -> str:
        """Decrypt ciphertext string"""
        pass


class IOAuthStateSigner(ABC):
    """Signs the OAuth state carried in the browser cookie"""

    @abstractmethod
    def sign(self, oauth_state: OAuthState) -> str:
        """Serialize and sign; the token expires after the configured max age"""
        pass

    @abstractmethod
    def verify(self, token: str) -> OAuthState:
        """
        Check signature and expiry

        Raises:
            OAuthStateException: Token is tampered, expired or malformed
        """
        pass
