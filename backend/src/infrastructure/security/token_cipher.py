"""
AES-256-GCM encryption for OAuth provider tokens.
- Key comes from SOCIAL_ENCRYPTION_KEY: 64 hex chars or 44 base64 chars (32 bytes).
- Output is base64(nonce || ciphertext || tag).
- Outside production a fixed development key is used when none is configured.
"""
import base64
import binascii
import hashlib
import os
import re

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from loguru import logger

from core.config import Settings
from application.services.security.interfaces import IEncryptionService


_KEY_LENGTH = 32
_NONCE_LENGTH = 12
_TOKEN_AAD = b"social_token_v1"
_DEV_KEY = hashlib.sha256(b"careerpal-dev-key-do-not-use-in-production").digest()

_HEX_KEY = re.compile(r"^[0-9a-fA-F]{64}$")
_BASE64_KEY = re.compile(r"^[A-Za-z0-9+/]{43}=$")


class TokenCipherError(Exception):
    """Raised when token encryption/decryption fails."""


def decode_key(raw_key: str) -> bytes:
    """Decode a configured key; hex and base64 encodings are accepted"""
    if _HEX_KEY.match(raw_key):
        return bytes.fromhex(raw_key)

    if _BASE64_KEY.match(raw_key):
        try:
            decoded = base64.b64decode(raw_key, validate=True)
        except binascii.Error as exc:
            raise TokenCipherError("SOCIAL_ENCRYPTION_KEY is not valid base64") from exc
        if len(decoded) == _KEY_LENGTH:
            return decoded

    raise TokenCipherError(
        "SOCIAL_ENCRYPTION_KEY must be 64 hex characters or 44 base64 characters (32 bytes)"
    )


class AesGcmTokenCipher(IEncryptionService):
    """Encrypts/decrypts provider tokens using AES-256-GCM."""

    def __init__(self, settings: Settings) -> None:
        if settings.SOCIAL_ENCRYPTION_KEY:
            key = decode_key(settings.SOCIAL_ENCRYPTION_KEY)
        elif settings.is_production:
            raise TokenCipherError("SOCIAL_ENCRYPTION_KEY environment variable is not set")
        else:
            logger.warning("Using development encryption key. Set SOCIAL_ENCRYPTION_KEY for production!")
            key = _DEV_KEY

        self.cipher = AESGCM(key)

    def encrypt(self, plaintext: str) -> str:
        nonce = os.urandom(_NONCE_LENGTH)
        ciphertext = self.cipher.encrypt(nonce, plaintext.encode(), _TOKEN_AAD)
        return base64.b64encode(nonce + ciphertext).decode()

    def decrypt(self, ciphertext: str) -> str:
        try:
            combined = base64.b64decode(ciphertext, validate=True)
        except binascii.Error as exc:
            raise TokenCipherError("Encrypted token is not valid base64") from exc

        if len(combined) <= _NONCE_LENGTH:
            raise TokenCipherError("Encrypted token is too short")

        nonce, body = combined[:_NONCE_LENGTH], combined[_NONCE_LENGTH:]
        try:
            return self.cipher.decrypt(nonce, body, _TOKEN_AAD).decode()
        except InvalidTag as exc:
            raise TokenCipherError("Failed to decrypt token") from exc
