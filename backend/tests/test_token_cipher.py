"""
Tests for social token encryption
"""
import base64

import pytest

from infrastructure.security.token_cipher import AesGcmTokenCipher, TokenCipherError, decode_key
from conftest import make_settings


HEX_KEY = "0f" * 32
BASE64_KEY = base64.b64encode(bytes(range(32))).decode()


class TestDecodeKey:

    def test_accepts_hex_and_base64(self):
        assert decode_key(HEX_KEY) == bytes([0x0f] * 32)
        assert decode_key(BASE64_KEY) == bytes(range(32))

    @pytest.mark.parametrize("raw_key", ["short", "0f" * 16, "zz" * 32, BASE64_KEY[:-1]])
    def test_rejects_malformed_keys(self, raw_key):
        with pytest.raises(TokenCipherError):
            decode_key(raw_key)


class TestAesGcmTokenCipher:

    @pytest.fixture
    def cipher(self):
        return AesGcmTokenCipher(make_settings(SOCIAL_ENCRYPTION_KEY=HEX_KEY))

    def test_encrypt_decrypt(self, cipher):
        encrypted = cipher.encrypt("gho_secret_token")

        assert encrypted != "gho_secret_token"
        # 12-byte nonce + ciphertext + 16-byte tag
        assert len(base64.b64decode(encrypted)) == 12 + len("gho_secret_token") + 16
        assert cipher.decrypt(encrypted) == "gho_secret_token"

    def test_fresh_nonce_per_encryption(self, cipher):
        assert cipher.encrypt("token") != cipher.encrypt("token")

    def test_wrong_key_fails(self, cipher):
        encrypted = cipher.encrypt("gho_secret_token")
        other = AesGcmTokenCipher(make_settings(SOCIAL_ENCRYPTION_KEY=BASE64_KEY))

        with pytest.raises(TokenCipherError):
            other.decrypt(encrypted)

    def test_tampered_ciphertext_fails(self, cipher):
        raw = bytearray(base64.b64decode(cipher.encrypt("gho_secret_token")))
        raw[-1] ^= 0x01

        with pytest.raises(TokenCipherError):
            cipher.decrypt(base64.b64encode(bytes(raw)).decode())

    @pytest.mark.parametrize("ciphertext", ["not base64!", base64.b64encode(b"short").decode()])
    def test_garbage_input_fails(self, cipher, ciphertext):
        with pytest.raises(TokenCipherError):
            cipher.decrypt(ciphertext)

    def test_development_fallback_key(self):
        cipher = AesGcmTokenCipher(make_settings(SOCIAL_ENCRYPTION_KEY=""))

        assert cipher.decrypt(cipher.encrypt("token")) == "token"

    def test_production_requires_key(self):
        with pytest.raises(TokenCipherError):
            AesGcmTokenCipher(make_settings(ENVIRONMENT="production", SOCIAL_ENCRYPTION_KEY=""))
