"""AES-256-GCM encryption for OAuth tokens stored in the panel database"""
import base64
import binascii
import os
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

import config

IV_LENGTH = 12
TAG_LENGTH = 16
KEY_LENGTH = 32

_key: Optional[bytes] = None


class TokenEncryptionError(Exception):
    """Raised when a token cannot be encrypted or decrypted"""


def _get_key() -> bytes:
    """Decode ENCRYPTION_KEY on first use so imports never fail on a bad env"""
    global _key
    if _key is None:
        if not config.ENCRYPTION_KEY:
            raise TokenEncryptionError("ENCRYPTION_KEY is not set")
        try:
            key = base64.b64decode(config.ENCRYPTION_KEY, validate=True)
        except (binascii.Error, ValueError) as e:
            raise TokenEncryptionError("ENCRYPTION_KEY is not valid base64") from e
        if len(key) != KEY_LENGTH:
            raise TokenEncryptionError(f"ENCRYPTION_KEY must decode to {KEY_LENGTH} bytes, got {len(key)}")
        _key = key
    return _key


def reset_key_cache():
    global _key
    _key = None


def encrypt_token(plaintext: str) -> str:
    """Encrypt to 'iv:tag:ciphertext', each part base64"""
    iv = os.urandom(IV_LENGTH)
    sealed = AESGCM(_get_key()).encrypt(iv, plaintext.encode("utf-8"), None)
    ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
    return ":".join(base64.b64encode(part).decode("ascii") for part in (iv, tag, ciphertext))


def decrypt_token(encrypted: str) -> str:
    parts = encrypted.split(":") if encrypted else []
    if len(parts) != 3:
        raise TokenEncryptionError("Invalid encrypted token format")
    try:
        iv, tag, ciphertext = (base64.b64decode(p, validate=True) for p in parts)
    except (binascii.Error, ValueError) as e:
        raise TokenEncryptionError("Invalid encrypted token encoding") from e
    if len(iv) != IV_LENGTH or len(tag) != TAG_LENGTH:
        raise TokenEncryptionError("Invalid encrypted token format")
    try:
        return AESGCM(_get_key()).decrypt(iv, ciphertext + tag, None).decode("utf-8")
    except InvalidTag as e:
        raise TokenEncryptionError("Token authentication failed") from e
