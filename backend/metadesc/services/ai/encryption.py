"""
Encryption utilities for provider API keys.

API keys are stored Fernet-encrypted in the options table. The Fernet key
is derived with HKDF from ENCRYPTION_KEY, falling back to SESSION_SECRET.
"""

import base64
from functools import lru_cache

import structlog
from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives.hashes import SHA256
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from metadesc.core.config import settings

logger = structlog.get_logger()

HKDF_INFO = b"meta-description-ai-encryption"


@lru_cache(maxsize=1)
def _get_fernet() -> Fernet:
    """Get Fernet instance with the derived key.

    In production/staging, refuses to start without a configured secret.
    """
    if not (settings.encryption_key or settings.session_secret):
        if settings.is_production:
            logger.critical(
                "ai_encryption_no_key",
                msg="ENCRYPTION_KEY or SESSION_SECRET must be set in production/staging.",
            )
        else:
            logger.warning(
                "ai_encryption_no_key",
                msg="No ENCRYPTION_KEY or SESSION_SECRET set. Using fallback key. "
                "This is insecure for production!",
            )

    # Raises RuntimeError in production when nothing is configured
    key_source = settings.get_secret(settings.encryption_key)

    hkdf = HKDF(
        algorithm=SHA256(),
        length=32,
        salt=None,
        info=HKDF_INFO,
    )
    key_bytes = hkdf.derive(key_source.encode())
    return Fernet(base64.urlsafe_b64encode(key_bytes))


def encrypt_secret(plaintext: str) -> str:
    """Encrypt an API key. Empty input stays empty."""
    if not plaintext:
        return ""
    return _get_fernet().encrypt(plaintext.encode()).decode()


def decrypt_secret(ciphertext: str) -> str:
    """Decrypt an API key.

    Raises:
        cryptography.fernet.InvalidToken: If decryption fails
    """
    if not ciphertext:
        return ""
    return _get_fernet().decrypt(ciphertext.encode()).decode()


def try_decrypt_secret(ciphertext: str, provider: str = "") -> str:
    """Decrypt, treating an undecryptable value as "no key configured".

    Happens after the secret is rotated; the admin has to re-enter the key.
    """
    try:
        return decrypt_secret(ciphertext)
    except InvalidToken:
        logger.warning("ai_api_key_decrypt_failed", provider=provider)
        return ""
