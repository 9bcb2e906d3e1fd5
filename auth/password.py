"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.  bcrypt only reads 72 bytes, so every
password is first reduced to a base64 SHA-256 digest (44 bytes); passwords
of any length hash and verify the same way.  Unsalted MD5 hex digests
written by older deployments can optionally still be verified.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import re

import bcrypt

from config.settings import config

_LEGACY_MD5_RE = re.compile(r"^[0-9a-f]{32}$")


def _prehash(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode()).digest())


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a password with bcrypt (auto-salted, work factor from config)."""
    rounds = rounds or config.bcrypt_rounds
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt(rounds=rounds)).decode()


def legacy_md5_digest(password: str) -> str:
    """Lowercase hex MD5 of the raw password, the pre-bcrypt storage format."""
    return hashlib.md5(password.encode()).hexdigest()


def is_legacy_hash(password_hash: str) -> bool:
    return bool(_LEGACY_MD5_RE.match(password_hash))


def verify_password(
    password: str,
    password_hash: str,
    accept_legacy: bool | None = None,
) -> bool:
    """Constant-time comparison against a bcrypt (or legacy MD5) hash."""
    if accept_legacy is None:
        accept_legacy = config.accept_legacy_md5_hashes

    if is_legacy_hash(password_hash):
        if not accept_legacy:
            return False
        return hmac.compare_digest(legacy_md5_digest(password), password_hash)

    try:
        return bcrypt.checkpw(_prehash(password), password_hash.encode())
    except (ValueError, TypeError):
        return False
