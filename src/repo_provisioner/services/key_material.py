"""Key material — the write secret handed to a project's owner and its digest."""

from __future__ import annotations

import hashlib
import secrets

from repo_provisioner.domain.entities import KeyPair

_KEY_BYTES = 32


def generate_key() -> str:
    """Return 32 random bytes as 64 lowercase hex characters."""
    return secrets.token_hex(_KEY_BYTES)


def hash_key(key: str) -> str:
    """One-way SHA-256 hex digest of *key*."""
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def new_key_pair() -> KeyPair:
    key = generate_key()
    return KeyPair(secret=key, digest=hash_key(key))
