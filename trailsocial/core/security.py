"""Security helpers (salt generation, hashing and verification)."""

from __future__ import annotations

import hashlib
import secrets

SALT_BYTES = 16
HASH_ITERATIONS = 1000
HASH_BYTES = 64
_DIGEST = "sha512"


def generate_salt() -> str:
    """Return 16 bytes from the OS CSPRNG, hex encoded."""
    return secrets.token_hex(SALT_BYTES)


def hash_password(password: str, salt: str) -> str:
    """Derive the stored credential with PBKDF2-HMAC-SHA512."""
    # The salt's hex text (not its decoded bytes) feeds the KDF.
    derived = hashlib.pbkdf2_hmac(
        _DIGEST,
        password.encode("utf-8"),
        salt.encode("utf-8"),
        HASH_ITERATIONS,
        dklen=HASH_BYTES,
    )
    return derived.hex()


def valid_password(password: str, stored_hash: str | None, salt: str | None) -> bool:
    if not stored_hash or not salt:
        return False
    candidate = hash_password(password or "", salt)
    return secrets.compare_digest(candidate, stored_hash)
