"""
Password hashing with bcrypt.

bcrypt is a deliberately slow, adaptive hash: the cost factor (BCRYPT_ROUNDS,
default 10) sets 2**rounds iterations of the key schedule, so brute-forcing a
leaked hash stays expensive as hardware gets faster. Every password gets its
own random salt, which defeats precomputed (rainbow table) attacks.

The salt is returned separately from the hash so it can be stored in its own
column. The bcrypt hash string also embeds the cost and salt, which is what
verify_password() relies on.

bcrypt only reads the first 72 bytes of its input. Longer passwords are
truncated explicitly here, matching what other bcrypt implementations do
silently (recent releases of the Python binding raise instead).
"""

import bcrypt

from auth_lookup.config import settings

BCRYPT_MAX_PASSWORD_BYTES = 72


def _password_bytes(plain_password: str) -> bytes:
    return plain_password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]


def generate_salt(rounds: int | None = None) -> str:
    """
    Generate a fresh bcrypt salt.

    Args:
        rounds: Cost factor. Defaults to settings.BCRYPT_ROUNDS.

    Returns:
        A salt string such as "$2b$10$<22 base64 chars>".
    """
    if rounds is None:
        rounds = settings.BCRYPT_ROUNDS
    return bcrypt.gensalt(rounds=rounds).decode("utf-8")


def hash_password(plain_password: str, salt: str) -> str:
    """
    Hash a plaintext password with the given bcrypt salt.

    Args:
        plain_password: The user's raw password input.
        salt: A salt produced by generate_salt().

    Returns:
        The 60-character bcrypt hash string.
    """
    return bcrypt.hashpw(_password_bytes(plain_password), salt.encode("utf-8")).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plaintext password against a stored bcrypt hash.

    bcrypt re-derives the hash using the cost and salt embedded in
    ``hashed_password`` and compares in constant time. A malformed stored
    hash counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        return False
