"""Password hashing for user accounts.

Uses bcrypt with a per-hash random salt. The cost factor is configurable so
tests can use the bcrypt minimum.
"""

import bcrypt

DEFAULT_BCRYPT_ROUNDS = 12


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Hash a plaintext password using bcrypt.

    Args:
        password: The plaintext password to hash
        rounds: bcrypt cost factor

    Returns:
        The bcrypt hash as a string
    """
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash using constant-time comparison.

    Args:
        password: The plaintext password to verify
        password_hash: The bcrypt hash to verify against

    Returns:
        True if the password matches the hash, False otherwise
    """
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # Malformed or non-bcrypt hash
        return False
