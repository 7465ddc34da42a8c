"""Password hashing helpers backed by bcrypt."""

import bcrypt


def _encode(password: str) -> bytes:
    # bcrypt only reads the first 72 bytes.
    return password.encode("utf-8")[:72]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str | None) -> bool:
    """Check a plaintext password against a stored bcrypt hash.

    Returns False for empty input or a stored value that is not a bcrypt hash.
    """
    if not password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(_encode(password), hashed_password.encode("utf-8"))
    except ValueError:
        return False
