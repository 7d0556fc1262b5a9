"""One-way password hashing.

bcrypt reports a wrong password as a plain ``False``; check_password turns that
into PasswordMismatchError so callers never depend on bcrypt's own signals.
Any other failure (for example a malformed stored hash) propagates unchanged.
"""

import bcrypt

BCRYPT_MAX_BYTES = 72


class PasswordMismatchError(Exception):
    """Raised when a candidate password does not match the stored hash."""


def hash_password(password: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds)).decode("utf-8")


def check_password(password_hash: str, candidate: str) -> None:
    """Verify a candidate password against a stored bcrypt hash.

    Raises:
        PasswordMismatchError: If the candidate does not match
    """
    encoded = candidate.encode("utf-8")
    # Stored passwords are validated to fit bcrypt's input, so a longer candidate cannot match
    if len(encoded) > BCRYPT_MAX_BYTES:
        raise PasswordMismatchError
    if not bcrypt.checkpw(encoded, password_hash.encode("utf-8")):
        raise PasswordMismatchError
