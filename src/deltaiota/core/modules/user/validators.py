import re

from deltaiota.core.modules.user.models import UserInput
from deltaiota.core.modules.user.passwords import BCRYPT_MAX_BYTES
from deltaiota.errors import EmptyFieldError, InvalidFieldError

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

REQUIRED_FIELDS = ("username", "first_name", "last_name", "email", "password")


def validate_username(username: str) -> None:
    """Usernames travel in the identifier half of a Basic credential pair, so no colons or whitespace."""
    if ":" in username or any(char.isspace() for char in username):
        raise InvalidFieldError("username")


def validate_email(email: str) -> None:
    if not EMAIL_RE.fullmatch(email):
        raise InvalidFieldError("email")


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Requirements:
    - At most 72 bytes once UTF-8 encoded (bcrypt ignores anything longer)

    Raises:
        InvalidFieldError: If password doesn't meet requirements
    """
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise InvalidFieldError("password")


def validate_user_input(data: UserInput) -> None:
    """Check required fields first, then the format of each field.

    Raises:
        EmptyFieldError: If a required field is empty
        InvalidFieldError: If a field is present but malformed
    """
    for field in REQUIRED_FIELDS:
        if not getattr(data, field):
            raise EmptyFieldError(field)

    validate_username(data.username)
    validate_email(data.email)
    validate_password(data.password)
