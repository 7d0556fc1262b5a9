import secrets
import string
from datetime import UTC, datetime

ALPHANUMERIC = string.ascii_letters + string.digits


def now() -> datetime:
    return datetime.now(UTC)


def random_string(length: int) -> str:
    return "".join(secrets.choice(ALPHANUMERIC) for _ in range(length))
