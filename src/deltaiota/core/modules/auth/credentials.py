import base64
import binascii

from deltaiota.core.modules.auth.models import AuthError, AuthErrorKind, BasicCredentials


def parse_basic_credentials(header: str | None) -> BasicCredentials:
    """Parse an ``Authorization: Basic base64(identifier:secret)`` header value.

    The payload is split on the first colon only: secrets may contain colons,
    identifiers may not. Either side may be empty.

    Raises:
        AuthError: With the kind describing the first malformation found
    """
    if not header:
        raise AuthError(AuthErrorKind.NO_AUTHORIZATION_HEADER)

    parts = header.split(" ")
    if len(parts) != 2:
        raise AuthError(AuthErrorKind.NO_AUTHORIZATION_TYPE)

    scheme, payload = parts
    if scheme != "Basic":
        raise AuthError(AuthErrorKind.NOT_BASIC_AUTHORIZATION)

    try:
        decoded = base64.b64decode(payload, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise AuthError(AuthErrorKind.INVALID_BASE64) from exc

    username, sep, secret = decoded.partition(":")
    if not sep:
        raise AuthError(AuthErrorKind.INVALID_CREDENTIAL_PAIR)

    return BasicCredentials(username=username, secret=secret)
