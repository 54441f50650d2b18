"""HTTP Basic authentication gate for admin operations."""

import base64
import binascii
import secrets
from dataclasses import dataclass, field

BASIC_CHALLENGE = {"WWW-Authenticate": 'Basic realm="Admin"'}


@dataclass(frozen=True)
class AuthResult:
    """Outcome of an admin credential check."""

    authorized: bool
    status: int = 200
    message: str = ""
    headers: dict[str, str] = field(default_factory=dict)


_MISSING_SECRETS = AuthResult(
    authorized=False,
    status=500,
    message="Server configuration error: ADMIN_USER or ADMIN_PASS not set",
)


def _unauthorized() -> AuthResult:
    return AuthResult(
        authorized=False,
        status=401,
        message="Unauthorized",
        headers=dict(BASIC_CHALLENGE),
    )


def check_basic_auth(
    authorization: str | None, admin_user: str | None, admin_pass: str | None
) -> AuthResult:
    """Validate a Basic ``Authorization`` header against configured secrets.

    Never raises. Missing secrets yield a 500 result so that an unconfigured
    deployment cannot be entered; every credential problem yields 401 with a
    Basic challenge.
    """
    if not admin_user or not admin_pass:
        return _MISSING_SECRETS
    if not authorization:
        return _unauthorized()
    scheme, _, encoded = authorization.strip().partition(" ")
    if scheme.lower() != "basic" or not encoded.strip():
        return _unauthorized()
    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return _unauthorized()
    username, separator, password = decoded.partition(":")
    if not separator:
        return _unauthorized()
    user_ok = secrets.compare_digest(username.encode(), admin_user.encode())
    pass_ok = secrets.compare_digest(password.encode(), admin_pass.encode())
    if user_ok and pass_ok:
        return AuthResult(authorized=True)
    return _unauthorized()
