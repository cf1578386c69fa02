"""JWT access-token verification (and minting for tooling/tests).

Sessions are issued by the login service, outside this backend. Tokens carry
the caller identity the ledger needs:

    {"sub": <user id>, "role": "USER" | "MANAGER" | "ADMIN", "type": "access"}

HS256 with a shared JWT_SECRET, same as the issuer.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.cf_common.enums import UserRole
from src.cf_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)


def create_access_token(
    user_id: str,
    role: UserRole = UserRole.USER,
    expires_in: timedelta | None = None,
) -> str:
    """Mint an access token. Used by ops scripts and tests, not by any route."""
    now = datetime.now(UTC)
    payload = {
        "sub": user_id,
        "role": role.value,
        "type": "access",
        "iat": now,
        "exp": now + (expires_in if expires_in is not None else _ACCESS_EXPIRE),
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_token(token: str) -> dict[str, str]:
    """Decode and validate an access token.

    Returns:
        Decoded payload dict with at minimum {"sub": ..., "role": ..., "type": "access"}.

    Raises:
        InvalidCredentialsError: signature invalid, token expired, wrong token
            type, or unknown role.
    """
    try:
        payload: dict[str, str] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if payload.get("type") != "access":
        raise InvalidCredentialsError()
    if payload.get("role") not in {r.value for r in UserRole}:
        raise InvalidCredentialsError()
    return payload
