"""FastAPI dependencies: get_current_caller / require_admin.

Usage in any protected router:
    from src.cf_gateway.auth.dependencies import get_current_caller

    @router.get("/protected")
    async def protected(caller: Caller = Depends(get_current_caller)):
        ...
"""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from src.cf_common.enums import UserRole
from src.cf_common.errors import AdminRequiredError, InvalidCredentialsError
from src.cf_gateway.auth.jwt_handler import decode_token

# Tokens come from the external login service; tokenUrl only feeds Swagger UI
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


@dataclass(frozen=True)
class Caller:
    """Authenticated identity of the request."""

    user_id: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


async def get_current_caller(token: str = Depends(oauth2_scheme)) -> Caller:
    """Validate the Bearer token and return the Caller. HTTP 401 on any failure."""
    try:
        payload = decode_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    user_id = payload.get("sub")
    if not user_id:
        raise _CREDENTIALS_EXCEPTION
    return Caller(user_id=user_id, role=UserRole(payload["role"]))


async def require_admin(caller: Caller = Depends(get_current_caller)) -> Caller:
    """Reject non-ADMIN callers with AdminRequiredError (1002, HTTP 403)."""
    if not caller.is_admin:
        raise AdminRequiredError()
    return caller
