"""Coffre access rule shared by the balance and ledger services.

A caller may touch a coffre when a coffre_members row links them to it.
ADMIN callers may touch every coffre.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.cf_common.errors import CoffreAccessDeniedError
from src.cf_gateway.auth.dependencies import Caller
from src.cf_ledger.domain.repository import MembershipProtocol


async def ensure_coffre_access(
    members: MembershipProtocol, db: AsyncSession, caller: Caller, coffre_id: str
) -> None:
    if caller.is_admin:
        return
    if not await members.is_member(db, caller.user_id, coffre_id):
        raise CoffreAccessDeniedError(coffre_id)
