"""Balance REST API — 1 endpoint, requires JWT authentication."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.cf_balance.application.service import BalanceApplicationService
from src.cf_common.database import get_db_session
from src.cf_common.response import ApiResponse, success_response
from src.cf_gateway.auth.dependencies import Caller, get_current_caller

router = APIRouter(prefix="/coffres", tags=["balance"])


def get_balance_service(request: Request) -> BalanceApplicationService:
    return request.app.state.services.balance_service


@router.get("/{coffre_id}/balance")
async def get_balance(
    coffre_id: str,
    caller: Annotated[Caller, Depends(get_current_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[BalanceApplicationService, Depends(get_balance_service)],
    request: Request,
    fresh: bool = Query(False, description="Bypass the cache and recompute"),
) -> ApiResponse:
    data = await service.get_balance(db, caller, coffre_id, fresh=fresh)
    return success_response(data, request)
