"""Ledger REST API — movements and inventories, all require JWT authentication.

Movement update and delete are restricted to ADMIN callers.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.cf_common.database import get_db_session
from src.cf_common.response import ApiResponse, success_response
from src.cf_gateway.auth.dependencies import Caller, get_current_caller, require_admin
from src.cf_ledger.application.schemas import (
    CreateInventoryRequest,
    CreateMovementRequest,
    UpdateMovementRequest,
)
from src.cf_ledger.application.service import LedgerApplicationService

router = APIRouter(tags=["ledger"])


def get_ledger_service(request: Request) -> LedgerApplicationService:
    return request.app.state.services.ledger_service


def _created(resp: ApiResponse) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=resp.model_dump())


@router.post("/coffres/{coffre_id}/movements", status_code=status.HTTP_201_CREATED)
async def create_movement(
    coffre_id: str,
    body: CreateMovementRequest,
    caller: Annotated[Caller, Depends(get_current_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[LedgerApplicationService, Depends(get_ledger_service)],
    request: Request,
) -> JSONResponse:
    data = await service.create_movement(db, caller, coffre_id, body)
    return _created(success_response(data, request))


@router.get("/coffres/{coffre_id}/movements")
async def list_movements(
    coffre_id: str,
    caller: Annotated[Caller, Depends(get_current_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[LedgerApplicationService, Depends(get_ledger_service)],
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
) -> ApiResponse:
    data = await service.list_movements(db, caller, coffre_id, cursor, limit)
    return success_response(data, request)


@router.put("/movements/{movement_id}")
async def update_movement(
    movement_id: str,
    body: UpdateMovementRequest,
    caller: Annotated[Caller, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[LedgerApplicationService, Depends(get_ledger_service)],
    request: Request,
) -> ApiResponse:
    data = await service.update_movement(db, caller, movement_id, body)
    return success_response(data, request)


@router.delete("/movements/{movement_id}")
async def delete_movement(
    movement_id: str,
    caller: Annotated[Caller, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[LedgerApplicationService, Depends(get_ledger_service)],
    request: Request,
) -> ApiResponse:
    data = await service.delete_movement(db, caller, movement_id)
    return success_response(data, request)


@router.post("/coffres/{coffre_id}/inventories", status_code=status.HTTP_201_CREATED)
async def create_inventory(
    coffre_id: str,
    body: CreateInventoryRequest,
    caller: Annotated[Caller, Depends(get_current_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[LedgerApplicationService, Depends(get_ledger_service)],
    request: Request,
) -> JSONResponse:
    data = await service.create_inventory(db, caller, coffre_id, body)
    return _created(success_response(data, request))


@router.get("/coffres/{coffre_id}/inventories")
async def list_inventories(
    coffre_id: str,
    caller: Annotated[Caller, Depends(get_current_caller)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[LedgerApplicationService, Depends(get_ledger_service)],
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
) -> ApiResponse:
    data = await service.list_inventories(db, caller, coffre_id, cursor, limit)
    return success_response(data, request)
