"""
Pokedex API — Move Route Handlers
==================================

Moves have no create/update routes: they come into existence when a Pokemon
is given a move name nobody has used before.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pokedex_api.database import get_db_session
from pokedex_api.schemas.common import DeletedResponse, ErrorResponse
from pokedex_api.schemas.move import MoveDetail, MoveResponse
from pokedex_api.services.move_service import move_service

router = APIRouter(tags=["Moves"])


@router.get(
    "/moves",
    response_model=List[MoveResponse],
    summary="List all moves",
)
async def list_moves(db: AsyncSession = Depends(get_db_session)) -> List[MoveResponse]:
    return await move_service.list_moves(db)


@router.get(
    "/moves/{move_id}",
    response_model=MoveDetail,
    responses={404: {"description": "Move not found", "model": ErrorResponse}},
    summary="Get a move and the Pokemon that know it",
)
async def get_move(
    move_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MoveDetail:
    return await move_service.get_move(db, move_id)


@router.delete(
    "/moves/{move_id}",
    response_model=DeletedResponse,
    responses={
        404: {"description": "Move not found", "model": ErrorResponse},
        409: {"description": "Move is still known by some Pokemon", "model": ErrorResponse},
    },
    summary="Delete a move nobody knows",
)
async def delete_move(
    move_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> DeletedResponse:
    return await move_service.delete_move(db, move_id)
