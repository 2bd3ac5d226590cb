"""
Pokedex API — Move Service
===========================

What:  Move listing, detail (with the Pokemon that know it) and deletion.
Why:   Moves are created implicitly by Pokemon writes; this service only
       reads them and removes the ones nobody uses any more.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pokedex_api.exceptions import DatabaseError, NotFoundError
from pokedex_api.models import Move
from pokedex_api.schemas.common import DeletedResponse
from pokedex_api.schemas.move import MoveDetail, MoveResponse
from pokedex_api.services.associations import association_manager

logger = logging.getLogger(__name__)


class MoveService:

    async def list_moves(self, db: AsyncSession) -> List[MoveResponse]:
        try:
            result = await db.execute(select(Move).order_by(Move.name))
            return [MoveResponse.model_validate(move) for move in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing moves: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve moves. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

    async def get_move(self, db: AsyncSession, move_id: int) -> MoveDetail:
        move = await association_manager.load_move(db, move_id)
        if move is None:
            raise NotFoundError(resource="move", resource_id=move_id)
        return MoveDetail.from_move(move)

    async def delete_move(self, db: AsyncSession, move_id: int) -> DeletedResponse:
        """
        Raises:
            NotFoundError: no such move
            IntegrityViolation: some Pokemon still knows the move (→ 409)
        """
        move = await association_manager.load_move(db, move_id)
        if move is None:
            raise NotFoundError(resource="move", resource_id=move_id)
        await association_manager.delete_move(db, move)
        return DeletedResponse(id=move_id)


# ── Singleton Instance ────────────────────────────────────────────────────
move_service = MoveService()
