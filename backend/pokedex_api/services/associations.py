"""
Pokedex API — Association Manager
==================================

What:  Loads and mutates the relationships between Pokemon, Items and Moves.
Why:   The ORM relationships are declared without cascades; every join-row
       insert/delete and every cascade happens here, explicitly, in an order
       the foreign keys accept.
Who:   Called by PokemonService, ItemService and MoveService.
When:  Inside the request transaction opened by get_db_session. Nothing here
       commits; a failure anywhere rolls back the whole request.

Move reconciliation (assign_moves), current {A, B} → requested {B, C}:
    ┌──────────────┐   ┌───────────────────┐   ┌──────────────────────┐
    │ diff by name │──▶│ DELETE join row A │──▶│ find/create move C,  │
    │ -A, =B, +C   │   │ (B untouched)     │   │ INSERT join row C    │
    └──────────────┘   └───────────────────┘   └──────────────────────┘

Pokemon deletion (delete_pokemon):
    items → poke_moves → pokemons   (children first; no FK is ever violated)
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pokedex_api.exceptions import IntegrityViolation, ValidationFailed
from pokedex_api.models import Item, Move, PokeMove, Pokemon
from pokedex_api.models.poke_move import DUPLICATE_MOVE_MESSAGE
from pokedex_api.services.integrity import violated_columns

logger = logging.getLogger(__name__)


@dataclass
class MoveDelta:
    """Outcome of a move-set reassignment, by move name."""
    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    kept: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


def _unique_names(names: Iterable[str]) -> List[str]:
    seen: Dict[str, None] = {}
    for name in names:
        seen.setdefault(name, None)
    return list(seen)


class AssociationManager:
    """
    Relationship queries and explicit cascades.

    Loading:
        load_pokemon(), items_for(), moves_for(), load_move(), pokemon_for_move()
    Mutation:
        find_or_create_moves(), add_move(), assign_moves()
    Deletion:
        delete_pokemon() cascades; delete_move() refuses while referenced
    """

    # ── Loading ───────────────────────────────────────────────────────────

    async def load_pokemon(self, db: AsyncSession, pokemon_id: int) -> Optional[Pokemon]:
        """
        A Pokemon with `items` (insertion order) and `moves` loaded.

        populate_existing: the instance may already sit in the identity map
        with stale collections from before this request's writes.
        """
        result = await db.execute(
            select(Pokemon)
            .where(Pokemon.id == pokemon_id)
            .options(selectinload(Pokemon.items), selectinload(Pokemon.moves))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def items_for(self, db: AsyncSession, pokemon_id: int) -> List[Item]:
        result = await db.execute(
            select(Item).where(Item.pokemon_id == pokemon_id).order_by(Item.id)
        )
        return list(result.scalars().all())

    async def moves_for(self, db: AsyncSession, pokemon_id: int) -> List[Move]:
        result = await db.execute(
            select(Move)
            .join(PokeMove, PokeMove.move_id == Move.id)
            .where(PokeMove.pokemon_id == pokemon_id)
            .order_by(Move.name)
        )
        return list(result.scalars().all())

    async def load_move(self, db: AsyncSession, move_id: int) -> Optional[Move]:
        result = await db.execute(
            select(Move)
            .where(Move.id == move_id)
            .options(selectinload(Move.pokemon))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def pokemon_for_move(self, db: AsyncSession, move_id: int) -> List[Pokemon]:
        result = await db.execute(
            select(Pokemon)
            .join(PokeMove, PokeMove.pokemon_id == Pokemon.id)
            .where(PokeMove.move_id == move_id)
            .order_by(Pokemon.id)
        )
        return list(result.scalars().all())

    # ── Mutation ──────────────────────────────────────────────────────────

    async def find_or_create_moves(self, db: AsyncSession, names: Iterable[str]) -> List[Move]:
        """
        Resolves move names to rows, creating the missing ones.

        Returns the moves in the order the names were given (duplicates
        collapsed). Matching is by exact name.
        """
        wanted = _unique_names(names)
        if not wanted:
            return []

        by_name = await self._moves_named(db, wanted)

        created = []
        for name in wanted:
            if name not in by_name:
                by_name[name] = await self._create_move(db, name)
                created.append(name)

        if created:
            logger.info("Resolved %d new move name(s): %s", len(created), ", ".join(created))

        return [by_name[name] for name in wanted]

    async def _moves_named(self, db: AsyncSession, names: List[str]) -> Dict[str, Move]:
        result = await db.execute(select(Move).where(Move.name.in_(names)))
        return {move.name: move for move in result.scalars().all()}

    async def _create_move(self, db: AsyncSession, name: str) -> Move:
        """
        Inserts one Move inside a SAVEPOINT.

        When a concurrent request committed the same name after our lookup,
        the unique index rejects the insert; only the savepoint is rolled
        back and the row the other request created is used instead.
        """
        move = Move(name=name)
        try:
            async with db.begin_nested():
                db.add(move)
        except IntegrityError as exc:
            if not violated_columns(exc, "moves", ["name"]):
                raise
            result = await db.execute(select(Move).where(Move.name == name))
            existing = result.scalar_one_or_none()
            if existing is None:
                raise
            logger.warning("Move '%s' was created concurrently; reusing move %s", name, existing.id)
            return existing
        return move

    async def add_move(self, db: AsyncSession, pokemon: Pokemon, move: Move) -> PokeMove:
        """
        Inserts one (pokemon, move) join row.

        Raises:
            ValidationFailed: the pair already exists; the existing row is
                left exactly as it was.
        """
        existing = await db.execute(
            select(PokeMove.id).where(
                PokeMove.pokemon_id == pokemon.id,
                PokeMove.move_id == move.id,
            )
        )
        if existing.first() is not None:
            raise ValidationFailed({"move": [DUPLICATE_MOVE_MESSAGE]})

        poke_move = PokeMove(pokemon_id=pokemon.id, move_id=move.id)
        db.add(poke_move)
        try:
            await db.flush()
        except IntegrityError as exc:
            if violated_columns(exc, "poke_moves", ["pokemon_id", "move_id"]):
                raise ValidationFailed({"move": [DUPLICATE_MOVE_MESSAGE]}) from exc
            raise
        return poke_move

    async def assign_moves(
        self,
        db: AsyncSession,
        pokemon: Pokemon,
        names: Iterable[str],
    ) -> MoveDelta:
        """
        Replaces the Pokemon's move set with `names`.

        Join rows for names no longer requested are deleted, rows for new
        names are inserted (creating Move rows as needed) and rows for names
        present on both sides are not touched. The caller's transaction makes
        this atomic together with any scalar update of the Pokemon.
        """
        wanted = _unique_names(names)

        result = await db.execute(
            select(PokeMove.id, Move.name)
            .join(Move, PokeMove.move_id == Move.id)
            .where(PokeMove.pokemon_id == pokemon.id)
        )
        current = {name: poke_move_id for poke_move_id, name in result.all()}

        delta = MoveDelta(
            added=[name for name in wanted if name not in current],
            removed=[name for name in current if name not in wanted],
            kept=[name for name in wanted if name in current],
        )

        if delta.removed:
            await db.execute(
                delete(PokeMove).where(
                    PokeMove.id.in_([current[name] for name in delta.removed])
                )
            )

        moves = await self.find_or_create_moves(db, delta.added)
        for move in moves:
            db.add(PokeMove(pokemon_id=pokemon.id, move_id=move.id))

        try:
            await db.flush()
        except IntegrityError as exc:
            if violated_columns(exc, "poke_moves", ["pokemon_id", "move_id"]):
                raise ValidationFailed({"moves": [DUPLICATE_MOVE_MESSAGE]}) from exc
            raise

        if delta.changed:
            logger.info(
                "Pokemon %s moves reassigned: +%s -%s",
                pokemon.id,
                delta.added,
                delta.removed,
            )
        return delta

    # ── Deletion ──────────────────────────────────────────────────────────

    async def delete_pokemon(self, db: AsyncSession, pokemon: Pokemon) -> None:
        """Deletes the Pokemon's items, then its join rows, then the Pokemon."""
        items = await db.execute(delete(Item).where(Item.pokemon_id == pokemon.id))
        poke_moves = await db.execute(delete(PokeMove).where(PokeMove.pokemon_id == pokemon.id))
        await db.delete(pokemon)
        await db.flush()
        logger.info(
            "Deleted pokemon %s with %d item(s) and %d move link(s)",
            pokemon.id,
            items.rowcount,
            poke_moves.rowcount,
        )

    async def delete_move(self, db: AsyncSession, move: Move) -> None:
        """
        Deletes a Move nobody knows.

        Raises:
            IntegrityViolation: PokeMove rows still reference the move. They
                must be removed first (by reassigning those Pokemon's moves).
        """
        result = await db.execute(
            select(func.count(PokeMove.id)).where(PokeMove.move_id == move.id)
        )
        references = result.scalar() or 0
        if references:
            raise IntegrityViolation(
                message=(
                    f"Move '{move.name}' is still known by {references} pokemon "
                    "and cannot be deleted"
                ),
                context={"move_id": move.id, "references": references},
            )
        await db.delete(move)
        await db.flush()
        logger.info("Deleted move %s ('%s')", move.id, move.name)


# ── Singleton Instance ────────────────────────────────────────────────────
association_manager = AssociationManager()
