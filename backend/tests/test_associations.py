"""
Pokedex API — Association Manager Tests
========================================

What:  Join-table maintenance and explicit cascades against a real (SQLite)
       database, with foreign keys enforced.

What we test:
    ✅ Reassigning {A, B} → {B, C} deletes A's row, keeps B's, inserts C's
    ✅ Unknown move names are created once and reused afterwards
    ✅ A move name inserted concurrently is linked instead of rejected
    ✅ A duplicate (pokemon, move) pair is rejected, the existing row survives
    ✅ Deleting a Pokemon removes its items and join rows, never the moves
    ✅ A move still known by some Pokemon cannot be deleted
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import func, select

from pokedex_api.exceptions import IntegrityViolation, ValidationFailed
from pokedex_api.models import Item, Move, PokeMove, Pokemon
from pokedex_api.models.poke_move import DUPLICATE_MOVE_MESSAGE
from pokedex_api.services.associations import AssociationManager, MoveDelta


async def join_rows(db, pokemon_id):
    result = await db.execute(
        select(Move.name, PokeMove.id)
        .join(Move, PokeMove.move_id == Move.id)
        .where(PokeMove.pokemon_id == pokemon_id)
    )
    return dict(result.all())


async def count(db, model):
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar()


class TestAssignMoves:

    def setup_method(self):
        self.manager = AssociationManager()

    @pytest.mark.asyncio
    async def test_initial_assignment_creates_moves(self, db_session, make_pokemon):
        pokemon = await make_pokemon(db_session)

        delta = await self.manager.assign_moves(db_session, pokemon, ["tackle", "growl"])

        assert delta == MoveDelta(added=["tackle", "growl"], removed=[], kept=[])
        assert set(await join_rows(db_session, pokemon.id)) == {"tackle", "growl"}
        assert await count(db_session, Move) == 2

    @pytest.mark.asyncio
    async def test_reassignment_diffs_by_name(self, db_session, make_pokemon):
        pokemon = await make_pokemon(db_session)
        await self.manager.assign_moves(db_session, pokemon, ["A", "B"])
        before = await join_rows(db_session, pokemon.id)

        delta = await self.manager.assign_moves(db_session, pokemon, ["B", "C"])

        after = await join_rows(db_session, pokemon.id)
        assert delta.added == ["C"]
        assert delta.removed == ["A"]
        assert delta.kept == ["B"]
        assert set(after) == {"B", "C"}
        # B's join row is the same row, not a re-insert
        assert after["B"] == before["B"]
        # Move A itself survives; only the link is gone
        assert await count(db_session, Move) == 3

    @pytest.mark.asyncio
    async def test_same_set_changes_nothing(self, db_session, make_pokemon):
        pokemon = await make_pokemon(db_session)
        await self.manager.assign_moves(db_session, pokemon, ["tackle"])

        delta = await self.manager.assign_moves(db_session, pokemon, ["tackle", "tackle"])

        assert not delta.changed
        assert delta.kept == ["tackle"]

    @pytest.mark.asyncio
    async def test_existing_moves_are_shared(self, db_session, make_pokemon):
        first = await make_pokemon(db_session, number=1, name="Bulbasaur")
        second = await make_pokemon(db_session, number=2, name="Ivysaur")

        await self.manager.assign_moves(db_session, first, ["vine whip"])
        await self.manager.assign_moves(db_session, second, ["vine whip", "razor leaf"])

        assert await count(db_session, Move) == 2
        move = (await db_session.execute(select(Move).where(Move.name == "vine whip"))).scalar_one()
        known_by = await self.manager.pokemon_for_move(db_session, move.id)
        assert [p.name for p in known_by] == ["Bulbasaur", "Ivysaur"]

    @pytest.mark.asyncio
    async def test_move_created_concurrently_is_reused(self, db_session, make_pokemon):
        """The lookup misses a move another request committed; the insert hits the index."""
        first = await make_pokemon(db_session, number=1, name="Bulbasaur")
        second = await make_pokemon(db_session, number=2, name="Ivysaur")
        await self.manager.assign_moves(db_session, first, ["tackle"])
        [existing] = await self.manager.find_or_create_moves(db_session, ["tackle"])

        with patch.object(self.manager, "_moves_named", AsyncMock(return_value={})):
            delta = await self.manager.assign_moves(db_session, second, ["tackle"])

        assert delta.added == ["tackle"]
        assert await count(db_session, Move) == 1
        assert set(await join_rows(db_session, second.id)) == {"tackle"}
        known_by = await self.manager.pokemon_for_move(db_session, existing.id)
        assert [p.name for p in known_by] == ["Bulbasaur", "Ivysaur"]


class TestAddMove:

    def setup_method(self):
        self.manager = AssociationManager()

    @pytest.mark.asyncio
    async def test_duplicate_pair_is_rejected(self, db_session, make_pokemon):
        pokemon = await make_pokemon(db_session)
        [move] = await self.manager.find_or_create_moves(db_session, ["tackle"])
        original = await self.manager.add_move(db_session, pokemon, move)

        with pytest.raises(ValidationFailed) as exc_info:
            await self.manager.add_move(db_session, pokemon, move)

        assert exc_info.value.errors == {"move": [DUPLICATE_MOVE_MESSAGE]}
        rows = await join_rows(db_session, pokemon.id)
        assert rows == {"tackle": original.id}


class TestLoading:

    def setup_method(self):
        self.manager = AssociationManager()

    @pytest.mark.asyncio
    async def test_load_pokemon_orders_moves_by_name(self, db_session, make_pokemon):
        pokemon = await make_pokemon(db_session)
        await self.manager.assign_moves(db_session, pokemon, ["vine whip", "growl", "tackle"])

        loaded = await self.manager.load_pokemon(db_session, pokemon.id)

        assert [move.name for move in loaded.moves] == ["growl", "tackle", "vine whip"]
        assert loaded.items == []

    @pytest.mark.asyncio
    async def test_load_missing_pokemon(self, db_session):
        assert await self.manager.load_pokemon(db_session, 404) is None


class TestDeletePokemon:

    def setup_method(self):
        self.manager = AssociationManager()

    @pytest.mark.asyncio
    async def test_cascades_to_items_and_join_rows(self, db_session, make_pokemon):
        pokemon = await make_pokemon(db_session)
        other = await make_pokemon(db_session, number=4, name="Charmander", poke_type="fire")
        await self.manager.assign_moves(db_session, pokemon, ["tackle", "growl"])
        await self.manager.assign_moves(db_session, other, ["tackle"])
        db_session.add_all([
            Item(pokemon_id=pokemon.id, name="Potion", price=3, happiness=1, image_url="p.svg"),
            Item(pokemon_id=pokemon.id, name="Egg", price=1, happiness=9, image_url="e.svg"),
            Item(pokemon_id=other.id, name="Berry", price=2, happiness=2, image_url="b.svg"),
        ])
        await db_session.flush()
        pokemon_id = pokemon.id

        loaded = await self.manager.load_pokemon(db_session, pokemon_id)
        await self.manager.delete_pokemon(db_session, loaded)

        assert (await db_session.execute(select(Pokemon.id).where(Pokemon.id == pokemon_id))).first() is None
        assert await self.manager.items_for(db_session, pokemon_id) == []
        assert await join_rows(db_session, pokemon_id) == {}
        # Other Pokemon and the moves themselves are untouched
        assert [item.name for item in await self.manager.items_for(db_session, other.id)] == ["Berry"]
        assert set(await join_rows(db_session, other.id)) == {"tackle"}
        assert await count(db_session, Move) == 2


class TestDeleteMove:

    def setup_method(self):
        self.manager = AssociationManager()

    @pytest.mark.asyncio
    async def test_referenced_move_is_protected(self, db_session, make_pokemon):
        pokemon = await make_pokemon(db_session)
        await self.manager.assign_moves(db_session, pokemon, ["tackle"])
        [move] = await self.manager.find_or_create_moves(db_session, ["tackle"])

        with pytest.raises(IntegrityViolation) as exc_info:
            await self.manager.delete_move(db_session, move)

        assert exc_info.value.context["references"] == 1
        assert await count(db_session, Move) == 1

    @pytest.mark.asyncio
    async def test_unreferenced_move_is_deleted(self, db_session, make_pokemon):
        pokemon = await make_pokemon(db_session)
        await self.manager.assign_moves(db_session, pokemon, ["tackle"])
        await self.manager.assign_moves(db_session, pokemon, ["growl"])
        [move] = await self.manager.find_or_create_moves(db_session, ["tackle"])

        await self.manager.delete_move(db_session, move)

        assert [m.name for m in await self.manager.moves_for(db_session, pokemon.id)] == ["growl"]
        assert await count(db_session, Move) == 1
