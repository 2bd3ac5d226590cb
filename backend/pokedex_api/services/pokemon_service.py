"""
Pokedex API — Pokemon Service
==============================

What:  Pokemon CRUD: listing, detail, create, update, delete and the types list.
Why:   Keeps validation, move reconciliation and cascades out of the routes.
How:   Validates the full attribute set (collecting every error), then writes
       scalar fields and the move set inside the request transaction.
Who:   Called by the /pokemon route handlers.

Write Flow (POST /pokemon, PATCH /pokemon/{id}):
    ┌──────────────┐    ┌───────────────┐    ┌──────────────┐    ┌──────────┐
    │  Validate    │───▶│  Write scalar │───▶│ Reconcile    │───▶│  Reload  │
    │  (all fields │    │  fields +     │    │ move set     │    │  detail  │
    │  + moves)    │    │  flush        │    │ (associations)│    │          │
    └──────────────┘    └───────────────┘    └──────────────┘    └──────────┘

    Validation runs before anything is written. A failure later on (racing
    duplicate caught by a unique index) raises, and get_db_session rolls the
    whole request back.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pokedex_api.exceptions import DatabaseError, NotFoundError, ValidationFailed
from pokedex_api.models import Pokemon, POKEMON_TYPES
from pokedex_api.schemas.common import DeletedResponse
from pokedex_api.schemas.pokemon import PokemonDetail, PokemonSummary
from pokedex_api.services.associations import association_manager
from pokedex_api.services.integrity import value_taken, violated_columns
from pokedex_api.validators import (
    BLANK_MESSAGE,
    ValidationErrors,
    check_boolean,
    check_inclusion,
    check_integer,
    check_length,
    check_presence,
    coerce_integer,
    uniqueness_message,
)

logger = logging.getLogger(__name__)


SCALAR_FIELDS = (
    "number",
    "name",
    "attack",
    "defense",
    "poke_type",
    "image_url",
    "captured",
)
INTEGER_FIELDS = ("number", "attack", "defense")

MOVE_NAME_MAX_LENGTH = 254
IMAGE_URL_MAX_LENGTH = 255
TYPE_MESSAGE = "'{value}' is not a valid Pokemon type"


def check_move_names(value: Any) -> Tuple[List[str], List[str]]:
    """
    Normalizes a requested move list.

    Returns (names, messages). Blank entries are dropped (empty form inputs)
    and repeated names collapse to one; an empty result is "can't be blank".
    """
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return [], ["must be a list of move names"]

    names: List[str] = []
    messages: List[str] = []
    for entry in value:
        if entry is None:
            continue
        if not isinstance(entry, str):
            messages.append(f"'{entry}' is not a valid move name")
            continue
        name = entry.strip()
        if not name or name in names:
            continue
        if len(name) > MOVE_NAME_MAX_LENGTH:
            messages.append(
                f"'{name[:20]}...' is too long (maximum is {MOVE_NAME_MAX_LENGTH} characters)"
            )
            continue
        names.append(name)

    if not names and not messages:
        messages.append(BLANK_MESSAGE)
    return names, messages


class PokemonService:
    """
    Business logic layer for Pokemon.

    Responsibilities:
        - list_types(): the fixed, sorted type list
        - list_pokemon(): summaries for the index page
        - get_pokemon(): full detail with moves and items
        - create_pokemon() / update_pokemon(): validated writes + move set
        - delete_pokemon(): ordered cascade through the association manager
    """

    def list_types(self) -> List[str]:
        return list(POKEMON_TYPES)

    async def list_pokemon(self, db: AsyncSession) -> List[PokemonSummary]:
        try:
            result = await db.execute(select(Pokemon).order_by(Pokemon.id))
            return [PokemonSummary.from_pokemon(p) for p in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing pokemon: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve pokemon. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

    async def get_pokemon(self, db: AsyncSession, pokemon_id: int) -> PokemonDetail:
        """
        Raises:
            NotFoundError: no Pokemon with this id (→ 404)
        """
        pokemon = await self._load(db, pokemon_id)
        return PokemonDetail.from_pokemon(pokemon)

    async def create_pokemon(self, db: AsyncSession, attrs: Dict[str, Any]) -> PokemonDetail:
        """
        Creates a Pokemon and its move set in one unit.

        Args:
            attrs: permitted, snake_cased attributes (see translation.permit).
                   `captured` defaults to false when absent; an explicit null
                   is rejected. `moves` is required and must not be empty.

        Raises:
            ValidationFailed: every violated field, including uniqueness
        """
        attrs = dict(attrs)
        attrs.setdefault("captured", False)

        errors = await self._validate(db, attrs)
        names = self._validate_moves(attrs, errors, required=True)
        errors.raise_if_any()

        pokemon = Pokemon(**self._scalar_values(attrs))
        db.add(pokemon)
        await self._flush(db, attrs)
        await association_manager.assign_moves(db, pokemon, names or [])

        logger.info("Created pokemon %s (#%s %s)", pokemon.id, pokemon.number, pokemon.name)
        return PokemonDetail.from_pokemon(await self._load(db, pokemon.id))

    async def update_pokemon(
        self,
        db: AsyncSession,
        pokemon_id: int,
        attrs: Dict[str, Any],
    ) -> PokemonDetail:
        """
        Partially updates a Pokemon; a supplied `moves` list replaces the
        current move set.

        Raises:
            NotFoundError: no Pokemon with this id
            ValidationFailed: every violated field
        """
        pokemon = await self._load(db, pokemon_id)

        merged = {name: getattr(pokemon, name) for name in SCALAR_FIELDS}
        merged.update({k: v for k, v in attrs.items() if k in SCALAR_FIELDS})

        errors = await self._validate(db, merged, exclude_id=pokemon.id)
        names = self._validate_moves(attrs, errors, required=False)
        errors.raise_if_any()

        for name, value in self._scalar_values(merged).items():
            setattr(pokemon, name, value)
        await self._flush(db, merged)
        if names is not None:
            await association_manager.assign_moves(db, pokemon, names)

        logger.info("Updated pokemon %s", pokemon.id)
        return PokemonDetail.from_pokemon(await self._load(db, pokemon.id))

    async def delete_pokemon(self, db: AsyncSession, pokemon_id: int) -> DeletedResponse:
        pokemon = await self._load(db, pokemon_id)
        await association_manager.delete_pokemon(db, pokemon)
        return DeletedResponse(id=pokemon_id)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _load(self, db: AsyncSession, pokemon_id: int) -> Pokemon:
        pokemon = await association_manager.load_pokemon(db, pokemon_id)
        if pokemon is None:
            raise NotFoundError(resource="pokemon", resource_id=pokemon_id)
        return pokemon

    async def _validate(
        self,
        db: AsyncSession,
        attrs: Dict[str, Any],
        exclude_id: Optional[int] = None,
    ) -> ValidationErrors:
        errors = ValidationErrors()
        errors.add("number", check_integer(attrs.get("number"), greater_than=0))
        errors.add("name", check_length(attrs.get("name"), minimum=3, maximum=255))
        errors.add("attack", check_integer(attrs.get("attack"), minimum=0, maximum=100))
        errors.add("defense", check_integer(attrs.get("defense"), minimum=0, maximum=100))
        errors.add("poke_type", check_inclusion(attrs.get("poke_type"), POKEMON_TYPES, TYPE_MESSAGE))
        errors.add("image_url", check_presence(attrs.get("image_url")))
        if "image_url" not in errors:
            errors.add("image_url", check_length(attrs.get("image_url"), maximum=IMAGE_URL_MAX_LENGTH))
        errors.add("captured", check_boolean(attrs.get("captured")))

        # Uniqueness only makes sense for values that are otherwise valid
        if "number" not in errors:
            number = coerce_integer(attrs["number"])
            if await value_taken(db, Pokemon.number, number, exclude_id):
                errors.add_message("number", uniqueness_message(attrs["number"]))
        if "name" not in errors:
            if await value_taken(db, Pokemon.name, attrs["name"], exclude_id):
                errors.add_message("name", uniqueness_message(attrs["name"]))
        return errors

    def _validate_moves(
        self,
        attrs: Dict[str, Any],
        errors: ValidationErrors,
        required: bool,
    ) -> Optional[List[str]]:
        """Move names to assign, or None when the request leaves moves alone."""
        if "moves" not in attrs:
            if required:
                errors.add_message("moves", BLANK_MESSAGE)
            return None
        names, messages = check_move_names(attrs["moves"])
        errors.add("moves", messages)
        return names

    def _scalar_values(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        values = {name: attrs[name] for name in SCALAR_FIELDS if name in attrs}
        for name in INTEGER_FIELDS:
            if name in values:
                values[name] = coerce_integer(values[name])
        return values

    async def _flush(self, db: AsyncSession, attrs: Dict[str, Any]) -> None:
        """
        Flushes pending Pokemon changes, mapping unique-index violations to
        the same messages the pre-check produces.
        """
        try:
            await db.flush()
        except IntegrityError as exc:
            columns = violated_columns(exc, "pokemons", ["number", "name"])
            if not columns:
                logger.error("Unexpected integrity error: %s", str(exc.orig))
                raise DatabaseError(context={"error_type": type(exc).__name__}) from exc
            logger.warning("Racing duplicate rejected by unique index: %s", columns)
            raise ValidationFailed(
                {column: [uniqueness_message(attrs.get(column))] for column in columns}
            ) from exc


# ── Singleton Instance ────────────────────────────────────────────────────
pokemon_service = PokemonService()
