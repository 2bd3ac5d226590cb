"""
Pokedex API — Item Service
===========================

What:  Item listing, creation, partial update and deletion.
Who:   Called by /pokemon/{pokemon_id}/items and /items/{id} route handlers.

Default image:
    An item created without an image gets one of DEFAULT_ITEM_IMAGES at
    random. Updates never reassign it; clearing the image on update is a
    validation error like any other blank required field.
"""

import logging
import random
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pokedex_api.exceptions import DatabaseError, NotFoundError, ValidationFailed
from pokedex_api.models import DEFAULT_ITEM_IMAGES, Item, Pokemon
from pokedex_api.schemas.common import DeletedResponse
from pokedex_api.schemas.item import ItemResponse
from pokedex_api.services.associations import association_manager
from pokedex_api.validators import (
    ValidationErrors,
    check_integer,
    check_length,
    check_presence,
    coerce_integer,
    is_blank,
)

logger = logging.getLogger(__name__)


ITEM_FIELDS = ("pokemon_id", "name", "price", "happiness", "image_url")
INTEGER_FIELDS = ("pokemon_id", "price", "happiness")
NAME_MAX_LENGTH = 254
IMAGE_URL_MAX_LENGTH = 255
MISSING_POKEMON_MESSAGE = "must exist"


class ItemService:
    """
    Business logic layer for Items.

    The `rng` argument exists so tests can seed the default image choice.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def default_image(self) -> str:
        return self._rng.choice(DEFAULT_ITEM_IMAGES)

    async def list_items(self, db: AsyncSession, pokemon_id: int) -> List[ItemResponse]:
        """
        Raises:
            NotFoundError: the Pokemon does not exist (→ 404)
        """
        await self._require_pokemon(db, pokemon_id)
        try:
            items = await association_manager.items_for(db, pokemon_id)
        except SQLAlchemyError as e:
            logger.error("Database error listing items of %s: %s", pokemon_id, str(e))
            raise DatabaseError(
                message="Could not retrieve items. Please try again.",
                context={"pokemon_id": pokemon_id},
            ) from e
        return [ItemResponse.model_validate(item) for item in items]

    async def create_item(
        self,
        db: AsyncSession,
        pokemon_id: int,
        attrs: Dict[str, Any],
    ) -> ItemResponse:
        """
        Creates an item for the Pokemon named in the URL.

        A `pokemon_id` in the body is ignored; the path decides ownership.
        """
        await self._require_pokemon(db, pokemon_id)

        values = {k: v for k, v in attrs.items() if k in ITEM_FIELDS}
        values["pokemon_id"] = pokemon_id
        if is_blank(values.get("image_url")):
            values["image_url"] = self.default_image()

        errors = await self._validate(db, values)
        errors.raise_if_any()

        item = Item(**self._coerced(values))
        db.add(item)
        await self._flush(db)
        logger.info("Created item %s for pokemon %s", item.id, pokemon_id)
        return ItemResponse.model_validate(item)

    async def update_item(
        self,
        db: AsyncSession,
        item_id: int,
        attrs: Dict[str, Any],
    ) -> ItemResponse:
        """Partial update: only the supplied fields change."""
        item = await self._load(db, item_id)

        merged = {name: getattr(item, name) for name in ITEM_FIELDS}
        merged.update({k: v for k, v in attrs.items() if k in ITEM_FIELDS})

        errors = await self._validate(db, merged)
        errors.raise_if_any()

        for name, value in self._coerced(merged).items():
            setattr(item, name, value)
        await self._flush(db)
        logger.info("Updated item %s", item.id)
        return ItemResponse.model_validate(item)

    async def delete_item(self, db: AsyncSession, item_id: int) -> DeletedResponse:
        item = await self._load(db, item_id)
        await db.delete(item)
        await db.flush()
        logger.info("Deleted item %s", item_id)
        return DeletedResponse(id=item_id)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _load(self, db: AsyncSession, item_id: int) -> Item:
        result = await db.execute(select(Item).where(Item.id == item_id))
        item = result.scalar_one_or_none()
        if item is None:
            raise NotFoundError(resource="item", resource_id=item_id)
        return item

    async def _require_pokemon(self, db: AsyncSession, pokemon_id: int) -> None:
        if not await self._pokemon_exists(db, pokemon_id):
            raise NotFoundError(resource="pokemon", resource_id=pokemon_id)

    async def _pokemon_exists(self, db: AsyncSession, pokemon_id: Any) -> bool:
        result = await db.execute(select(Pokemon.id).where(Pokemon.id == pokemon_id))
        return result.first() is not None

    async def _validate(self, db: AsyncSession, values: Dict[str, Any]) -> ValidationErrors:
        errors = ValidationErrors()
        errors.add("name", check_presence(values.get("name")))
        if "name" not in errors:
            errors.add("name", check_length(values.get("name"), maximum=NAME_MAX_LENGTH))
        errors.add("price", check_integer(values.get("price"), minimum=0))
        errors.add("happiness", check_integer(values.get("happiness")))
        errors.add("image_url", check_presence(values.get("image_url")))
        if "image_url" not in errors:
            errors.add("image_url", check_length(values.get("image_url"), maximum=IMAGE_URL_MAX_LENGTH))

        # An id the column cannot hold cannot name an existing Pokemon
        pokemon_id = coerce_integer(values.get("pokemon_id"))
        if (
            check_integer(values.get("pokemon_id"))
            or not await self._pokemon_exists(db, pokemon_id)
        ):
            errors.add_message("pokemon", MISSING_POKEMON_MESSAGE)
        return errors

    def _coerced(self, values: Dict[str, Any]) -> Dict[str, Any]:
        coerced = dict(values)
        for name in INTEGER_FIELDS:
            if name in coerced:
                coerced[name] = coerce_integer(coerced[name])
        return coerced

    async def _flush(self, db: AsyncSession) -> None:
        try:
            await db.flush()
        except IntegrityError as exc:
            # The owning Pokemon was deleted between the check and the write
            if "foreign" in str(exc.orig).lower():
                raise ValidationFailed({"pokemon": [MISSING_POKEMON_MESSAGE]}) from exc
            logger.error("Unexpected integrity error: %s", str(exc.orig))
            raise DatabaseError(context={"error_type": type(exc).__name__}) from exc


# ── Singleton Instance ────────────────────────────────────────────────────
item_service = ItemService()
