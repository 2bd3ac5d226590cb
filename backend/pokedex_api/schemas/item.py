"""
Pokedex API — Item Schemas
===========================
"""

from datetime import datetime

from pydantic import Field

from pokedex_api.schemas.common import CamelModel


class ItemResponse(CamelModel):
    """
    Full item representation.

    Who:   GET /pokemon/{id}/items, POST /pokemon/{id}/items,
           PATCH /items/{id}, and nested inside PokemonDetail.
    """
    id: int
    pokemon_id: int
    name: str
    price: int
    happiness: int
    image_url: str = Field(description="Sprite file name or URL")
    created_at: datetime
    updated_at: datetime
