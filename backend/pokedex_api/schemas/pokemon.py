"""
Pokedex API — Pokemon Schemas
==============================

What:  List and detail representations of a Pokemon.

Image policy:
    The stored image_url is only revealed once `captured` is true; until then
    both representations carry the placeholder. This is decided here, at
    serialization time, and never written back to the database.
"""

from datetime import datetime
from typing import List

from pydantic import Field

from pokedex_api.models.pokemon import Pokemon, UNKNOWN_IMAGE_URL
from pokedex_api.schemas.common import CamelModel
from pokedex_api.schemas.item import ItemResponse


def visible_image_url(pokemon: Pokemon, placeholder: str = UNKNOWN_IMAGE_URL) -> str:
    return pokemon.image_url if pokemon.captured else placeholder


class PokemonSummary(CamelModel):
    """
    What:  Abbreviated Pokemon for the index page.
    Who:   GET /pokemon, and the pokemon list of GET /moves/{id}.
    """
    id: int
    number: int
    name: str
    image_url: str = Field(description="Sprite, or the placeholder if not captured")
    captured: bool

    @classmethod
    def from_pokemon(cls, pokemon: Pokemon) -> "PokemonSummary":
        return cls(
            id=pokemon.id,
            number=pokemon.number,
            name=pokemon.name,
            image_url=visible_image_url(pokemon),
            captured=pokemon.captured,
        )


class PokemonDetail(CamelModel):
    """
    What:  Full Pokemon with its moves (names) and items.
    Who:   GET/POST/PATCH/PUT /pokemon[/{id}].

    `items` and `moves` must be loaded on the instance before calling
    from_pokemon (see AssociationManager.load_pokemon); async sessions
    cannot lazy-load them.
    """
    id: int
    number: int
    name: str
    attack: int
    defense: int
    poke_type: str = Field(alias="type", description="One of GET /pokemon/types")
    image_url: str = Field(description="Sprite, or the placeholder if not captured")
    captured: bool
    moves: List[str] = Field(description="Names of the moves this Pokemon knows")
    items: List[ItemResponse]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_pokemon(cls, pokemon: Pokemon) -> "PokemonDetail":
        return cls(
            id=pokemon.id,
            number=pokemon.number,
            name=pokemon.name,
            attack=pokemon.attack,
            defense=pokemon.defense,
            poke_type=pokemon.poke_type,
            image_url=visible_image_url(pokemon),
            captured=pokemon.captured,
            moves=[move.name for move in pokemon.moves],
            items=[ItemResponse.model_validate(item) for item in pokemon.items],
            created_at=pokemon.created_at,
            updated_at=pokemon.updated_at,
        )
