"""
Pokedex API — Move Schemas
===========================
"""

from typing import List

from pokedex_api.models.move import Move
from pokedex_api.schemas.common import CamelModel
from pokedex_api.schemas.pokemon import PokemonSummary


class MoveResponse(CamelModel):
    id: int
    name: str


class MoveDetail(CamelModel):
    """A move and every Pokemon that knows it."""
    id: int
    name: str
    pokemon: List[PokemonSummary]

    @classmethod
    def from_move(cls, move: Move) -> "MoveDetail":
        return cls(
            id=move.id,
            name=move.name,
            pokemon=[PokemonSummary.from_pokemon(pokemon) for pokemon in move.pokemon],
        )
