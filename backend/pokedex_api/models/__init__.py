# Models package init
"""
Pokedex API — ORM Models
=========================

Importing the package registers every mapped class with `Base.metadata`,
which relationship strings ("Item", "PokeMove") and Alembic both rely on.

Tables:
    pokemons    ← Pokemon
    items       ← Item        (pokemon_id → pokemons.id)
    moves       ← Move
    poke_moves  ← PokeMove    (pokemon_id → pokemons.id, move_id → moves.id)
"""

from pokedex_api.models.pokemon import Pokemon, POKEMON_TYPES, UNKNOWN_IMAGE_URL
from pokedex_api.models.item import Item, DEFAULT_ITEM_IMAGES
from pokedex_api.models.move import Move
from pokedex_api.models.poke_move import PokeMove

__all__ = [
    "Pokemon",
    "Item",
    "Move",
    "PokeMove",
    "POKEMON_TYPES",
    "UNKNOWN_IMAGE_URL",
    "DEFAULT_ITEM_IMAGES",
]
