"""
Pokedex API — PokeMove SQLAlchemy Model
========================================

What:  Join entity between `pokemons` and `moves`.

The (pokemon_id, move_id) unique index guarantees a Pokemon never knows the
same move twice, even if two requests race past the application check.
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pokedex_api.database import Base

if TYPE_CHECKING:
    from pokedex_api.models.move import Move
    from pokedex_api.models.pokemon import Pokemon


DUPLICATE_MOVE_MESSAGE = "pokemon cannot have the same move more than once"


class PokeMove(Base):
    """One (pokemon, move) pair."""

    __tablename__ = "poke_moves"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    pokemon_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("pokemons.id"),
        nullable=False,
    )

    move_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("moves.id"),
        nullable=False,
    )

    pokemon: Mapped["Pokemon"] = relationship(back_populates="poke_moves")

    move: Mapped["Move"] = relationship(back_populates="poke_moves")

    __table_args__ = (
        Index("ix_poke_moves_pokemon_id_move_id", "pokemon_id", "move_id", unique=True),
        Index("ix_poke_moves_move_id", "move_id"),
    )

    def __repr__(self) -> str:
        return f"<PokeMove(pokemon_id={self.pokemon_id}, move_id={self.move_id})>"
