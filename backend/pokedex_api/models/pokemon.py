"""
Pokedex API — Pokemon SQLAlchemy Model
=======================================

What:  ORM model representing the `pokemons` table.
Who:   Used by PokemonService and the association manager; read by Alembic.

Table Design Rationale:
    - number / name: globally unique, each backed by a unique index so racing
      inserts are rejected by the database even when the pre-check passes
    - poke_type: stored under its internal name; exposed as `type` by the API
    - image_url: the real sprite; only shown once the Pokemon is captured
    - captured: NOT NULL with a server default of false
    - created_at / updated_at: UTC, timezone aware

Relationships are declared without ORM cascades. Deleting a Pokemon is an
explicit, ordered operation in the association manager (items, then
poke_moves, then the pokemon row).
"""

from datetime import datetime, timezone
from typing import List, TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Index, Integer, String, false, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pokedex_api.database import Base

if TYPE_CHECKING:
    from pokedex_api.models.item import Item
    from pokedex_api.models.move import Move
    from pokedex_api.models.poke_move import PokeMove


POKEMON_TYPES = sorted([
    "fire", "electric", "normal", "ghost",
    "psychic", "water", "bug", "dragon",
    "grass", "fighting", "ice", "flying",
    "poison", "ground", "rock", "steel",
])

# Shown instead of image_url while a Pokemon is not captured
UNKNOWN_IMAGE_URL = "/images/unknown.png"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Pokemon(Base):
    """
    A Pokemon in the catalog.

    Query Patterns:
        - List: SELECT ... ORDER BY id
        - Detail: SELECT ... WHERE id = :id, with items and moves selectin-loaded
        - Uniqueness pre-checks: WHERE number = :n / WHERE name = :name
          → served by ix_pokemons_number / ix_pokemons_name
    """

    __tablename__ = "pokemons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    number: Mapped[int] = mapped_column(Integer, nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    attack: Mapped[int] = mapped_column(Integer, nullable=False)

    defense: Mapped[int] = mapped_column(Integer, nullable=False)

    # One of POKEMON_TYPES; external name is `type`
    poke_type: Mapped[str] = mapped_column(String(32), nullable=False)

    image_url: Mapped[str] = mapped_column(String(255), nullable=False)

    captured: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # passive_deletes="all": the ORM never nulls out children on delete;
    # the association manager removes them explicitly first.
    items: Mapped[List["Item"]] = relationship(
        back_populates="pokemon",
        order_by="Item.id",
        passive_deletes="all",
    )

    poke_moves: Mapped[List["PokeMove"]] = relationship(
        back_populates="pokemon",
        order_by="PokeMove.id",
        passive_deletes="all",
    )

    moves: Mapped[List["Move"]] = relationship(
        secondary="poke_moves",
        order_by="Move.name",
        viewonly=True,
    )

    __table_args__ = (
        Index("ix_pokemons_number", "number", unique=True),
        Index("ix_pokemons_name", "name", unique=True),
    )

    def __repr__(self) -> str:
        return f"<Pokemon(id={self.id}, number={self.number}, name='{self.name}')>"
