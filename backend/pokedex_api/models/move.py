"""
Pokedex API — Move SQLAlchemy Model
====================================

What:  ORM model representing the `moves` table.

Moves are shared between Pokemon and matched by exact name, so `name`
carries a unique index. A move row outlives the Pokemon that reference it;
deleting one that is still referenced is refused by the association manager.
"""

from datetime import datetime
from typing import List, TYPE_CHECKING

from sqlalchemy import DateTime, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pokedex_api.database import Base
from pokedex_api.models.pokemon import utcnow

if TYPE_CHECKING:
    from pokedex_api.models.pokemon import Pokemon
    from pokedex_api.models.poke_move import PokeMove


class Move(Base):
    """A move that any number of Pokemon may know."""

    __tablename__ = "moves"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

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

    poke_moves: Mapped[List["PokeMove"]] = relationship(
        back_populates="move",
        passive_deletes="all",
    )

    pokemon: Mapped[List["Pokemon"]] = relationship(
        secondary="poke_moves",
        order_by="Pokemon.id",
        viewonly=True,
    )

    __table_args__ = (
        Index("ix_moves_name", "name", unique=True),
    )

    def __repr__(self) -> str:
        return f"<Move(id={self.id}, name='{self.name}')>"
