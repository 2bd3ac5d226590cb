"""
Pokedex API — Item SQLAlchemy Model
====================================

What:  ORM model representing the `items` table.

Every item belongs to exactly one live Pokemon (NOT NULL foreign key, no
ON DELETE clause). The non-unique index on pokemon_id serves the
"items of this pokemon" listing and the cascade delete.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pokedex_api.database import Base
from pokedex_api.models.pokemon import utcnow

if TYPE_CHECKING:
    from pokedex_api.models.pokemon import Pokemon


# One of these is assigned when an item is created without an image
DEFAULT_ITEM_IMAGES = (
    "pokemon_berry.svg",
    "pokemon_egg.svg",
    "pokemon_potion.svg",
    "pokemon_super_potion.svg",
)


class Item(Base):
    """An item held by a Pokemon."""

    __tablename__ = "items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    pokemon_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("pokemons.id"),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    price: Mapped[int] = mapped_column(Integer, nullable=False)

    happiness: Mapped[int] = mapped_column(Integer, nullable=False)

    image_url: Mapped[str] = mapped_column(String(255), nullable=False)

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

    pokemon: Mapped["Pokemon"] = relationship(back_populates="items")

    __table_args__ = (
        Index("ix_items_pokemon_id", "pokemon_id"),
    )

    def __repr__(self) -> str:
        return f"<Item(id={self.id}, pokemon_id={self.pokemon_id}, name='{self.name}')>"
