"""Create pokedex tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Creates pokemons, items, moves and poke_moves.
How:   Parents first (pokemons, moves), then the tables referencing them.

Rollback: downgrade() drops the tables in reverse dependency order.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def timestamps():
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "pokemons",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("number", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("attack", sa.Integer(), nullable=False),
        sa.Column("defense", sa.Integer(), nullable=False),
        sa.Column("poke_type", sa.String(32), nullable=False),
        sa.Column("image_url", sa.String(255), nullable=False),
        sa.Column("captured", sa.Boolean(), server_default=sa.false(), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_pokemons"),
    )
    op.create_index("ix_pokemons_number", "pokemons", ["number"], unique=True)
    op.create_index("ix_pokemons_name", "pokemons", ["name"], unique=True)

    op.create_table(
        "moves",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_moves"),
    )
    op.create_index("ix_moves_name", "moves", ["name"], unique=True)

    # No ON DELETE clauses: the application deletes children explicitly
    op.create_table(
        "items",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("pokemon_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("happiness", sa.Integer(), nullable=False),
        sa.Column("image_url", sa.String(255), nullable=False),
        *timestamps(),
        sa.ForeignKeyConstraint(
            ["pokemon_id"], ["pokemons.id"], name="fk_items_pokemon_id_pokemons"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_items"),
    )
    op.create_index("ix_items_pokemon_id", "items", ["pokemon_id"])

    op.create_table(
        "poke_moves",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("pokemon_id", sa.Integer(), nullable=False),
        sa.Column("move_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["pokemon_id"], ["pokemons.id"], name="fk_poke_moves_pokemon_id_pokemons"
        ),
        sa.ForeignKeyConstraint(
            ["move_id"], ["moves.id"], name="fk_poke_moves_move_id_moves"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_poke_moves"),
    )
    op.create_index(
        "ix_poke_moves_pokemon_id_move_id",
        "poke_moves",
        ["pokemon_id", "move_id"],
        unique=True,
    )
    op.create_index("ix_poke_moves_move_id", "poke_moves", ["move_id"])


def downgrade() -> None:
    """
    WARNING: destructive — all catalog data is permanently lost.
    """
    op.drop_index("ix_poke_moves_move_id", table_name="poke_moves")
    op.drop_index("ix_poke_moves_pokemon_id_move_id", table_name="poke_moves")
    op.drop_table("poke_moves")
    op.drop_index("ix_items_pokemon_id", table_name="items")
    op.drop_table("items")
    op.drop_index("ix_moves_name", table_name="moves")
    op.drop_table("moves")
    op.drop_index("ix_pokemons_name", table_name="pokemons")
    op.drop_index("ix_pokemons_number", table_name="pokemons")
    op.drop_table("pokemons")
