"""
Pokedex API — Pokemon Route Handlers
=====================================

What:  /pokemon collection and member routes plus the static types list.
How:   Write bodies go through the translation layer (wrap, snake-case,
       permit) before reaching PokemonService.
Who:   Called by the frontend index, detail and create/edit form views.

Request Flow (POST /pokemon):
    1. FastAPI parses the JSON object body
    2. pokemon_params: translate_params → permit
    3. PokemonService.create_pokemon validates and persists
    4. 201 with PokemonDetail, or 422 {"errors": {field: [messages]}}
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pokedex_api.database import get_db_session
from pokedex_api.schemas.common import DeletedResponse, ErrorResponse
from pokedex_api.schemas.pokemon import PokemonDetail, PokemonSummary
from pokedex_api.services.pokemon_service import pokemon_service
from pokedex_api.translation import POKEMON_ATTRIBUTES, permit, translate_params

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pokemon"])


async def pokemon_params(
    payload: Dict[str, Any] = Body(
        ...,
        description="Pokemon attributes, flat or nested under 'pokemon', in camelCase or snake_case",
    ),
) -> Dict[str, Any]:
    """Strong parameters for Pokemon writes."""
    params = translate_params(payload, "pokemon", POKEMON_ATTRIBUTES)
    return permit(params, "pokemon", POKEMON_ATTRIBUTES)


@router.get(
    "/pokemon/types",
    response_model=List[str],
    summary="List valid Pokemon types",
)
async def list_types() -> List[str]:
    return pokemon_service.list_types()


@router.get(
    "/pokemon",
    response_model=List[PokemonSummary],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all Pokemon",
    description=(
        "Abbreviated Pokemon for the index view. `imageUrl` is a placeholder "
        "until the Pokemon is captured."
    ),
)
async def list_pokemon(
    db: AsyncSession = Depends(get_db_session),
) -> List[PokemonSummary]:
    return await pokemon_service.list_pokemon(db)


@router.get(
    "/pokemon/{pokemon_id}",
    response_model=PokemonDetail,
    responses={404: {"description": "Pokemon not found", "model": ErrorResponse}},
    summary="Get a single Pokemon with its moves and items",
)
async def get_pokemon(
    pokemon_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> PokemonDetail:
    return await pokemon_service.get_pokemon(db, pokemon_id)


@router.post(
    "/pokemon",
    status_code=201,
    response_model=PokemonDetail,
    responses={422: {"description": "Validation failed", "model": ErrorResponse}},
    summary="Create a Pokemon",
    description="Creates the Pokemon and assigns its moves; moves that do not exist yet are created.",
)
async def create_pokemon(
    attrs: Dict[str, Any] = Depends(pokemon_params),
    db: AsyncSession = Depends(get_db_session),
) -> PokemonDetail:
    logger.info("Create pokemon request: fields=%s", sorted(attrs))
    return await pokemon_service.create_pokemon(db, attrs)


@router.api_route(
    "/pokemon/{pokemon_id}",
    methods=["PATCH", "PUT"],
    response_model=PokemonDetail,
    responses={
        404: {"description": "Pokemon not found", "model": ErrorResponse},
        422: {"description": "Validation failed", "model": ErrorResponse},
    },
    summary="Update a Pokemon",
    description="Partial update. A `moves` list replaces the current move set.",
)
async def update_pokemon(
    pokemon_id: int,
    attrs: Dict[str, Any] = Depends(pokemon_params),
    db: AsyncSession = Depends(get_db_session),
) -> PokemonDetail:
    return await pokemon_service.update_pokemon(db, pokemon_id, attrs)


@router.delete(
    "/pokemon/{pokemon_id}",
    response_model=DeletedResponse,
    responses={404: {"description": "Pokemon not found", "model": ErrorResponse}},
    summary="Delete a Pokemon with its items and move links",
)
async def delete_pokemon(
    pokemon_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> DeletedResponse:
    return await pokemon_service.delete_pokemon(db, pokemon_id)
