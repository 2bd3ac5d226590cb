"""
Pokedex API — Item Route Handlers
==================================

What:  Items nested under a Pokemon (list, create) and shallow item routes
       (update, delete).
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pokedex_api.database import get_db_session
from pokedex_api.schemas.common import DeletedResponse, ErrorResponse
from pokedex_api.schemas.item import ItemResponse
from pokedex_api.services.item_service import item_service
from pokedex_api.translation import ITEM_ATTRIBUTES, permit, translate_params

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Items"])


async def item_params(
    payload: Dict[str, Any] = Body(
        ...,
        description="Item attributes, flat or nested under 'item', in camelCase or snake_case",
    ),
) -> Dict[str, Any]:
    """Strong parameters for Item writes."""
    params = translate_params(payload, "item", ITEM_ATTRIBUTES)
    return permit(params, "item", ITEM_ATTRIBUTES)


@router.get(
    "/pokemon/{pokemon_id}/items",
    response_model=List[ItemResponse],
    responses={404: {"description": "Pokemon not found", "model": ErrorResponse}},
    summary="List the items of a Pokemon",
)
async def list_items(
    pokemon_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> List[ItemResponse]:
    return await item_service.list_items(db, pokemon_id)


@router.post(
    "/pokemon/{pokemon_id}/items",
    status_code=201,
    response_model=ItemResponse,
    responses={
        404: {"description": "Pokemon not found", "model": ErrorResponse},
        422: {"description": "Validation failed", "model": ErrorResponse},
    },
    summary="Create an item for a Pokemon",
    description="When `imageUrl` is omitted one of the default item sprites is assigned.",
)
async def create_item(
    pokemon_id: int,
    attrs: Dict[str, Any] = Depends(item_params),
    db: AsyncSession = Depends(get_db_session),
) -> ItemResponse:
    return await item_service.create_item(db, pokemon_id, attrs)


@router.api_route(
    "/items/{item_id}",
    methods=["PATCH", "PUT"],
    response_model=ItemResponse,
    responses={
        404: {"description": "Item not found", "model": ErrorResponse},
        422: {"description": "Validation failed", "model": ErrorResponse},
    },
    summary="Update an item",
)
async def update_item(
    item_id: int,
    attrs: Dict[str, Any] = Depends(item_params),
    db: AsyncSession = Depends(get_db_session),
) -> ItemResponse:
    return await item_service.update_item(db, item_id, attrs)


@router.delete(
    "/items/{item_id}",
    response_model=DeletedResponse,
    responses={404: {"description": "Item not found", "model": ErrorResponse}},
    summary="Delete an item",
)
async def delete_item(
    item_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> DeletedResponse:
    return await item_service.delete_item(db, item_id)
