"""
Cats API endpoints
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from cats_api.api.dependencies import PaginationParams, pagination_params
from cats_api.core.database import get_db
from cats_api.schemas.cat import CatResponse, IngestionResponse
from cats_api.services.cat_api import CatApiClient, get_cat_api_client
from cats_api.services.cat_query import get_cat, get_cat_image, list_cats
from cats_api.services.ingestion import run_ingestion

router = APIRouter(prefix="/cats", tags=["cats"])


@router.post("/fetch", response_model=IngestionResponse)
async def fetch_cats(
    db: AsyncSession = Depends(get_db),
    cat_api: CatApiClient = Depends(get_cat_api_client),
) -> IngestionResponse:
    """
    Fetch up to CAT_API_FETCH_LIMIT cats that have breeds from TheCatAPI and store them.

    Cats already in the store (same upstream id) are skipped, never updated.
    Each stored cat is tagged with the temperaments of its first breed.

    Responses:
    - 200: summary of inserted, skipped and failed items
    - 502: the upstream API failed, or an image download failed with IMAGE_FAILURE_POLICY=abort
    - 503: database error while saving
    """
    return await run_ingestion(db, cat_api)


@router.get("", response_model=list[CatResponse])
async def list_cats_endpoint(
    pagination: Annotated[PaginationParams, Depends(pagination_params)],
    tag: Annotated[str | None, Query(description="Only cats carrying this tag (case-insensitive)")] = None,
    db: AsyncSession = Depends(get_db),
) -> list[CatResponse]:
    """
    List cats ordered by id, one page at a time.

    An empty array is a valid answer when no cats match or the page is past the end.

    **Examples:**
    - First page: `/cats`
    - Second page of ten: `/cats?page=2&pageSize=10`
    - Playful cats: `/cats?tag=playful`
    """
    return await list_cats(db, page=pagination.page, page_size=pagination.page_size, tag=tag)


@router.get("/{cat_id}", response_model=CatResponse)
async def get_cat_endpoint(
    cat_id: Annotated[int, Path(description="Cat ID")],
    db: AsyncSession = Depends(get_db),
) -> CatResponse:
    """Get a single cat, with its tag names."""
    cat = await get_cat(db, cat_id)
    if cat is None:
        raise HTTPException(status_code=404, detail="Cat not found")
    return cat


@router.get("/{cat_id}/image", response_class=Response)
async def get_cat_image_endpoint(
    cat_id: Annotated[int, Path(description="Cat ID")],
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Serve the stored image bytes of a cat."""
    image = await get_cat_image(db, cat_id)
    if image is None:
        raise HTTPException(status_code=404, detail="Image not found")
    content, content_type = image
    return Response(content=content, media_type=content_type or "application/octet-stream")
