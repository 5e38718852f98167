"""
Read access over the cat store: single lookup, paginated listing, image bytes.

Absence is never an error here. A missing cat is None and an empty page is [].
Database failures are re-raised as StoreUnavailableError.
"""

from collections import defaultdict

from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import defer

from cats_api.core.logging import get_logger
from cats_api.models.cat import Cats
from cats_api.models.cat_tag import CatTags
from cats_api.models.tag import Tags, tag_key
from cats_api.schemas.cat import CatResponse
from cats_api.services.errors import StoreUnavailableError

logger = get_logger(__name__)

# Largest OFFSET a 64-bit SQL INTEGER can bind
MAX_SQL_OFFSET = 2**63 - 1


def _cats_query() -> Select:
    """Cats without their image bytes, plus whether bytes are stored."""
    return select(Cats, Cats.image.is_not(None).label("has_image")).options(  # type: ignore[union-attr]
        defer(Cats.image)  # type: ignore[arg-type]
    )


async def _tag_names_by_cat(db: AsyncSession, cat_ids: list[int]) -> dict[int, list[str]]:
    """Load tag names for a set of cats in one query, sorted by name."""
    if not cat_ids:
        return {}

    result = await db.execute(
        select(CatTags.cat_id, Tags.name)  # type: ignore[call-overload]
        .join(Tags, Tags.id == CatTags.tag_id)
        .where(CatTags.cat_id.in_(cat_ids))  # type: ignore[attr-defined]
        .order_by(CatTags.cat_id, Tags.name)
    )
    names: dict[int, list[str]] = defaultdict(list)
    for cat_id, name in result.all():
        names[cat_id].append(name)
    return names


async def get_cat(db: AsyncSession, cat_id: int) -> CatResponse | None:
    """Look up one cat by surrogate id. Returns None when it does not exist."""
    try:
        result = await db.execute(_cats_query().where(Cats.id == cat_id))  # type: ignore[arg-type]
        row = result.first()
        if row is None:
            return None

        cat, has_image = row
        tags = await _tag_names_by_cat(db, [cat_id])
    except SQLAlchemyError as e:
        logger.error("cat_lookup_failed", cat_id=cat_id, error=str(e))
        raise StoreUnavailableError("A database error occurred while loading the cat.") from e

    return CatResponse.from_cat(cat, tags.get(cat_id, []), has_image=bool(has_image))


async def list_cats(
    db: AsyncSession,
    *,
    page: int = 1,
    page_size: int = 10,
    tag: str | None = None,
) -> list[CatResponse]:
    """
    List cats ordered by id, optionally restricted to those carrying a tag.

    The tag filter matches names case-insensitively. Pages past the end and
    filters matching nothing both yield an empty list.

    Args:
        db: Database session
        page: 1-based page number
        page_size: Cats per page
        tag: Tag name filter; blank means no filter
    """
    if page < 1 or page_size < 1:
        raise ValueError("page and page_size must be >= 1")

    offset = (page - 1) * page_size
    if offset > MAX_SQL_OFFSET:
        return []

    query = _cats_query()

    tag = tag.strip() if tag else None
    if tag:
        tagged = (
            select(CatTags.cat_id)  # type: ignore[call-overload]
            .join(Tags, Tags.id == CatTags.tag_id)
            .where(Tags.name_key == tag_key(tag))  # type: ignore[arg-type]
        )
        query = query.where(Cats.id.in_(tagged))  # type: ignore[union-attr]

    query = query.order_by(Cats.id).offset(offset).limit(page_size)  # type: ignore[arg-type]

    try:
        result = await db.execute(query)
        rows = result.all()
        tags = await _tag_names_by_cat(db, [cat.id for cat, _ in rows])
    except SQLAlchemyError as e:
        logger.error("cat_list_failed", page=page, page_size=page_size, tag=tag, error=str(e))
        raise StoreUnavailableError("A database error occurred during cat search.") from e

    return [
        CatResponse.from_cat(cat, tags.get(cat.id, []), has_image=bool(has_image))
        for cat, has_image in rows
    ]


async def get_cat_image(db: AsyncSession, cat_id: int) -> tuple[bytes, str | None] | None:
    """Return (bytes, content type) for a cat's stored image, or None."""
    try:
        result = await db.execute(
            select(Cats.image, Cats.image_content_type).where(Cats.id == cat_id)  # type: ignore[call-overload]
        )
        row = result.first()
    except SQLAlchemyError as e:
        logger.error("cat_image_lookup_failed", cat_id=cat_id, error=str(e))
        raise StoreUnavailableError("A database error occurred while loading the image.") from e

    if row is None or row[0] is None:
        return None
    return row[0], row[1]
