"""
Cat ingestion pipeline.

Pulls one batch from TheCatAPI and stores every image not seen before, along
with temperament tags derived from its first breed. Each item is committed on
its own, so a failure part-way through a run never leaves half of an item in
the store and never undoes items committed earlier in the run.
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cats_api.config import ImageFailurePolicy, settings
from cats_api.core.logging import bind_context, get_logger, unbind_context
from cats_api.models.cat import Cats
from cats_api.models.cat_tag import CatTags
from cats_api.models.tag import Tags, tag_key
from cats_api.schemas.cat import IngestionFailure, IngestionResponse
from cats_api.schemas.cat_api import CatApiImage
from cats_api.services.cat_api import CatApiClient, DownloadedImage
from cats_api.services.errors import ImageDownloadFailedError, StoreUnavailableError

logger = get_logger(__name__)


def parse_temperament(temperament: str | None) -> list[str]:
    """
    Split a breed temperament string into tag names.

    Pieces are comma separated and trimmed; empty pieces are dropped, and so
    are repeats that differ only by case (the first spelling wins).

    Example:
        >>> parse_temperament("Playful, Energetic, , playful")
        ['Playful', 'Energetic']
    """
    if not temperament:
        return []

    names: list[str] = []
    seen: set[str] = set()
    for piece in temperament.split(","):
        name = piece.strip()
        if not name or tag_key(name) in seen:
            continue
        seen.add(tag_key(name))
        names.append(name)
    return names


async def cat_exists(db: AsyncSession, external_id: str) -> bool:
    result = await db.execute(select(Cats.id).where(Cats.external_id == external_id))  # type: ignore[call-overload]
    return result.first() is not None


async def get_or_create_tag(db: AsyncSession, name: str) -> Tags:
    """Find a tag by case-insensitive name, inserting it (flushed, not committed) if absent."""
    result = await db.execute(
        select(Tags).where(Tags.name_key == tag_key(name))  # type: ignore[arg-type]
    )
    tag = result.scalar_one_or_none()
    if tag is not None:
        return tag

    tag = Tags.from_name(name)
    db.add(tag)
    await db.flush()
    return tag


async def _persist_item(
    db: AsyncSession, item: CatApiImage, image: DownloadedImage | None
) -> tuple[int, int]:
    """Stage the cat, its tags and links in the session. Returns (cat id, link count)."""
    cat = Cats(
        external_id=item.id,
        width=item.width,
        height=item.height,
        image=image.content if image else None,
        image_content_type=image.content_type if image else None,
    )
    db.add(cat)
    await db.flush()
    assert cat.id is not None  # assigned by the flush

    linked: set[int] = set()
    for name in parse_temperament(item.first_temperament()):
        tag = await get_or_create_tag(db, name)
        assert tag.id is not None  # loaded or flushed by get_or_create_tag
        if tag.id in linked:
            continue
        db.add(CatTags(cat_id=cat.id, tag_id=tag.id))
        linked.add(tag.id)

    await db.flush()
    return cat.id, len(linked)


async def _store_item(
    db: AsyncSession, item: CatApiImage, image: DownloadedImage | None
) -> tuple[int, int] | None:
    """
    Commit one item atomically.

    Returns (cat id, link count), or None when a concurrent run stored the
    same external_id first. A unique violation on a tag name means another run
    created that tag between our lookup and insert; the item is retried once
    so the lookup finds it.
    """
    for attempt in (1, 2):
        try:
            stored = await _persist_item(db, item, image)
            await db.commit()
            return stored
        except IntegrityError:
            await db.rollback()
            if await cat_exists(db, item.id):
                return None
            if attempt == 2:
                raise
            logger.info("cat_ingestion_item_retry", external_id=item.id)
    return None


async def run_ingestion(
    db: AsyncSession,
    cat_api: CatApiClient,
    *,
    image_failure_policy: str | None = None,
) -> IngestionResponse:
    """
    Run one ingestion pass.

    Args:
        db: Database session; committed once per stored item
        cat_api: Upstream client
        image_failure_policy: Overrides settings.IMAGE_FAILURE_POLICY

    Returns:
        Counts of inserted and skipped cats plus the items left out

    Raises:
        UpstreamUnavailableError: the listing call failed
        ImageDownloadFailedError: a download failed under the "abort" policy
        StoreUnavailableError: the database failed
    """
    policy = image_failure_policy or settings.IMAGE_FAILURE_POLICY
    bind_context(task="cat_ingestion")
    try:
        images = await cat_api.fetch_images()
        logger.info("cat_ingestion_started", batch_size=len(images), policy=policy)

        result = IngestionResponse()
        for item in images:
            if await cat_exists(db, item.id):
                result.skipped += 1
                logger.debug("cat_ingestion_item_skipped", external_id=item.id)
                continue

            image: DownloadedImage | None
            try:
                image = await cat_api.download_image(item.url)
            except ImageDownloadFailedError as e:
                logger.warning(
                    "cat_ingestion_image_failed",
                    external_id=item.id,
                    url=item.url,
                    policy=policy,
                )
                if policy == ImageFailurePolicy.ABORT:
                    raise
                if policy == ImageFailurePolicy.SKIP:
                    result.failed.append(IngestionFailure(external_id=item.id, reason=e.message))
                    continue
                image = None

            stored = await _store_item(db, item, image)
            if stored is None:
                result.skipped += 1
                logger.info("cat_ingestion_item_raced", external_id=item.id)
                continue

            cat_id, tag_count = stored
            result.inserted += 1
            logger.info(
                "cat_ingestion_item_inserted",
                external_id=item.id,
                cat_id=cat_id,
                tags=tag_count,
                has_image=image is not None,
            )
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("cat_ingestion_store_failed", error=str(e))
        raise StoreUnavailableError("Error while saving cats to the database.") from e
    finally:
        unbind_context("task")

    logger.info(
        "cat_ingestion_finished",
        inserted=result.inserted,
        skipped=result.skipped,
        failed=len(result.failed),
    )
    return result
