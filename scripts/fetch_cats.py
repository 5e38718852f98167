#!/usr/bin/env python3
"""
Run one cat ingestion pass outside the API server.

Meant to be triggered by cron or any other scheduler; retrying a failed run
is the scheduler's job. Exits non-zero when the run fails.

Usage:
    # Fetch one batch with the configured failure policy
    python scripts/fetch_cats.py

    # Keep cats whose image download failed, without image bytes
    python scripts/fetch_cats.py --image-failure-policy store_without_image
"""

import argparse
import asyncio
import sys

from cats_api.config import ImageFailurePolicy, settings
from cats_api.core.database import engine, get_async_session, init_db
from cats_api.core.logging import configure_logging
from cats_api.services.cat_api import open_cat_api_client
from cats_api.services.errors import CatalogError
from cats_api.services.ingestion import run_ingestion


async def main() -> int:
    parser = argparse.ArgumentParser(description="Fetch one batch of cats from TheCatAPI")
    parser.add_argument(
        "--image-failure-policy",
        choices=[
            ImageFailurePolicy.SKIP,
            ImageFailurePolicy.STORE_WITHOUT_IMAGE,
            ImageFailurePolicy.ABORT,
        ],
        default=settings.IMAGE_FAILURE_POLICY,
        help="What to do when an image download fails (default: %(default)s)",
    )
    args = parser.parse_args()

    configure_logging()
    await init_db()

    try:
        async with get_async_session() as db, open_cat_api_client() as cat_api:
            result = await run_ingestion(db, cat_api, image_failure_policy=args.image_failure_policy)
    except CatalogError as e:
        print(f"\nERROR: {e.message}", file=sys.stderr)
        return 1
    finally:
        await engine.dispose()

    print(f"\nInserted: {result.inserted}")
    print(f"Skipped:  {result.skipped}")
    if result.failed:
        print(f"Failed:   {len(result.failed)}")
        for failure in result.failed:
            print(f"  {failure.external_id}: {failure.reason}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
