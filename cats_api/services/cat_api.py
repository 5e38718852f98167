"""
TheCatAPI integration: image listing and image byte downloads.
"""

from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from cats_api.config import settings
from cats_api.core.logging import get_logger
from cats_api.schemas.cat_api import CatApiImage, CatApiImageList
from cats_api.services.errors import ImageDownloadFailedError, UpstreamUnavailableError

logger = get_logger(__name__)

API_KEY_HEADER = "x-api-key"


@dataclass(frozen=True)
class DownloadedImage:
    content: bytes
    content_type: str | None


class CatApiClient:
    """
    Thin wrapper over an httpx.AsyncClient whose base_url is the provider's API root.

    The API key is only attached to the listing request; image URLs point at a
    CDN that does not need it.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        api_key: str | None = None,
        fetch_limit: int = 25,
    ) -> None:
        self.client = client
        self.api_key = api_key
        self.fetch_limit = fetch_limit

    async def fetch_images(self) -> list[CatApiImage]:
        """
        Fetch one batch of images that carry breed metadata.

        Raises:
            UpstreamUnavailableError: transport failure, non-2xx status,
                malformed payload or an empty batch
        """
        headers = {API_KEY_HEADER: self.api_key} if self.api_key else {}
        params = {"limit": self.fetch_limit, "has_breeds": 1}

        try:
            response = await self.client.get("images/search", params=params, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("cat_api_fetch_failed", error=str(e))
            raise UpstreamUnavailableError("Failed to fetch cats from API.") from e

        try:
            images = CatApiImageList.validate_json(response.content)
        except ValidationError as e:
            logger.error("cat_api_payload_invalid", error_count=e.error_count())
            raise UpstreamUnavailableError("Cat API returned a malformed payload.") from e

        if not images:
            logger.warning("cat_api_empty_batch")
            raise UpstreamUnavailableError("Cat API returned no cats.")

        return images

    async def download_image(self, url: str) -> DownloadedImage:
        """
        Download raw image bytes.

        Raises:
            ImageDownloadFailedError: malformed URL, transport failure or non-2xx status
        """
        try:
            response = await self.client.get(url, follow_redirects=True)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ImageDownloadFailedError(f"Failed to download image {url}: {e}", url=url) from e

        return DownloadedImage(
            content=response.content,
            content_type=response.headers.get("content-type"),
        )


@asynccontextmanager
async def open_cat_api_client() -> AsyncIterator[CatApiClient]:
    """Build a CatApiClient from settings, closing the connection pool on exit."""
    api_key = settings.CAT_API_KEY.get_secret_value() if settings.CAT_API_KEY else None
    async with httpx.AsyncClient(
        base_url=settings.CAT_API_BASE_URL,
        timeout=settings.CAT_API_TIMEOUT,
    ) as client:
        yield CatApiClient(client, api_key=api_key, fetch_limit=settings.CAT_API_FETCH_LIMIT)


async def get_cat_api_client() -> AsyncGenerator[CatApiClient, None]:
    """FastAPI dependency providing a CatApiClient for the duration of a request."""
    async with open_cat_api_client() as cat_api:
        yield cat_api
