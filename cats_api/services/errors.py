"""Error taxonomy for ingestion and queries.

Each error carries the HTTP status the API layer answers with. A missing cat
is not an error: lookups return None and the route answers 404.
"""

from fastapi import status


class CatalogError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UpstreamUnavailableError(CatalogError):
    """The image listing call failed or returned no usable data."""

    status_code = status.HTTP_502_BAD_GATEWAY


class ImageDownloadFailedError(CatalogError):
    """An item's image bytes could not be downloaded."""

    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, message: str, *, url: str) -> None:
        super().__init__(message)
        self.url = url


class StoreUnavailableError(CatalogError):
    """The database could not be reached or rejected a write unexpectedly."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
