"""
Pydantic schemas for Cat endpoints
"""

from pydantic import BaseModel, computed_field

from cats_api.config import settings
from cats_api.models.cat import CatBase, Cats
from cats_api.schemas.base import UTCDatetime


class CatResponse(CatBase):
    """
    Schema for cat response - what API returns.

    Image bytes are not inlined; image_url points at the endpoint serving them.
    """

    id: int
    created_at: UTCDatetime
    tags: list[str] = []
    has_image: bool = False

    @computed_field  # type: ignore[prop-decorator]
    @property
    def image_url(self) -> str | None:
        """URL of the stored image bytes, when the download succeeded"""
        if self.has_image:
            return f"{settings.API_PREFIX}/cats/{self.id}/image"
        return None

    @classmethod
    def from_cat(cls, cat: Cats, tags: list[str], *, has_image: bool) -> "CatResponse":
        assert cat.id is not None  # persisted rows always have a key
        return cls(
            id=cat.id,
            external_id=cat.external_id,
            width=cat.width,
            height=cat.height,
            created_at=cat.created_at,
            tags=tags,
            has_image=has_image,
        )


class IngestionFailure(BaseModel):
    """An upstream item that was left out of the store"""

    external_id: str
    reason: str


class IngestionResponse(BaseModel):
    """Summary of one ingestion run"""

    inserted: int = 0
    skipped: int = 0
    failed: list[IngestionFailure] = []
