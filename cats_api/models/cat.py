"""
SQLModel-based Cat models

CatBase (shared public fields)
    ├─> Cats (database table, adds key, image bytes and timestamp)
    └─> CatResponse (API schema, defined in cats_api/schemas)
"""

from datetime import UTC, datetime

from sqlalchemy import Column, LargeBinary, UniqueConstraint
from sqlmodel import Field, SQLModel


class CatBase(SQLModel):
    """
    Base model with shared public fields for Cats.

    These fields are safe to expose via the API and are shared between:
    - The database table (Cats)
    - API response schemas (CatResponse)
    """

    external_id: str = Field(max_length=100, description="Image identifier at the upstream provider")
    width: int = Field(gt=0)
    height: int = Field(gt=0)


class Cats(CatBase, table=True):
    """
    Database table for cats.

    Extends CatBase with:
    - Surrogate primary key
    - Raw image bytes (NULL when the download failed and the item was kept anyway)
    - Insert timestamp

    external_id carries a unique constraint so concurrent ingestion runs cannot
    both insert the same upstream image.
    """

    __tablename__ = "cats"
    __table_args__ = (UniqueConstraint("external_id", name="uq_cats_external_id"),)

    id: int | None = Field(default=None, primary_key=True)

    image: bytes | None = Field(default=None, sa_column=Column(LargeBinary, nullable=True))
    image_content_type: str | None = Field(default=None, max_length=100)

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
