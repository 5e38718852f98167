"""
SQLModel-based CatTags model

Junction table connecting cats to tags. The composite primary key
(cat_id, tag_id) guarantees a cat carries a given tag at most once.
"""

from sqlalchemy import Column, ForeignKey, Index, Integer
from sqlmodel import Field, SQLModel


class CatTags(SQLModel, table=True):
    """Database table for cat-tag links."""

    __tablename__ = "cat_tags"
    __table_args__ = (Index("ix_cat_tags_tag_id", "tag_id"),)

    cat_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("cats.id", ondelete="CASCADE", name="fk_cat_tags_cat_id"),
            primary_key=True,
        )
    )
    tag_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("tags.id", ondelete="CASCADE", name="fk_cat_tags_tag_id"),
            primary_key=True,
        )
    )

    # Note: Relationships are intentionally omitted.
    # Foreign keys are sufficient for queries and keep cat payloads from
    # being loaded or serialized by accident.
