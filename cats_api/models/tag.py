"""
SQLModel-based Tag models

Tag names keep the casing they were first received with. Uniqueness is
case-insensitive: name_key holds the lowercased name and carries the unique
constraint. Lowercasing happens in Python so non-ASCII names fold the same
way on every backend (SQLite's lower() only folds ASCII).
"""

from datetime import UTC, datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


def tag_key(name: str) -> str:
    """Case-insensitive lookup key for a tag name."""
    return name.strip().lower()


class TagBase(SQLModel):
    """Base model with shared public fields for Tags."""

    name: str = Field(min_length=1, max_length=100)


class Tags(TagBase, table=True):
    """Database table for temperament tags."""

    __tablename__ = "tags"
    __table_args__ = (UniqueConstraint("name_key", name="uq_tags_name_key"),)

    id: int | None = Field(default=None, primary_key=True)
    name_key: str = Field(max_length=100)

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_name(cls, name: str) -> "Tags":
        return cls(name=name, name_key=tag_key(name))
