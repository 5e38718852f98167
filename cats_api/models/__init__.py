"""
SQLModel table models for the cats catalog.

Three tables make up the store:
- Cats: one row per upstream image, deduplicated by external_id
- Tags: temperament labels, deduplicated case-insensitively
- CatTags: junction table linking cats to tags

The store is insert-only; rows are never updated after creation.
"""

from cats_api.models.cat import Cats
from cats_api.models.cat_tag import CatTags
from cats_api.models.tag import Tags

__all__ = [
    "Cats",
    "Tags",
    "CatTags",
]
