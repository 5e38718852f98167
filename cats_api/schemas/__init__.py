"""
Pydantic schemas for API responses and upstream payloads
"""
from cats_api.models.cat import CatBase  # Re-export from models
from cats_api.models.tag import TagBase  # Re-export from models
from cats_api.schemas.cat import CatResponse, IngestionFailure, IngestionResponse
from cats_api.schemas.cat_api import CatApiBreed, CatApiImage, CatApiImageList

__all__ = [
    "CatBase",
    "TagBase",
    "CatResponse",
    "IngestionFailure",
    "IngestionResponse",
    "CatApiBreed",
    "CatApiImage",
    "CatApiImageList",
]
