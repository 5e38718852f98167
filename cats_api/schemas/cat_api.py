"""
Typed payload of the upstream image provider (TheCatAPI).

GET images/search returns a JSON array shaped like:

    [
        {
            "id": "0XYvRd7oD",
            "url": "https://cdn2.thecatapi.com/images/0XYvRd7oD.jpg",
            "width": 1204,
            "height": 1445,
            "breeds": [{"temperament": "Active, Energetic, Independent", ...}]
        }
    ]

Only the fields ingestion needs are declared; everything else is ignored.
"""

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class CatApiBreed(BaseModel):
    """Breed metadata attached to an upstream image"""

    model_config = ConfigDict(extra="ignore")

    temperament: str | None = None


class CatApiImage(BaseModel):
    """One item of the upstream image listing"""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    url: str = Field(min_length=1)
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    breeds: list[CatApiBreed] = Field(default_factory=list)

    @field_validator("breeds", mode="before")
    @classmethod
    def null_breeds_as_empty(cls, v: object) -> object:
        """The provider sends null instead of [] for images without breed data"""
        return [] if v is None else v

    def first_temperament(self) -> str | None:
        """Temperament of the first breed only; later breeds are ignored"""
        if not self.breeds:
            return None
        return self.breeds[0].temperament


CatApiImageList = TypeAdapter(list[CatApiImage])
