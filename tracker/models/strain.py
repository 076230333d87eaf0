"""Strain models for private log entries and community mirrors."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

ProductType = Literal["Flower", "Edible", "Concentrate", "Vape", "Tincture", "Topical"]
StrainType = Literal["Hybrid", "Indica", "Sativa"]
Effect = Literal[
    "Relaxing",
    "Creative",
    "Energizing",
    "Sleepy",
    "Euphoric",
    "Focus",
    "Pain Relief",
    "Uplifting",
]
Terpene = Literal[
    "Caryophyllene",
    "Humulene",
    "Limonene",
    "Linalool",
    "Myrcene",
    "Ocimene",
    "Pinene",
    "Terpinolene",
]

PRODUCT_TYPES: list[str] = ["Flower", "Edible", "Concentrate", "Vape", "Tincture", "Topical"]
STRAIN_TYPES: list[str] = ["Hybrid", "Indica", "Sativa"]
EFFECTS_TAGS: list[str] = [
    "Relaxing",
    "Creative",
    "Energizing",
    "Sleepy",
    "Euphoric",
    "Focus",
    "Pain Relief",
    "Uplifting",
]
TERPENES: list[str] = [
    "Caryophyllene",
    "Humulene",
    "Limonene",
    "Linalool",
    "Myrcene",
    "Ocimene",
    "Pinene",
    "Terpinolene",
]
MAX_TERPENES = 3

# Documents are stored with camelCase keys (strainName, productType, ...).
_DOCUMENT_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StrainInput(BaseModel):
    """What the client sends to log a new strain."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    strain_name: str = Field(min_length=1, max_length=200)
    product_type: ProductType = "Flower"
    type: StrainType = "Hybrid"
    brand: str = ""
    purchased_location: str = ""
    cost: float | None = Field(default=None, ge=0)
    rating: int = Field(default=0, ge=0, le=5)
    effects: list[Effect] = Field(default_factory=list)
    terpenes: list[Terpene] = Field(default_factory=list, max_length=MAX_TERPENES)


class StrainUpdate(BaseModel):
    """What the client sends to edit a strain. All fields optional."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    strain_name: str | None = Field(default=None, min_length=1, max_length=200)
    product_type: ProductType | None = None
    type: StrainType | None = None
    brand: str | None = None
    purchased_location: str | None = None
    cost: float | None = Field(default=None, ge=0)
    rating: int | None = Field(default=None, ge=0, le=5)
    effects: list[Effect] | None = None
    terpenes: list[Terpene] | None = Field(default=None, max_length=MAX_TERPENES)


class StrainEntry(BaseModel):
    """
    A private log entry as read back from the store.

    Storage accepts whatever was written, so vocabularies and the terpene
    limit are not re-checked here.
    """

    model_config = _DOCUMENT_CONFIG

    id: str
    strain_name: str
    product_type: str = "Flower"
    type: str = "Hybrid"
    brand: str | None = None
    purchased_location: str | None = None
    cost: float | None = None
    rating: int = 0
    effects: list[str] = Field(default_factory=list)
    terpenes: list[str] = Field(default_factory=list)
    user_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @field_validator("rating", mode="before")
    @classmethod
    def _null_rating(cls, v):
        # Unrated entries count as 0
        return 0 if v is None else v

    @field_validator("effects", "terpenes", mode="before")
    @classmethod
    def _null_list(cls, v):
        return [] if v is None else v


class CommunityStrainEntry(StrainEntry):
    """Point-in-time mirror of a private entry in the shared collection."""

    original_doc_id: str | None = None
    contributed_at: str | None = None
