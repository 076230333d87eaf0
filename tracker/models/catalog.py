"""Catalog and legality response models."""

from __future__ import annotations

from pydantic import BaseModel


class CatalogResponse(BaseModel):
    """Fixed vocabularies the log form offers."""

    product_types: list[str]
    strain_types: list[str]
    effects: list[str]
    terpenes: list[str]
    max_terpenes: int


class LegalityResponse(BaseModel):
    """Legal status of one state."""

    state: str
    status: str
