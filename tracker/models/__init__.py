"""
Pydantic models for the strain tracker.

All data shapes defined here. No imports from store, services, or routes.
"""

from tracker.models.catalog import CatalogResponse, LegalityResponse
from tracker.models.strain import (
    EFFECTS_TAGS,
    MAX_TERPENES,
    PRODUCT_TYPES,
    STRAIN_TYPES,
    TERPENES,
    CommunityStrainEntry,
    StrainEntry,
    StrainInput,
    StrainUpdate,
)
from tracker.models.view import DashboardView, DataScope, HistoryView, StrainFilters

__all__ = [
    # Catalog models
    "CatalogResponse",
    "LegalityResponse",
    # Vocabularies
    "PRODUCT_TYPES",
    "STRAIN_TYPES",
    "EFFECTS_TAGS",
    "TERPENES",
    "MAX_TERPENES",
    # Strain models
    "StrainInput",
    "StrainUpdate",
    "StrainEntry",
    "CommunityStrainEntry",
    # View models
    "DataScope",
    "StrainFilters",
    "HistoryView",
    "DashboardView",
]
