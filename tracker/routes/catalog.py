"""Catalog and legality routes: read-only reference data."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from tracker.models.catalog import CatalogResponse, LegalityResponse
from tracker.models.strain import EFFECTS_TAGS, MAX_TERPENES, PRODUCT_TYPES, STRAIN_TYPES, TERPENES
from tracker.services.legality import STATE_LEGALITY, legality_status, list_states

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/catalog", status_code=200)
async def get_catalog() -> CatalogResponse:
    """Vocabularies for the strain log form and filter panel."""
    return CatalogResponse(
        product_types=PRODUCT_TYPES,
        strain_types=STRAIN_TYPES,
        effects=EFFECTS_TAGS,
        terpenes=TERPENES,
        max_terpenes=MAX_TERPENES,
    )


@router.get("/legality", status_code=200)
async def list_legality() -> list[LegalityResponse]:
    """Every known state with its status, sorted by state name."""
    return [LegalityResponse(state=s, status=legality_status(s)) for s in list_states()]


@router.get("/legality/{state}", status_code=200)
async def get_legality(state: str) -> LegalityResponse:
    """Legal status of a single state."""
    if state not in STATE_LEGALITY:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown state.")
    return LegalityResponse(state=state, status=legality_status(state))
