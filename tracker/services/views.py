"""
View derivation: pure functions over already-fetched strain lists.

Nothing here touches the store; every function can be re-run on each render.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import TypeVar

from tracker.models.strain import MAX_TERPENES, CommunityStrainEntry, StrainEntry
from tracker.models.view import DashboardView, DataScope, HistoryView, StrainFilters

logger = logging.getLogger(__name__)

EntryT = TypeVar("EntryT", bound=StrainEntry)

MY_PICKS_LIMIT = 3
COMMUNITY_POPULAR_LIMIT = 4


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


def average_rating(strains: Sequence[StrainEntry]) -> float:
    """Mean rating rounded half-up to one decimal; 0 for an empty list."""
    if not strains:
        return 0.0
    total = sum(s.rating for s in strains)
    mean = Decimal(total) / Decimal(len(strains))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


# ---------------------------------------------------------------------------
# Filtering and sorting
# ---------------------------------------------------------------------------


def matches_search(strain: StrainEntry, search: str) -> bool:
    """Case-insensitive substring match on the strain name."""
    return not search or search.lower() in strain.strain_name.lower()


def matches_filters(strain: StrainEntry, filters: StrainFilters, search: str = "") -> bool:
    """True iff the strain passes every active filter."""
    return (
        (filters.rating == 0 or strain.rating >= filters.rating)
        and (not filters.effects or filters.effects in strain.effects)
        and (not filters.brand or filters.brand.lower() in (strain.brand or "").lower())
        and (not filters.type or strain.type == filters.type)
        and (not filters.terpene or filters.terpene in strain.terpenes)
        and (not filters.product_type or strain.product_type == filters.product_type)
        and matches_search(strain, search)
    )


def filter_strains(strains: Sequence[EntryT], filters: StrainFilters, search: str = "") -> list[EntryT]:
    return [s for s in strains if matches_filters(s, filters, search)]


def sort_by_rating(strains: Sequence[EntryT]) -> list[EntryT]:
    """
    Order by rating, highest first.

    There is no tie-break key. Equal ratings keep their input order, and
    snapshot order itself is unspecified, so callers must not rely on it.
    """
    return sorted(strains, key=lambda s: s.rating, reverse=True)


# ---------------------------------------------------------------------------
# Screens
# ---------------------------------------------------------------------------


def history_view(
    user_strains: Sequence[StrainEntry],
    community_strains: Sequence[CommunityStrainEntry],
    scope: DataScope = "mine",
    filters: StrainFilters | None = None,
    search: str = "",
) -> HistoryView:
    """Filtered, rating-sorted list for one scope. Scopes are never merged."""
    filters = filters or StrainFilters()
    source: Sequence[StrainEntry] = user_strains if scope == "mine" else community_strains
    return HistoryView(
        scope=scope,
        mine_count=len(user_strains),
        community_count=len(community_strains),
        results=sort_by_rating(filter_strains(source, filters, search)),
    )


def dashboard_view(
    user_strains: Sequence[StrainEntry],
    community_strains: Sequence[CommunityStrainEntry],
    search: str = "",
) -> DashboardView:
    return DashboardView(
        my_average_rating=average_rating(user_strains),
        community_average_rating=average_rating(community_strains),
        my_picks=list(user_strains[:MY_PICKS_LIMIT]),
        community_popular=[s for s in community_strains if matches_search(s, search)][:COMMUNITY_POPULAR_LIMIT],
    )


# ---------------------------------------------------------------------------
# Form helpers
# ---------------------------------------------------------------------------


def toggle_effect(effects: Sequence[str], effect: str) -> list[str]:
    """Add the effect if absent, remove it if present. Order is kept."""
    if effect in effects:
        return [e for e in effects if e != effect]
    return [*effects, effect]


def select_terpenes(current: Sequence[str], selected: Sequence[str]) -> list[str]:
    """Accept a terpene selection of at most 3; otherwise keep ``current``."""
    if len(selected) > MAX_TERPENES:
        logger.warning("views: rejected selection of %d terpenes (max %d)", len(selected), MAX_TERPENES)
        return list(current)
    return list(selected)


def format_strain_details(strain: StrainEntry) -> str:
    """Plain-text summary for sharing a strain."""
    return (
        f"Strain: {strain.strain_name} ({strain.product_type})\n"
        f"Brand: {strain.brand or 'N/A'}\n"
        f"Location: {strain.purchased_location or 'N/A'}\n"
        f"Rating: {strain.rating}/5\n"
        f"Effects: {', '.join(strain.effects)}\n"
        f"Top Terpenes: {', '.join(strain.terpenes)}\n"
    )
