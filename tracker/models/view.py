"""View state and derived view models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tracker.models.strain import CommunityStrainEntry, StrainEntry

DataScope = Literal["mine", "community"]


class StrainFilters(BaseModel):
    """Active filter panel values. Empty string / 0 means "no filter"."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    rating: int = Field(default=0, ge=0, le=5)
    effects: str = ""
    brand: str = ""
    type: str = ""
    terpene: str = ""
    product_type: str = ""


class HistoryView(BaseModel):
    """Filtered, sorted list for one scope plus the size of both scopes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    scope: DataScope
    mine_count: int
    community_count: int
    results: list[CommunityStrainEntry | StrainEntry]


class DashboardView(BaseModel):
    """Aggregates shown on the landing screen."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    my_average_rating: float
    community_average_rating: float
    my_picks: list[StrainEntry]
    community_popular: list[CommunityStrainEntry]
