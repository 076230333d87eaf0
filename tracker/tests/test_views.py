"""
Tests for view derivation: aggregates, filters, sorting, screens, form helpers.
"""

from __future__ import annotations

from conftest import strain_fields

from tracker.models.strain import CommunityStrainEntry, StrainEntry
from tracker.models.view import StrainFilters
from tracker.services.legality import legality_status, list_states
from tracker.services.views import (
    average_rating,
    dashboard_view,
    filter_strains,
    format_strain_details,
    history_view,
    select_terpenes,
    sort_by_rating,
    toggle_effect,
)


def entry(doc_id: str, **overrides) -> StrainEntry:
    return StrainEntry.model_validate({**strain_fields(**overrides), "id": doc_id})


def mirror(doc_id: str, **overrides) -> CommunityStrainEntry:
    return CommunityStrainEntry.model_validate({**strain_fields(**overrides), "id": doc_id, "originalDocId": "p"})


# ===========================================================================
# Average rating
# ===========================================================================


class TestAverageRating:
    def test_empty_list_is_zero(self):
        assert average_rating([]) == 0

    def test_blue_dream_og_kush_example(self):
        strains = [entry("1", strainName="Blue Dream", rating=4), entry("2", strainName="OG Kush", rating=2)]
        assert average_rating(strains) == 3.0

    def test_rounds_to_one_decimal(self):
        strains = [entry("1", rating=5), entry("2", rating=4), entry("3", rating=4)]
        assert average_rating(strains) == 4.3

    def test_rounds_half_up(self):
        strains = [entry(str(i), rating=r) for i, r in enumerate([2, 3, 3, 3])]
        assert average_rating(strains) == 2.8

    def test_unrated_entries_count_as_zero(self):
        strains = [entry("1", rating=0), entry("2", rating=3)]
        assert average_rating(strains) == 1.5


# ===========================================================================
# Filtering
# ===========================================================================


class TestFilterStrains:
    def test_blue_dream_rating_filter_example(self):
        strains = [entry("1", strainName="Blue Dream", rating=4), entry("2", strainName="OG Kush", rating=2)]
        result = filter_strains(strains, StrainFilters(rating=3))
        assert [s.strain_name for s in result] == ["Blue Dream"]

    def test_no_filters_returns_everything(self):
        strains = [entry("1"), entry("2", rating=0)]
        assert filter_strains(strains, StrainFilters()) == strains

    def test_filters_are_a_conjunction(self):
        strains = [
            entry("1", rating=4, type="Indica"),
            entry("2", rating=2, type="Indica"),
            entry("3", rating=5, type="Sativa"),
            entry("4", rating=3, type="Indica"),
        ]
        result = filter_strains(strains, StrainFilters(rating=3, type="Indica"))
        assert {s.id for s in result} == {"1", "4"}
        assert all(s.rating >= 3 and s.type == "Indica" for s in result)

    def test_brand_is_case_insensitive_substring(self):
        strains = [entry("1", brand="Jungle Boys"), entry("2", brand="Cookies")]
        result = filter_strains(strains, StrainFilters(brand="jungle"))
        assert [s.id for s in result] == ["1"]

    def test_brand_filter_skips_entries_without_brand(self):
        strains = [entry("1", brand=None), entry("2", brand="Cookies")]
        result = filter_strains(strains, StrainFilters(brand="cook"))
        assert [s.id for s in result] == ["2"]

    def test_effect_filter_requires_membership(self):
        strains = [entry("1", effects=["Sleepy"]), entry("2", effects=["Relaxing", "Focus"])]
        result = filter_strains(strains, StrainFilters(effects="Focus"))
        assert [s.id for s in result] == ["2"]

    def test_terpene_filter_requires_membership(self):
        strains = [entry("1", terpenes=["Limonene"]), entry("2", terpenes=["Myrcene"])]
        result = filter_strains(strains, StrainFilters(terpene="Limonene"))
        assert [s.id for s in result] == ["1"]

    def test_product_type_filter_is_exact(self):
        strains = [entry("1", productType="Vape"), entry("2", productType="Flower")]
        result = filter_strains(strains, StrainFilters(product_type="Vape"))
        assert [s.id for s in result] == ["1"]

    def test_search_matches_strain_name_case_insensitively(self):
        strains = [entry("1", strainName="Sour Diesel"), entry("2", strainName="OG Kush")]
        result = filter_strains(strains, StrainFilters(), search="DIESEL")
        assert [s.id for s in result] == ["1"]

    def test_search_does_not_match_brand(self):
        strains = [entry("1", strainName="OG Kush", brand="Diesel Co")]
        assert filter_strains(strains, StrainFilters(), search="diesel") == []

    def test_filters_accept_camel_case_keys(self):
        filters = StrainFilters.model_validate({"rating": 2, "productType": "Edible"})
        assert filters.product_type == "Edible"


# ===========================================================================
# Sorting
# ===========================================================================


class TestSortByRating:
    def test_descending(self):
        strains = [entry("1", rating=2), entry("2", rating=5), entry("3", rating=0), entry("4", rating=4)]
        result = sort_by_rating(strains)
        assert all(a.rating >= b.rating for a, b in zip(result, result[1:]))
        assert [s.id for s in result] == ["2", "4", "1", "3"]

    def test_does_not_mutate_input(self):
        strains = [entry("1", rating=1), entry("2", rating=5)]
        sort_by_rating(strains)
        assert [s.id for s in strains] == ["1", "2"]


# ===========================================================================
# Screens
# ===========================================================================


class TestHistoryView:
    def test_mine_scope_uses_private_list_only(self):
        mine = [entry("m1", rating=2), entry("m2", rating=5)]
        community = [mirror("c1", rating=4)]
        view = history_view(mine, community, scope="mine")
        assert [s.id for s in view.results] == ["m2", "m1"]
        assert view.mine_count == 2
        assert view.community_count == 1

    def test_community_scope_uses_public_list_only(self):
        mine = [entry("m1")]
        community = [mirror("c1", rating=1), mirror("c2", rating=3)]
        view = history_view(mine, community, scope="community")
        assert [s.id for s in view.results] == ["c2", "c1"]

    def test_filters_and_search_apply(self):
        mine = [
            entry("1", strainName="Blue Dream", rating=4),
            entry("2", strainName="Blueberry", rating=1),
            entry("3", strainName="OG Kush", rating=5),
        ]
        view = history_view(mine, [], filters=StrainFilters(rating=2), search="blue")
        assert [s.id for s in view.results] == ["1"]

    def test_serializes_mirror_fields(self):
        view = history_view([], [mirror("c1")], scope="community")
        dumped = view.model_dump(mode="json", by_alias=True)
        assert dumped["results"][0]["originalDocId"] == "p"
        assert dumped["communityCount"] == 1


class TestDashboardView:
    def test_averages_and_limits(self):
        mine = [entry(str(i), rating=4) for i in range(5)]
        community = [mirror(f"c{i}", rating=2) for i in range(6)]
        view = dashboard_view(mine, community)
        assert view.my_average_rating == 4.0
        assert view.community_average_rating == 2.0
        assert len(view.my_picks) == 3
        assert len(view.community_popular) == 4

    def test_empty_lists(self):
        view = dashboard_view([], [])
        assert view.my_average_rating == 0
        assert view.community_average_rating == 0
        assert view.my_picks == []
        assert view.community_popular == []

    def test_search_narrows_community_popular(self):
        community = [mirror("c1", strainName="Gelato"), mirror("c2", strainName="Zkittlez")]
        view = dashboard_view([], community, search="gel")
        assert [s.id for s in view.community_popular] == ["c1"]


# ===========================================================================
# Form helpers
# ===========================================================================


class TestFormHelpers:
    def test_toggle_effect_adds_in_order(self):
        assert toggle_effect(["Relaxing"], "Focus") == ["Relaxing", "Focus"]

    def test_toggle_effect_removes(self):
        assert toggle_effect(["Relaxing", "Focus"], "Relaxing") == ["Focus"]

    def test_select_terpenes_accepts_three(self):
        selected = ["Myrcene", "Pinene", "Limonene"]
        assert select_terpenes([], selected) == selected

    def test_select_terpenes_rejects_more_than_three(self):
        current = ["Myrcene"]
        result = select_terpenes(current, ["Myrcene", "Pinene", "Limonene", "Linalool"])
        assert result == ["Myrcene"]

    def test_format_strain_details(self):
        text = format_strain_details(entry("1", brand="", purchasedLocation=None, rating=4))
        assert text == (
            "Strain: Blue Dream (Flower)\n"
            "Brand: N/A\n"
            "Location: N/A\n"
            "Rating: 4/5\n"
            "Effects: Relaxing, Creative\n"
            "Top Terpenes: Myrcene, Pinene\n"
        )


class TestLegality:
    def test_known_state(self):
        assert legality_status("California") == "Recreational"
        assert legality_status("Florida") == "Medicinal"
        assert legality_status("Texas") == "Not Legal"

    def test_unknown_or_empty_state(self):
        assert legality_status("Oregon") == "Select a State"
        assert legality_status("") == "Select a State"
        assert legality_status(None) == "Select a State"

    def test_states_are_sorted(self):
        states = list_states()
        assert states == sorted(states)
        assert len(states) == 9
