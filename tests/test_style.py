"""Tests for wardrobe style profiling."""

import pytest

from closetai.core.exceptions import EmptyInputError
from closetai.models.domain.common import ItemCategory, ItemColor
from closetai.services.style import STYLE_NAMES, analyze, dominant

from tests.factories import snapshot


def test_profiles_count_categories_colors_and_known_tags() -> None:
    items = [
        snapshot(1, ItemCategory.TOP, ItemColor.WHITE, tags=["Classic", "office"]),
        snapshot(2, ItemCategory.BOTTOM, ItemColor.NAVY, tags=["classic"]),
        snapshot(3, ItemCategory.TOP, ItemColor.WHITE, tags=["trendy"]),
    ]

    analysis = analyze(items)

    assert analysis.category_profile == {"top": 2, "bottom": 1}
    assert analysis.color_profile == {"White": 2, "Navy": 1}
    assert analysis.style_profile["classic"] == 2
    assert analysis.style_profile["trendy"] == 1
    assert "office" not in analysis.style_profile
    assert analysis.dominant_style == "classic"
    assert analysis.dominant_color == "White"


def test_style_profile_always_lists_every_style() -> None:
    analysis = analyze([snapshot(1, ItemCategory.SHOES, ItemColor.BLACK)])

    assert tuple(analysis.style_profile) == STYLE_NAMES
    assert set(analysis.style_profile.values()) == {0}


def test_untagged_wardrobe_defaults_to_first_style() -> None:
    analysis = analyze([snapshot(1, ItemCategory.SHOES, ItemColor.BLACK)])

    assert analysis.dominant_style == "casual"


def test_ties_go_to_first_seen_key() -> None:
    assert dominant({"formal": 2, "trendy": 2, "casual": 1}) == "formal"
    assert dominant({"Blue": 1, "Red": 1}) == "Blue"


def test_dominant_of_empty_profile_is_none() -> None:
    assert dominant({}) is None


def test_empty_wardrobe_raises() -> None:
    with pytest.raises(EmptyInputError):
        analyze([])


def test_to_dict_exposes_report_fields() -> None:
    report = analyze([snapshot(1, ItemCategory.TOP, ItemColor.RED, tags=["bohemian"])]).to_dict()

    assert report["dominant_style"] == "bohemian"
    assert report["dominant_color"] == "Red"
    assert set(report) == {
        "style_profile", "color_profile", "category_profile", "dominant_style", "dominant_color"
    }


def test_matching_casual_blue_tops() -> None:
    items = [
        snapshot(1, ItemCategory.TOP, ItemColor.BLUE, tags=["casual"]),
        snapshot(2, ItemCategory.TOP, ItemColor.BLUE, tags=["casual"]),
    ]

    analysis = analyze(items)

    assert analysis.dominant_style == "casual"
    assert analysis.dominant_color == "Blue"
    assert analysis.category_profile == {"top": 2}
