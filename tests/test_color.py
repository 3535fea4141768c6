"""Tests for color compatibility scoring."""

import pytest

from closetai.models.domain.common import ItemColor
from closetai.services.color import HUE_WHEEL, compatibility, compatibility_table, hue, normalize_color


def test_red_and_green_are_triadic() -> None:
    result = compatibility("red", "green")

    assert result.label == "triadic"
    assert result.score == 0.7


def test_blue_and_orange_are_complementary() -> None:
    # 240 vs 30 -> 210, normalized to 150
    result = compatibility("blue", "orange")

    assert result.label == "complementary"
    assert result.score == 0.9


def test_nearby_hues_are_analogous() -> None:
    assert compatibility("purple", "pink").label == "analogous"
    assert compatibility("red", "orange").score == 0.8


def test_difference_wraps_around_the_wheel() -> None:
    # 330 vs 0 is 30 degrees apart, not 330
    assert compatibility("pink", "red").label == "analogous"


def test_neutral_pairs_with_off_wheel_distance() -> None:
    # white sits at hue 0, 60 degrees from yellow: no hue rule applies
    result = compatibility("white", "yellow")

    assert result.label == "neutral"
    assert result.score == 0.8


def test_hue_rules_take_precedence_over_neutral() -> None:
    # black is treated as hue 0, so it lands 120 degrees from blue
    assert compatibility("black", "blue").label == "triadic"
    assert compatibility("black", "red").label == "analogous"


def test_unrelated_colors_are_unknown() -> None:
    result = compatibility("yellow", "green")

    assert result.label == "unknown"
    assert result.score == 0.5
    assert compatibility("orange", "green").label == "unknown"


@pytest.mark.parametrize("raw", ["Blue", " blue ", "BLUE", ItemColor.BLUE])
def test_color_names_are_normalized(raw) -> None:
    assert normalize_color(raw) == "blue"
    assert hue(raw) == 240


def test_unknown_colors_sit_at_zero() -> None:
    assert hue("chartreuse") == 0
    assert compatibility("chartreuse", "red").label == "analogous"


def test_compatibility_table_covers_each_distinct_pair_once() -> None:
    table = compatibility_table([ItemColor.RED, ItemColor.GREEN, ItemColor.RED, ItemColor.BLUE])

    pairs = [(row["color1"], row["color2"]) for row in table]
    assert pairs == [("Red", "Green"), ("Red", "Blue"), ("Green", "Blue")]
    assert table[0] == {"color1": "Red", "color2": "Green", "compatibility": "triadic", "score": 0.7}


def test_compatibility_table_for_single_color_is_empty() -> None:
    assert compatibility_table(["Black", "Black"]) == []


@pytest.mark.parametrize("first", sorted(HUE_WHEEL) + ["black", "navy"])
@pytest.mark.parametrize("second", sorted(HUE_WHEEL) + ["white", "beige"])
def test_compatibility_is_symmetric(first, second) -> None:
    assert compatibility(first, second) == compatibility(second, first)
