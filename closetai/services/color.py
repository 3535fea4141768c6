"""Color compatibility scoring on a fixed seven-point hue wheel."""

import re
from dataclasses import dataclass
from typing import Iterable, List

from closetai.models.domain.common import label

HUE_WHEEL = {
    "red": 0,
    "orange": 30,
    "yellow": 60,
    "green": 120,
    "blue": 240,
    "purple": 300,
    "pink": 330,
}

NEUTRAL_COLORS = frozenset({"black", "white", "gray", "beige", "brown"})

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ColorCompatibility:
    label: str
    score: float


def normalize_color(color) -> str:
    return _WHITESPACE.sub("", label(color)).lower()


def hue(color) -> int:
    """Hue angle for a color name; names off the wheel sit at 0."""
    return HUE_WHEEL.get(normalize_color(color), 0)


def compatibility(color_a, color_b) -> ColorCompatibility:
    """Classify a pair of named colors.

    Rules are checked in order and the first match wins, so a neutral color
    that lands 150-210 degrees from its partner reports "complementary".
    """
    difference = abs(hue(color_a) - hue(color_b))
    difference = min(difference, 360 - difference)

    if 150 <= difference <= 210:
        return ColorCompatibility("complementary", 0.9)
    if difference <= 30:
        return ColorCompatibility("analogous", 0.8)
    if 100 <= difference <= 140:
        return ColorCompatibility("triadic", 0.7)
    if normalize_color(color_a) in NEUTRAL_COLORS or normalize_color(color_b) in NEUTRAL_COLORS:
        return ColorCompatibility("neutral", 0.8)
    return ColorCompatibility("unknown", 0.5)


def compatibility_table(colors: Iterable) -> List[dict]:
    """Pairwise compatibility for distinct colors, in first-seen order."""
    distinct = list(dict.fromkeys(label(color) for color in colors))
    table = []
    for i, first in enumerate(distinct):
        for second in distinct[i + 1:]:
            result = compatibility(first, second)
            table.append({
                "color1": first,
                "color2": second,
                "compatibility": result.label,
                "score": result.score,
            })
    return table
