"""Wardrobe style profiling.

Builds frequency tables over a wardrobe snapshot and picks the dominant
style and color. Dominance uses a strict greater-than reduction over
insertion-ordered dicts, so ties go to the key seen first.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from closetai.core.exceptions import EmptyInputError
from closetai.models.domain.common import label

STYLE_NAMES = ("casual", "formal", "trendy", "classic", "bohemian", "minimalist")


@dataclass
class StyleAnalysis:
    style_profile: Dict[str, int]
    color_profile: Dict[str, int]
    category_profile: Dict[str, int]
    dominant_style: str
    dominant_color: Optional[str]

    def to_dict(self) -> dict:
        return {
            "style_profile": self.style_profile,
            "color_profile": self.color_profile,
            "category_profile": self.category_profile,
            "dominant_style": self.dominant_style,
            "dominant_color": self.dominant_color,
        }


def dominant(profile: Dict[str, int]) -> Optional[str]:
    best = None
    for key, count in profile.items():
        if best is None or count > profile[best]:
            best = key
    return best


def analyze(items: Sequence) -> StyleAnalysis:
    """Profile a non-empty sequence of wardrobe items.

    Raises:
        EmptyInputError: if ``items`` is empty.
    """
    if not items:
        raise EmptyInputError("Cannot analyze style of an empty wardrobe")

    style_profile = {name: 0 for name in STYLE_NAMES}
    color_profile: Dict[str, int] = {}
    category_profile: Dict[str, int] = {}

    for item in items:
        if item.category:
            category = label(item.category)
            category_profile[category] = category_profile.get(category, 0) + 1

        if item.color:
            color = label(item.color)
            color_profile[color] = color_profile.get(color, 0) + 1

        for tag in item.tags or []:
            normalized = tag.lower()
            if normalized in style_profile:
                style_profile[normalized] += 1

    return StyleAnalysis(
        style_profile=style_profile,
        color_profile=color_profile,
        category_profile=category_profile,
        dominant_style=dominant(style_profile),
        dominant_color=dominant(color_profile),
    )
