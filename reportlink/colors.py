"""Class color table and row color policies for rendered reports."""
from __future__ import annotations

# Default raid class colors, keyed by the host's class tag.
CLASS_COLORS: dict[str, str] = {
    "DEATHKNIGHT": "#c41e3a",
    "DEMONHUNTER": "#a330c9",
    "DRUID": "#ff7c0a",
    "EVOKER": "#33937f",
    "HUNTER": "#aad372",
    "MAGE": "#3fc7eb",
    "MONK": "#00ff98",
    "PALADIN": "#f48cba",
    "PRIEST": "#ffffff",
    "ROGUE": "#fff468",
    "SHAMAN": "#0070dd",
    "WARLOCK": "#8788ee",
    "WARRIOR": "#c69b6d",
}

HEADLINE_COLOR = "#ffffff"

# (even, odd) shades for rows without a class color
FALLBACK_SHADES = ("#999999", "#cccccc")

POLICY_CLASS = "class"
POLICY_ALTERNATE = "alternate"
COLOR_POLICIES = (POLICY_CLASS, POLICY_ALTERNATE)


def class_color(category: str | None) -> str | None:
    if not category:
        return None
    return CLASS_COLORS.get(category.upper().replace(" ", ""))


def fallback_color(index: int) -> str:
    """Alternating gray by 1-based row index."""
    even, odd = FALLBACK_SHADES
    return even if index % 2 == 0 else odd
