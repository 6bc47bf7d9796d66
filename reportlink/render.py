"""Reconstruct a captured report into popup rows."""
from __future__ import annotations

import logging
from typing import Callable

from reportlink.colors import (
    COLOR_POLICIES, HEADLINE_COLOR, POLICY_CLASS,
    class_color, fallback_color,
)
from reportlink.report import Tracker, split_data_line

logger = logging.getLogger(__name__)

HEADLINE = "headline"
SPACER = "spacer"
PAIR = "pair"


class PopupRow:
    """One popup row: a full-width line, a spacer, or a colored pair."""

    __slots__ = ("kind", "left", "right", "color")

    def __init__(self, kind: str, left: str, right: str = "", color: str | None = None):
        self.kind = kind
        self.left = left
        self.right = right
        self.color = color

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "left": self.left,
            "right": self.right,
            "color": self.color,
        }

    def __repr__(self) -> str:
        return f"PopupRow({self.kind!r}, {self.left!r}, {self.right!r}, {self.color!r})"


def render(tracker: Tracker | None,
           category_of: Callable[[str], str | None] | None = None,
           policy: str = POLICY_CLASS) -> list[PopupRow]:
    """Return the headline, a spacer, then one row per data line in order."""
    if policy not in COLOR_POLICIES:
        raise ValueError(f"unknown color policy {policy!r}")
    if tracker is None:
        return []

    rows = [
        PopupRow(HEADLINE, tracker.headline, color=HEADLINE_COLOR),
        PopupRow(SPACER, " "),
    ]
    for i, line in enumerate(tracker.lines, start=1):
        left, right, actor = split_data_line(line)
        color = None
        if policy == POLICY_CLASS and actor and category_of is not None:
            color = class_color(category_of(actor))
        if color is None:
            color = fallback_color(i)
        rows.append(PopupRow(PAIR, left, right, color))
    logger.debug("rendered report #%d into %d rows", tracker.id, len(rows))
    return rows
