"""Report detection, data-line parsing, and the per-sender Tracker model."""
from __future__ import annotations

import re
from typing import Iterator

from reportlink.errors import FrozenReportError


# ── Producers ─────────────────────────────────────────────────────────

# Ordered (producer, headline prefix) rules; first match wins.
PRODUCERS: list[tuple[str, str]] = [
    ("Recount", "Recount - "),
    ("Skada", "Skada: "),
]


def detect_producer(line: str) -> str | None:
    """Return the producer tag if ``line`` is a report headline, else None."""
    for producer, prefix in PRODUCERS:
        if line.startswith(prefix):
            return producer
    return None


# ── Data lines ────────────────────────────────────────────────────────

# "<n>. <actor> <rest>", e.g. "1. Abra   1000 (50.0%)"
_DATA_LINE_RE = re.compile(r"^\s*(\d+)\.\s+([^\W\d_]+)\s+(.*)$")


def parse_data_line(line: str) -> tuple[int, str, str] | None:
    """Split a numbered data line into (number, actor, rest), or None."""
    m = _DATA_LINE_RE.match(line)
    if not m:
        return None
    return int(m.group(1)), m.group(2), m.group(3)


def split_data_line(line: str) -> tuple[str, str, str | None]:
    """Split a data line into display columns.

    Returns ``(left, right, actor)`` where ``left`` is the sequence number
    and actor token ("1. Abra") and ``right`` is the stripped remainder.
    Lines that do not have the numbered shape come back whole on the left
    with no actor.
    """
    m = _DATA_LINE_RE.match(line)
    if not m:
        return line.strip(), "", None
    return line[:m.end(2)].strip(), m.group(3).strip(), m.group(2)


# ── LineList ──────────────────────────────────────────────────────────

class LineList:
    """Append-only, insertion-ordered list of captured data lines."""

    __slots__ = ("_lines", "_frozen")

    def __init__(self):
        self._lines: list[str] = []
        self._frozen = False

    def append(self, line: str) -> None:
        if self._frozen:
            raise FrozenReportError("cannot append to a finalized report")
        self._lines.append(line)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    def __getitem__(self, index: int) -> str:
        return self._lines[index]

    def __repr__(self) -> str:
        return f"LineList({self._lines!r})"


# ── Tracker ───────────────────────────────────────────────────────────

class Tracker:
    """Accumulation state for one sender's report."""

    __slots__ = ("id", "sender", "producer", "headline", "lines", "deadline")

    def __init__(self, id: int, sender: str, producer: str, headline: str,
                 deadline: float):
        self.id = id
        self.sender = sender
        self.producer = producer
        self.headline = headline
        self.lines = LineList()
        self.deadline = deadline

    @property
    def finalized(self) -> bool:
        return self.lines.frozen

    @property
    def expected_number(self) -> int:
        return len(self.lines) + 1

    def offer(self, line: str) -> bool:
        """Append ``line`` if it carries the next expected sequence number."""
        if self.finalized:
            return False
        parsed = parse_data_line(line)
        if parsed is None or parsed[0] != self.expected_number:
            return False
        self.lines.append(line)
        return True

    def finalize(self) -> None:
        self.lines.freeze()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sender": self.sender,
            "producer": self.producer,
            "headline": self.headline,
            "lines": list(self.lines),
            "deadline": self.deadline,
            "finalized": self.finalized,
        }

    def __repr__(self) -> str:
        return (f"Tracker(id={self.id}, sender={self.sender!r}, "
                f"producer={self.producer!r}, lines={len(self.lines)})")
