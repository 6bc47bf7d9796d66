"""Recorded chat logs and rosters."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Iterator

from reportlink.config import channel_event


# ── JSONL helpers ─────────────────────────────────────────────────────

def iter_jsonl(path: Path) -> Iterator[dict]:
    """Yield parsed records from a JSONL file, skipping bad lines."""
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                rec = json.loads(line)
            except json.JSONDecodeError:
                continue
            if isinstance(rec, dict):
                yield rec


# ── ChatLine ──────────────────────────────────────────────────────────

class ChatLine:
    """Thin wrapper over one chat log record with typed accessors."""

    __slots__ = ("raw",)

    def __init__(self, raw: dict):
        self.raw = raw

    @property
    def time(self) -> float:
        try:
            return float(self.raw.get("time", 0.0))
        except (TypeError, ValueError):
            return 0.0

    @property
    def channel(self) -> str:
        return channel_event(self.raw.get("channel") or "SAY")

    @property
    def sender(self) -> str:
        return str(self.raw.get("sender", ""))

    @property
    def text(self) -> str:
        return str(self.raw.get("text", ""))


def read_chat_log(path: Path) -> list[ChatLine]:
    """Load a chat log, ordered by time (stable for equal times)."""
    lines = [ChatLine(raw) for raw in iter_jsonl(path)]
    lines.sort(key=lambda c: c.time)
    return lines


def load_roster(path: Path) -> dict[str, str]:
    """Read a ``{"name": "CLASS"}`` JSON object."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"roster {path} must be a JSON object of name -> class")
    return {str(k): str(v) for k, v in data.items()}
