"""Report link encoding, decoding, and resolution.

Hyperlinks use the host's rich-text syntax ``|H<type>:<data>|h<text>|h``.
For reports ``<type>`` is ``recountlink``, ``<data>`` is the sender and
the tracker id separated by a colon, and ``<text>`` is the bracketed
headline::

    |Hrecountlink:Abra:1|h[Recount - Damage Done]|h

The host hands the ``<type>:<data>`` part (the payload) back to us when a
link is activated.
"""
from __future__ import annotations

import logging
import re

from reportlink.errors import LinkFormatError
from reportlink.registry import TrackerRegistry
from reportlink.report import Tracker

logger = logging.getLogger(__name__)

TYPE_TAG = "recountlink"

HYPERLINK_RE = re.compile(r"\|H([^|]*)\|h(.*?)\|h")
_ID_RE = re.compile(r"[0-9]+")


class LinkRef:
    """Decoded report link. Either field may be None if it failed to parse."""

    __slots__ = ("sender", "id")

    def __init__(self, sender: str | None, id: int | None):
        self.sender = sender
        self.id = id

    def __eq__(self, other) -> bool:
        if not isinstance(other, LinkRef):
            return NotImplemented
        return self.sender == other.sender and self.id == other.id

    def __repr__(self) -> str:
        return f"LinkRef(sender={self.sender!r}, id={self.id!r})"


# ── Encoding ──────────────────────────────────────────────────────────

def encode_payload(tracker: Tracker) -> str:
    return f"{TYPE_TAG}:{tracker.sender}:{tracker.id}"


def encode(tracker: Tracker) -> str:
    """Return the clickable hyperlink that replaces a report headline."""
    return f"|H{encode_payload(tracker)}|h[{tracker.headline}]|h"


# ── Decoding ──────────────────────────────────────────────────────────

def _payload_of(reference: str) -> str:
    m = HYPERLINK_RE.search(reference)
    if m:
        return m.group(1)
    return reference.strip()


def parse_id(text: str) -> int | None:
    """Parse an ASCII tracker id, or None."""
    if _ID_RE.fullmatch(text):
        return int(text)
    return None


def is_report_link(reference: str) -> bool:
    payload = _payload_of(reference)
    return payload == TYPE_TAG or payload.startswith(TYPE_TAG + ":")


def decode(reference: str) -> LinkRef:
    """Decode a payload or full hyperlink into a LinkRef.

    Raises LinkFormatError if the reference is not a report link. The
    sender and id are parsed independently of each other.
    """
    if not is_report_link(reference):
        raise LinkFormatError(f"not a {TYPE_TAG} reference: {reference!r}")
    parts = _payload_of(reference)[len(TYPE_TAG) + 1:].split(":")
    sender = parts[0] or None
    id = parse_id(parts[1]) if len(parts) > 1 else None
    return LinkRef(sender, id)


def find_links(text: str) -> list[tuple[str, str]]:
    """Return (payload, display text) for every hyperlink embedded in text."""
    links = []
    for m in HYPERLINK_RE.finditer(text):
        display = m.group(2)
        if display.startswith("[") and display.endswith("]"):
            display = display[1:-1]
        links.append((m.group(1), display))
    return links


# ── Resolution ────────────────────────────────────────────────────────

def resolve(registry: TrackerRegistry, reference: str) -> Tracker | None:
    """Look up the Tracker behind a reference: by id, then by sender."""
    try:
        ref = decode(reference)
    except LinkFormatError:
        logger.info("cannot resolve %r: not a report link", reference)
        return None
    tracker = registry.lookup_by_id(ref.id)
    if tracker is None:
        tracker = registry.lookup_active_by_sender(ref.sender)
    if tracker is None:
        logger.info("no report for %r", reference)
    return tracker
