"""The chat filter: per-line, per-tick and link activation entry points."""
from __future__ import annotations

import logging

from reportlink import links
from reportlink.config import FilterConfig
from reportlink.host import Host, LinkHandler
from reportlink.registry import TrackerRegistry
from reportlink.render import PopupRow, render
from reportlink.report import Tracker, detect_producer

logger = logging.getLogger(__name__)


class ChatFilter:
    """Owns the report registry and the elapsed clock for one host."""

    def __init__(self, config: FilterConfig | None = None):
        self.config = config or FilterConfig()
        self.registry = TrackerRegistry(
            grace_period=self.config.grace_period,
            max_reports=self.config.max_reports,
        )
        self.elapsed = 0.0
        self.host: Host | None = None
        self._next_link_handler: LinkHandler | None = None

    def install(self, host: Host) -> None:
        for channel in self.config.channels:
            host.register_filter(channel, self.filter_line)
        host.register_tick(self.on_tick)
        self._next_link_handler = host.set_link_handler(self.on_reference_activated)
        self.host = host
        logger.debug("installed on %d channels", len(self.config.channels))

    # ── Line filter ───────────────────────────────────────────────────

    def filter_line(self, channel: str, text: str, sender: str, *extra) -> tuple:
        if not self.registry.has_active(sender):
            return (False, self._process_headline(sender, text), sender, *extra)
        return (self.registry.append_line(sender, text), text, sender, *extra)

    def _process_headline(self, sender: str, text: str) -> str:
        producer = detect_producer(text)
        if producer is None:
            return text
        tracker = self.registry.begin_report(sender, text, producer, self.elapsed)
        return links.encode(tracker)

    # ── Tick ──────────────────────────────────────────────────────────

    def on_tick(self, delta: float) -> list[Tracker]:
        self.elapsed += delta
        return self.registry.sweep(self.elapsed)

    # ── Links ─────────────────────────────────────────────────────────

    def resolve(self, reference: str) -> Tracker | None:
        return links.resolve(self.registry, reference)

    def render(self, tracker: Tracker | None) -> list[PopupRow]:
        category_of = self.host.category_of if self.host is not None else None
        return render(tracker, category_of=category_of, policy=self.config.color_policy)

    def on_reference_activated(self, reference: str):
        if not links.is_report_link(reference):
            if self._next_link_handler is not None:
                return self._next_link_handler(reference)
            return None

        try:
            rows = self.render(self.resolve(reference))
        except Exception:
            logger.warning("failed to build report for %r", reference, exc_info=True)
            rows = []
        if self.host is not None:
            self.host.show_popup(rows)
        return rows
