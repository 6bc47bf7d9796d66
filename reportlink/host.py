"""Host event system interface and an in-memory implementation for replay."""
from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

# callback(channel, text, sender, *extra) -> (suppress, text, sender, *extra)
LineCallback = Callable[..., tuple]
TickCallback = Callable[[float], None]
LinkHandler = Callable[[str], Any]


class Host:
    """The host services the chat filter relies on."""

    def register_filter(self, channel: str, callback: LineCallback) -> None:
        raise NotImplementedError

    def register_tick(self, callback: TickCallback) -> None:
        raise NotImplementedError

    def set_link_handler(self, handler: LinkHandler) -> LinkHandler:
        """Install ``handler`` and return the one it replaces."""
        raise NotImplementedError

    def category_of(self, actor: str) -> str | None:
        return None

    def show_popup(self, rows: list) -> None:
        raise NotImplementedError


class ReplayHost(Host):
    """Drives filters, ticks and link clicks from recorded input."""

    def __init__(self, roster: dict[str, str] | None = None):
        self.roster = dict(roster or {})
        self.filters: dict[str, list[LineCallback]] = {}
        self.tick_callbacks: list[TickCallback] = []
        self.link_handler: LinkHandler = self._default_link_handler
        self.popups: list[list] = []
        self.unhandled: list[str] = []

    # ── Host interface ────────────────────────────────────────────────

    def register_filter(self, channel: str, callback: LineCallback) -> None:
        self.filters.setdefault(channel, []).append(callback)

    def register_tick(self, callback: TickCallback) -> None:
        self.tick_callbacks.append(callback)

    def set_link_handler(self, handler: LinkHandler) -> LinkHandler:
        previous = self.link_handler
        self.link_handler = handler
        return previous

    def category_of(self, actor: str) -> str | None:
        return self.roster.get(actor)

    def show_popup(self, rows: list) -> None:
        self.popups.append(rows)

    # ── Driving ───────────────────────────────────────────────────────

    def deliver(self, channel: str, text: str, sender: str, *extra) -> str | None:
        """Run the channel's filters; return the visible text or None."""
        for callback in self.filters.get(channel, []):
            suppress, text, sender, *extra = callback(channel, text, sender, *extra)
            if suppress:
                return None
        return text

    def tick(self, delta: float) -> None:
        for callback in self.tick_callbacks:
            callback(delta)

    def activate(self, reference: str) -> Any:
        return self.link_handler(reference)

    def _default_link_handler(self, reference: str) -> None:
        logger.debug("unhandled link %r", reference)
        self.unhandled.append(reference)
