"""Replay command — feed a recorded chat log through the filter."""
from __future__ import annotations

import logging
from pathlib import Path

from reportlink.chat_filter import ChatFilter
from reportlink.chatlog import ChatLine, read_chat_log
from reportlink.config import FilterConfig
from reportlink.host import ReplayHost
from reportlink.links import find_links

logger = logging.getLogger(__name__)


class Replay:
    """Result of running a chat log through a freshly installed filter."""

    __slots__ = ("host", "chat_filter", "entries", "suppressed")

    def __init__(self, host: ReplayHost, chat_filter: ChatFilter):
        self.host = host
        self.chat_filter = chat_filter
        self.entries: list[dict] = []
        self.suppressed = 0


def run_replay(lines: list[ChatLine], config: FilterConfig | None = None,
               roster: dict[str, str] | None = None, flush: bool = True) -> Replay:
    """Deliver each line in order, ticking the clock by the gaps between them.

    With ``flush`` a final tick of one grace period finalizes reports
    still accumulating at the end of the log.
    """
    host = ReplayHost(roster=roster)
    chat_filter = ChatFilter(config)
    chat_filter.install(host)
    replay = Replay(host, chat_filter)

    prev_time = lines[0].time if lines else 0.0
    for line in lines:
        delta = line.time - prev_time
        if delta > 0:
            host.tick(delta)
            prev_time = line.time
        visible = host.deliver(line.channel, line.text, line.sender)
        if visible is None:
            replay.suppressed += 1
            continue
        replay.entries.append({
            "time": line.time,
            "channel": line.channel,
            "sender": line.sender,
            "text": visible,
            "links": [{"payload": p, "text": t} for p, t in find_links(visible)],
        })

    if flush:
        host.tick(chat_filter.config.grace_period)
    logger.debug("replayed %d lines, %d suppressed", len(lines), replay.suppressed)
    return replay


def cmd_replay(path: Path, config: FilterConfig | None = None,
               roster: dict[str, str] | None = None) -> dict:
    """Return the visible stream as a canonical dict."""
    replay = run_replay(read_chat_log(path), config=config, roster=roster)
    return {
        "log": str(path),
        "entries": replay.entries,
        "suppressed": replay.suppressed,
        "reports": len(replay.chat_filter.registry.reports()),
    }
