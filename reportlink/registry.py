"""Active and finalized report storage, and the timeout sweep."""
from __future__ import annotations

import logging

from reportlink.errors import TrackerExistsError
from reportlink.report import Tracker

logger = logging.getLogger(__name__)

DEFAULT_GRACE_PERIOD = 1.0


class TrackerRegistry:
    """Owns sender -> active Tracker and id -> finalized Tracker.

    Line accumulation only touches the active map; lookups for display
    read the finalized map first. A Tracker moves from active to finalized
    exactly once, during ``sweep``, and is frozen on the way.
    """

    def __init__(self, grace_period: float = DEFAULT_GRACE_PERIOD,
                 max_reports: int | None = None):
        if grace_period < 0:
            raise ValueError(f"grace period must be >= 0, got {grace_period!r}")
        if max_reports is not None and max_reports < 1:
            raise ValueError(f"max_reports must be >= 1, got {max_reports!r}")
        self.grace_period = grace_period
        self.max_reports = max_reports
        self._active: dict[str, Tracker] = {}
        self._finalized: dict[int, Tracker] = {}
        self._next_id = 1

    # ── Mutation ──────────────────────────────────────────────────────

    def begin_report(self, sender: str, headline: str, producer: str,
                     now: float) -> Tracker:
        if sender in self._active:
            raise TrackerExistsError(sender)
        tracker = Tracker(
            id=self._next_id,
            sender=sender,
            producer=producer,
            headline=headline,
            deadline=now + self.grace_period,
        )
        self._next_id += 1
        self._active[sender] = tracker
        logger.debug("began %s report #%d for %s", producer, tracker.id, sender)
        return tracker

    def append_line(self, sender: str, raw_line: str) -> bool:
        tracker = self._active.get(sender)
        if tracker is None:
            return False
        accepted = tracker.offer(raw_line)
        if not accepted:
            logger.debug("report #%d rejected line (expected %d): %r",
                         tracker.id, tracker.expected_number, raw_line)
        return accepted

    def sweep(self, now: float) -> list[Tracker]:
        """Finalize every active Tracker whose deadline has passed."""
        done: list[Tracker] = []
        for sender, tracker in list(self._active.items()):
            if tracker.deadline <= now:
                del self._active[sender]
                tracker.finalize()
                self._finalized[tracker.id] = tracker
                done.append(tracker)
                logger.debug("finalized report #%d (%d lines)",
                             tracker.id, len(tracker.lines))
        if done:
            self._evict()
        done.sort(key=lambda t: t.id)
        return done

    def _evict(self) -> None:
        if self.max_reports is None:
            return
        excess = len(self._finalized) - self.max_reports
        if excess > 0:
            for tid in sorted(self._finalized)[:excess]:
                del self._finalized[tid]
                logger.debug("evicted report #%d", tid)

    # ── Reads ─────────────────────────────────────────────────────────

    def lookup_by_id(self, id: int | None) -> Tracker | None:
        if id is None:
            return None
        return self._finalized.get(id)

    def lookup_active_by_sender(self, sender: str | None) -> Tracker | None:
        if sender is None:
            return None
        return self._active.get(sender)

    def has_active(self, sender: str) -> bool:
        return sender in self._active

    def active_senders(self) -> list[str]:
        return list(self._active)

    def reports(self) -> list[Tracker]:
        return [self._finalized[tid] for tid in sorted(self._finalized)]

    @property
    def next_id(self) -> int:
        return self._next_id
