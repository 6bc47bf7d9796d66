"""Exception types raised by the report engine."""
from __future__ import annotations


class ReportLinkError(Exception):
    """Base class for reportlink errors."""


class TrackerExistsError(ReportLinkError):
    """A report was started for a sender that already has one in progress."""

    def __init__(self, sender: str):
        super().__init__(f"sender {sender!r} already has an active report")
        self.sender = sender


class FrozenReportError(ReportLinkError):
    """A line was appended to a finalized report."""


class LinkFormatError(ReportLinkError, ValueError):
    """A reference string is not a report link."""
