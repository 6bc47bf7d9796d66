"""Filter configuration, with defaults taken from the environment."""
from __future__ import annotations

import os

from reportlink.colors import COLOR_POLICIES, POLICY_CLASS
from reportlink.registry import DEFAULT_GRACE_PERIOD

# Party/guild/raid, then local channels
CHANNELS: tuple[str, ...] = (
    "CHAT_MSG_PARTY",
    "CHAT_MSG_PARTY_LEADER",
    "CHAT_MSG_GUILD",
    "CHAT_MSG_OFFICER",
    "CHAT_MSG_RAID",
    "CHAT_MSG_RAID_LEADER",
    "CHAT_MSG_RAID_WARNING",
    "CHAT_MSG_SAY",
    "CHAT_MSG_WHISPER",
    "CHAT_MSG_YELL",
)


def channel_event(name: str) -> str:
    """Normalize "party" / "PARTY" / "CHAT_MSG_PARTY" to the event name."""
    name = name.strip().upper()
    if not name.startswith("CHAT_MSG_"):
        name = "CHAT_MSG_" + name
    return name


def _parse_float(name: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


class FilterConfig:
    __slots__ = ("grace_period", "color_policy", "max_reports", "channels")

    def __init__(self, grace_period: float = DEFAULT_GRACE_PERIOD,
                 color_policy: str = POLICY_CLASS,
                 max_reports: int | None = None,
                 channels: tuple[str, ...] = CHANNELS):
        if grace_period < 0:
            raise ValueError(f"grace period must be >= 0, got {grace_period!r}")
        if color_policy not in COLOR_POLICIES:
            raise ValueError(f"color policy must be one of {', '.join(COLOR_POLICIES)}, "
                             f"got {color_policy!r}")
        if max_reports is not None and max_reports < 1:
            raise ValueError(f"max reports must be >= 1, got {max_reports!r}")
        self.grace_period = grace_period
        self.color_policy = color_policy
        self.max_reports = max_reports
        self.channels = tuple(channel_event(c) for c in channels)

    @classmethod
    def from_env(cls, **overrides) -> FilterConfig:
        """Build a config from REPORTLINK_* variables; non-None overrides win."""
        values: dict = {}
        env = os.environ.get("REPORTLINK_GRACE_PERIOD")
        if env:
            values["grace_period"] = _parse_float("REPORTLINK_GRACE_PERIOD", env)
        env = os.environ.get("REPORTLINK_COLOR_POLICY")
        if env:
            values["color_policy"] = env.strip().lower()
        env = os.environ.get("REPORTLINK_MAX_REPORTS")
        if env:
            values["max_reports"] = _parse_int("REPORTLINK_MAX_REPORTS", env)
        for key, val in overrides.items():
            if val is not None:
                values[key] = val
        return cls(**values)
