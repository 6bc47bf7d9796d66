"""Report listing and report popup commands."""
from __future__ import annotations

from pathlib import Path

from reportlink.chatlog import read_chat_log
from reportlink.commands.replay import Replay, run_replay
from reportlink.config import FilterConfig
from reportlink.links import TYPE_TAG, encode_payload, parse_id


def cmd_reports(path: Path, config: FilterConfig | None = None) -> list[dict]:
    """Return finalized reports from a chat log as canonical dicts."""
    replay = run_replay(read_chat_log(path), config=config)
    return [
        {
            "id": t.id,
            "sender": t.sender,
            "producer": t.producer,
            "headline": t.headline,
            "lines": len(t.lines),
            "payload": encode_payload(t),
        }
        for t in replay.chat_filter.registry.reports()
    ]


def reference_for(replay: Replay, ref: str) -> str:
    """Turn a bare report id into a payload; pass anything else through."""
    ref = ref.strip()
    id = parse_id(ref)
    if id is None:
        return ref
    tracker = replay.chat_filter.registry.lookup_by_id(id)
    if tracker is not None:
        return encode_payload(tracker)
    return f"{TYPE_TAG}::{ref}"


def show_reference(replay: Replay, ref: str) -> dict:
    reference = reference_for(replay, ref)
    rows = replay.host.activate(reference)
    if rows is None:
        return {"reference": reference, "handled": False, "report": None, "rows": []}
    tracker = replay.chat_filter.resolve(reference)
    return {
        "reference": reference,
        "handled": True,
        "report": tracker.to_dict() if tracker else None,
        "rows": [row.to_dict() for row in rows],
    }


def cmd_show(path: Path, ref: str, config: FilterConfig | None = None,
             roster: dict[str, str] | None = None) -> dict:
    """Activate a reference after replaying the log, return the popup."""
    replay = run_replay(read_chat_log(path), config=config, roster=roster)
    return show_reference(replay, ref)
