"""Shared fixtures for reportlink tests."""
from __future__ import annotations

import json
import pytest
from pathlib import Path


@pytest.fixture
def chat_log(tmp_path):
    """Factory: write a list of dicts as a JSONL chat log, return path."""
    def _make(records: list[dict], name: str = "chat.jsonl") -> Path:
        p = tmp_path / name
        with open(p, "w", encoding="utf-8") as f:
            for rec in records:
                f.write(json.dumps(rec) + "\n")
        return p
    return _make


@pytest.fixture
def sample_records():
    """A party chat with one Recount report, one Skada report and noise."""
    return [
        {"time": 0.0, "channel": "PARTY", "sender": "Abra", "text": "pull in 5"},
        {"time": 10.0, "channel": "PARTY", "sender": "Abra", "text": "Recount - Damage Done"},
        {"time": 10.1, "channel": "PARTY", "sender": "Abra", "text": "1. Abra   1000 (50.0%)"},
        {"time": 10.1, "channel": "PARTY", "sender": "Abra", "text": "2. Bora   600 (30.0%)"},
        {"time": 10.2, "channel": "PARTY", "sender": "Abra", "text": "3. Cid   400 (20.0%)"},
        {"time": 10.3, "channel": "PARTY", "sender": "Bora", "text": "nice"},
        {"time": 20.0, "channel": "RAID", "sender": "Cid", "text": "Skada: Healing for Current fight:"},
        {"time": 20.1, "channel": "RAID", "sender": "Cid", "text": "1. Cid   12.3K (1.2K, 60.0%)"},
        {"time": 20.1, "channel": "RAID", "sender": "Cid", "text": "3. Abra   8.2K (0.8K, 40.0%)"},
        {"time": 30.0, "channel": "CHANNEL", "sender": "Dax", "text": "Recount - Damage Done"},
    ]


@pytest.fixture
def roster():
    return {"Abra": "MAGE", "Bora": "WARRIOR"}


@pytest.fixture
def host():
    from reportlink.host import ReplayHost
    return ReplayHost()


@pytest.fixture
def chat_filter(host):
    """A fresh filter installed on a fresh ReplayHost."""
    from reportlink.chat_filter import ChatFilter
    cf = ChatFilter()
    cf.install(host)
    return cf
