"""Tests for reportlink.commands, reportlink.chatlog and the CLI."""
from __future__ import annotations

import json
import sys

import pytest

from reportlink.chatlog import ChatLine, iter_jsonl, load_roster, read_chat_log
from reportlink.colors import CLASS_COLORS, fallback_color
from reportlink.commands.replay import cmd_replay, run_replay
from reportlink.commands.reports import cmd_reports, cmd_show
from reportlink.config import FilterConfig


class TestChatLog:
    def test_skips_bad_lines(self, tmp_path):
        path = tmp_path / "bad.jsonl"
        path.write_text('{"sender": "a"}\nnot json\n\n[1, 2]\n{"sender": "b"}\n')
        assert [r["sender"] for r in iter_jsonl(path)] == ["a", "b"]

    def test_chat_line_accessors(self):
        line = ChatLine({"time": "2.5", "channel": "party", "sender": "Abra", "text": "hi"})
        assert line.time == 2.5
        assert line.channel == "CHAT_MSG_PARTY"
        assert line.sender == "Abra"
        assert line.text == "hi"

    def test_chat_line_defaults(self):
        line = ChatLine({"time": "soon"})
        assert line.time == 0.0
        assert line.channel == "CHAT_MSG_SAY"
        assert line.text == ""

    def test_sorted_by_time(self, chat_log):
        path = chat_log([
            {"time": 2, "text": "b"},
            {"time": 1, "text": "a"},
            {"time": 2, "text": "c"},
        ])
        assert [c.text for c in read_chat_log(path)] == ["a", "b", "c"]

    def test_load_roster(self, tmp_path):
        path = tmp_path / "roster.json"
        path.write_text('{"Abra": "MAGE"}')
        assert load_roster(path) == {"Abra": "MAGE"}
        path.write_text('["Abra"]')
        with pytest.raises(ValueError):
            load_roster(path)


class TestReplay:
    def test_visible_stream(self, chat_log, sample_records):
        data = cmd_replay(chat_log(sample_records))
        texts = [e["text"] for e in data["entries"]]
        assert texts == [
            "pull in 5",
            "|Hrecountlink:Abra:1|h[Recount - Damage Done]|h",
            "nice",
            "|Hrecountlink:Cid:2|h[Skada: Healing for Current fight:]|h",
            "3. Abra   8.2K (0.8K, 40.0%)",
            "Recount - Damage Done",
        ]
        assert data["suppressed"] == 4
        assert data["reports"] == 2
        assert data["entries"][1]["links"] == [
            {"payload": "recountlink:Abra:1", "text": "Recount - Damage Done"},
        ]

    def test_without_flush_last_report_stays_active(self, chat_log, sample_records):
        # log ends while Cid's report is still accumulating
        lines = read_chat_log(chat_log(sample_records[:-1]))
        registry = run_replay(lines, flush=False).chat_filter.registry
        assert [t.id for t in registry.reports()] == [1]
        assert registry.active_senders() == ["Cid"]

        registry = run_replay(lines).chat_filter.registry
        assert [t.id for t in registry.reports()] == [1, 2]
        assert registry.active_senders() == []

    def test_long_grace_keeps_reports_open(self, chat_log, sample_records):
        config = FilterConfig(grace_period=60.0)
        data = cmd_replay(chat_log(sample_records), config=config)
        assert data["suppressed"] == 4
        assert data["reports"] == 2

    def test_empty_log(self, chat_log):
        data = cmd_replay(chat_log([]))
        assert data["entries"] == []
        assert data["reports"] == 0


class TestReports:
    def test_list(self, chat_log, sample_records):
        data = cmd_reports(chat_log(sample_records))
        assert [(r["id"], r["sender"], r["producer"], r["lines"]) for r in data] == [
            (1, "Abra", "Recount", 3),
            (2, "Cid", "Skada", 1),
        ]
        assert data[0]["payload"] == "recountlink:Abra:1"

    def test_retention(self, chat_log, sample_records):
        data = cmd_reports(chat_log(sample_records), config=FilterConfig(max_reports=1))
        assert [r["id"] for r in data] == [2]


class TestShow:
    def test_by_id(self, chat_log, sample_records, roster):
        data = cmd_show(chat_log(sample_records), "1", roster=roster)
        assert data["handled"] is True
        assert data["reference"] == "recountlink:Abra:1"
        assert data["report"]["headline"] == "Recount - Damage Done"
        rows = data["rows"]
        assert [r["kind"] for r in rows] == ["headline", "spacer", "pair", "pair", "pair"]
        assert [(r["left"], r["right"]) for r in rows[2:]] == [
            ("1. Abra", "1000 (50.0%)"),
            ("2. Bora", "600 (30.0%)"),
            ("3. Cid", "400 (20.0%)"),
        ]
        assert [r["color"] for r in rows[2:]] == [
            CLASS_COLORS["MAGE"], CLASS_COLORS["WARRIOR"], fallback_color(3),
        ]

    def test_by_payload(self, chat_log, sample_records):
        data = cmd_show(chat_log(sample_records), "recountlink:Cid:2")
        assert data["rows"][0]["left"] == "Skada: Healing for Current fight:"
        assert len(data["rows"]) == 3

    def test_by_full_link(self, chat_log, sample_records):
        link = "|Hrecountlink:Abra:1|h[Recount - Damage Done]|h"
        data = cmd_show(chat_log(sample_records), link)
        assert len(data["rows"]) == 5

    def test_unknown_id(self, chat_log, sample_records):
        data = cmd_show(chat_log(sample_records), "42")
        assert data["handled"] is True
        assert data["report"] is None
        assert data["rows"] == []

    def test_non_ascii_digit_ref(self, chat_log, sample_records):
        data = cmd_show(chat_log(sample_records), "²")
        assert data["handled"] is False
        assert data["rows"] == []

    def test_foreign_link(self, chat_log, sample_records):
        data = cmd_show(chat_log(sample_records), "item:19019")
        assert data["handled"] is False
        assert data["rows"] == []


class TestConfig:
    def test_defaults(self, monkeypatch):
        for var in ("REPORTLINK_GRACE_PERIOD", "REPORTLINK_COLOR_POLICY", "REPORTLINK_MAX_REPORTS"):
            monkeypatch.delenv(var, raising=False)
        cfg = FilterConfig.from_env()
        assert cfg.grace_period == 1.0
        assert cfg.color_policy == "class"
        assert cfg.max_reports is None

    def test_env_and_overrides(self, monkeypatch):
        monkeypatch.setenv("REPORTLINK_GRACE_PERIOD", "2.5")
        monkeypatch.setenv("REPORTLINK_COLOR_POLICY", "Alternate")
        monkeypatch.setenv("REPORTLINK_MAX_REPORTS", "10")
        cfg = FilterConfig.from_env()
        assert (cfg.grace_period, cfg.color_policy, cfg.max_reports) == (2.5, "alternate", 10)
        cfg = FilterConfig.from_env(grace_period=3.0, max_reports=None)
        assert cfg.grace_period == 3.0
        assert cfg.max_reports == 10

    def test_invalid_env(self, monkeypatch):
        monkeypatch.setenv("REPORTLINK_GRACE_PERIOD", "soon")
        with pytest.raises(ValueError):
            FilterConfig.from_env()

    def test_invalid_values(self):
        with pytest.raises(ValueError):
            FilterConfig(color_policy="rainbow")
        with pytest.raises(ValueError):
            FilterConfig(grace_period=-0.5)
        with pytest.raises(ValueError):
            FilterConfig(max_reports=0)


class TestCli:
    def _run(self, monkeypatch, *argv):
        from reportlink.__main__ import main
        monkeypatch.setattr(sys, "argv", ["reportlink", *argv])
        main()

    def test_reports_json(self, monkeypatch, capsys, chat_log, sample_records):
        path = chat_log(sample_records)
        self._run(monkeypatch, "reports", str(path), "-f", "json")
        data = json.loads(capsys.readouterr().out)
        assert [r["id"] for r in data] == [1, 2]

    def test_bare_log_is_replay(self, monkeypatch, capsys, chat_log, sample_records):
        path = chat_log(sample_records)
        self._run(monkeypatch, str(path), "--format", "json")
        data = json.loads(capsys.readouterr().out)
        assert data["suppressed"] == 4

    def test_show_unknown_exits_1(self, monkeypatch, capsys, chat_log, sample_records):
        path = chat_log(sample_records)
        with pytest.raises(SystemExit) as exc:
            self._run(monkeypatch, "show", str(path), "42", "-f", "json")
        assert exc.value.code == 1

    def test_missing_log(self, monkeypatch, tmp_path):
        with pytest.raises(SystemExit) as exc:
            self._run(monkeypatch, "replay", str(tmp_path / "nope.jsonl"))
        assert exc.value.code == 1
