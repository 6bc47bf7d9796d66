"""Human formatter — Rich terminal output."""
from __future__ import annotations

import os
import sys

from rich.box import ASCII as ASCII_BOX, ROUNDED
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from reportlink.links import HYPERLINK_RE, decode
from reportlink.render import HEADLINE, PAIR

# ── Module state ──────────────────────────────────────────────────────

USE_ASCII = False
console = Console()

CHANNEL_STYLES = {
    "PARTY": "bright_blue",
    "PARTY_LEADER": "bright_blue",
    "GUILD": "green",
    "OFFICER": "dark_green",
    "RAID": "dark_orange",
    "RAID_LEADER": "dark_orange",
    "RAID_WARNING": "red",
    "SAY": "white",
    "WHISPER": "magenta",
    "YELL": "red",
}


def init(ascii_mode: bool = False, force_color: bool = False):
    global USE_ASCII, console
    USE_ASCII = ascii_mode
    if force_color:
        console = Console(force_terminal=True)
    else:
        console = Console()


def detect_ascii() -> bool:
    encoding = getattr(sys.stdout, "encoding", "") or ""
    if encoding.lower().replace("-", "") not in ("utf8", "utf16", "utf32"):
        return True
    lang = os.environ.get("LANG", "") + os.environ.get("LC_ALL", "")
    if lang and "utf" not in lang.lower():
        return True
    return False


def box_style():
    return ASCII_BOX if USE_ASCII else ROUNDED


def table_box():
    if USE_ASCII:
        return ASCII_BOX
    from rich.box import HEAVY_HEAD
    return HEAVY_HEAD


def _short_channel(channel: str) -> str:
    return channel.removeprefix("CHAT_MSG_")


# ── Stream formatter ──────────────────────────────────────────────────

def stream_text(text: str) -> Text:
    """Render a visible chat line, highlighting embedded report links."""
    t = Text()
    pos = 0
    for m in HYPERLINK_RE.finditer(text):
        t.append(text[pos:m.start()])
        payload, display = m.group(1), m.group(2)
        t.append(display, style="bold cyan underline")
        try:
            ref = decode(payload)
        except ValueError:
            ref = None
        if ref is not None and ref.id is not None:
            t.append(f" #{ref.id}", style="dim cyan")
        pos = m.end()
    t.append(text[pos:])
    return t


def format_replay(data: dict) -> None:
    for entry in data["entries"]:
        channel = _short_channel(entry["channel"])
        line = Text()
        line.append(f"{entry['time']:>8.1f} ", style="dim")
        line.append(f"[{channel}] ", style=CHANNEL_STYLES.get(channel, "white"))
        line.append(entry["sender"], style="bold")
        line.append(": ")
        line.append_text(stream_text(entry["text"]))
        console.print(line)
    console.print(f"\n[dim]{len(data['entries'])} lines shown, "
                  f"{data['suppressed']} suppressed, {data['reports']} reports[/]")
    if data["reports"]:
        console.print("[dim]Tip: reportlink show <log> <id> to open a report[/]")


# ── Reports formatter ─────────────────────────────────────────────────

def format_reports(data: list[dict]) -> None:
    if not data:
        console.print("[yellow]No reports found in this log.[/]")
        return

    w = min(console.width, 120)
    table = Table(title="Reports", show_lines=False,
                  padding=(0, 1), width=w, box=table_box())
    table.add_column("ID", style="bold cyan", justify="right", no_wrap=True)
    table.add_column("Sender", style="bold", no_wrap=True)
    table.add_column("Producer", style="yellow", no_wrap=True)
    table.add_column("Lines", justify="right", no_wrap=True)
    table.add_column("Headline", no_wrap=True, overflow="ellipsis", ratio=1)

    for r in data:
        table.add_row(
            str(r["id"]),
            escape(r["sender"]),
            r["producer"],
            str(r["lines"]),
            Text(r["headline"]),
        )

    console.print(table)
    console.print(f"\n[dim]{len(data)} reports[/]")


# ── Popup formatter ───────────────────────────────────────────────────

def format_popup(data: dict) -> None:
    rows = data["rows"]
    if not data.get("handled", True):
        console.print(f"[yellow]Not a report link: {escape(data['reference'])}[/]")
        return
    if not rows:
        console.print(Panel(Text("(empty report)", style="dim"),
                            title=escape(data["reference"]), box=box_style()))
        return

    title = None
    table = Table(show_header=False, box=None, padding=(0, 2), expand=False)
    table.add_column("left", no_wrap=True)
    table.add_column("right", justify="right", no_wrap=True)
    for row in rows:
        if row["kind"] == HEADLINE:
            title = Text(row["left"], style=f"bold {row['color']}")
        elif row["kind"] == PAIR:
            table.add_row(Text(row["left"], style=row["color"]),
                          Text(row["right"], style=row["color"]))
    console.print(Panel(table, title=title, title_align="left", box=box_style()))
