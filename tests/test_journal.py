"""Operation journal output."""

from __future__ import annotations

from pathlib import Path

from core.event_bus import STACK_CHANGED, EventBus
from geometry.placement import CascadePlacement
from governance.journal import OperationJournal
from routes.pages import AppWindowRoute
from stacks.window_stack import WindowStackManager


def test_journal_records_one_line_per_public_call(tmp_path: Path) -> None:
    journal = OperationJournal(tmp_path / "logs" / "journal.jsonl")
    windows: WindowStackManager[AppWindowRoute] = WindowStackManager(
        placement=CascadePlacement(seed=0)
    )
    journal.attach(windows)
    finder = AppWindowRoute("finder")

    windows.push(finder)
    windows.push(AppWindowRoute("notes"))
    windows.focus_window(finder)

    events = journal.read()
    assert len(events) == 3
    assert events[0]["surface"] == "windows"
    assert events[0]["size"] == 1
    assert events[2]["active"] == "/finder"
    assert events[2]["operations"][0] == "focus"
    assert all("timestamp" in event for event in events)


def test_detach_stops_recording(tmp_path: Path) -> None:
    bus = EventBus()
    journal = OperationJournal(tmp_path / "journal.jsonl")
    journal.attach(bus)

    bus.emit(STACK_CHANGED, {"surface": "tabs", "operations": ["push"], "size": 1, "active": "a"})
    journal.detach(bus)
    bus.emit(STACK_CHANGED, {"surface": "tabs", "operations": ["pop"], "size": 0, "active": None})

    assert [event["operations"] for event in journal.read()] == [["push"]]


def test_read_missing_file_is_empty(tmp_path: Path) -> None:
    assert OperationJournal(tmp_path / "none.jsonl").read() == []
