"""Structured JSONL journal of stack changes."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from core.event_bus import STACK_CHANGED, EventBus


class OperationJournal:
    """Appends one JSON line per ``stack_changed`` event."""

    def __init__(self, log_path: Path) -> None:
        self.log_path = log_path
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self.logger = logging.getLogger("deskstack.journal")

    def attach(self, source: Any) -> None:
        """Subscribe to a manager or an event bus."""
        if isinstance(source, EventBus):
            source.subscribe(STACK_CHANGED, self.record)
        else:
            source.subscribe(self.record)

    def detach(self, source: Any) -> None:
        if isinstance(source, EventBus):
            source.unsubscribe(STACK_CHANGED, self.record)
        else:
            source.unsubscribe(self.record)

    def record(self, payload: dict[str, Any]) -> None:
        event = {
            "timestamp": datetime.now(UTC).isoformat(),
            "surface": payload.get("surface"),
            "operations": list(payload.get("operations", [])),
            "size": payload.get("size"),
            "active": payload.get("active"),
        }
        line = json.dumps(event, ensure_ascii=True)
        with self.log_path.open("a", encoding="utf-8") as fh:
            fh.write(line + "\n")
        self.logger.info(line)

    def read(self) -> list[dict[str, Any]]:
        if not self.log_path.exists():
            return []
        lines = self.log_path.read_text(encoding="utf-8").splitlines()
        return [json.loads(line) for line in lines if line.strip()]
