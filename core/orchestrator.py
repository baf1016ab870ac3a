"""Top-level wiring of window and tab surfaces."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.policy_runtime import StackSettings, load_effective_config, merge_dicts
from geometry.placement import CascadePlacement
from governance.journal import OperationJournal
from routes.codec import RouteCodec
from routes.pages import build_default_registry
from routes.route import Route
from stacks.tab_stack import TabStackManager
from stacks.window_stack import WindowStackManager


@dataclass
class RuntimeBundle:
    """Holds initialized runtime components."""

    config: dict[str, Any]
    settings: StackSettings
    codec: RouteCodec
    windows: WindowStackManager[Route]
    tabs: TabStackManager[Route]
    journal: OperationJournal | None = None

    def surface(self, name: str) -> WindowStackManager[Route] | TabStackManager[Route]:
        if name in ("windows", self.windows.label):
            return self.windows
        if name in ("tabs", self.tabs.label):
            return self.tabs
        raise ValueError(f"Unknown surface: {name!r}")


class Orchestrator:
    """Creates and wires runtime components for CLI use."""

    def __init__(self, root: Path | None = None, codec: RouteCodec | None = None) -> None:
        default_root = Path(__file__).resolve().parents[1]
        self.root = (root or default_root).resolve()
        self.codec = codec

    def build(
        self,
        journal_path: Path | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> RuntimeBundle:
        config = load_effective_config(self.root)
        if overrides:
            config = merge_dicts(config, overrides)
        settings = StackSettings.from_config(config)
        codec = self.codec or build_default_registry()

        placement = CascadePlacement(
            base_offset=settings.placement_base_offset,
            spread=settings.placement_spread,
            default_width=settings.default_width,
            default_height=settings.default_height,
            seed=settings.placement_seed,
        )
        windows: WindowStackManager[Route] = WindowStackManager(
            settings.windows_label,
            placement=placement,
            min_width=settings.min_width,
            min_height=settings.min_height,
            codec=codec,
        )
        tabs: TabStackManager[Route] = TabStackManager(settings.tabs_label, codec=codec)

        journal = None
        journal_cfg = config.get("journal", {}) or {}
        if journal_path is None and journal_cfg.get("enabled"):
            journal_path = self.root / str(journal_cfg.get("path", "logs/journal.jsonl"))
        if journal_path is not None:
            journal = OperationJournal(journal_path)
            journal.attach(windows)
            journal.attach(tabs)

        return RuntimeBundle(
            config=config,
            settings=settings,
            codec=codec,
            windows=windows,
            tabs=tabs,
            journal=journal,
        )
