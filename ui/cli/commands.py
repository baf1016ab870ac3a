"""Typer command handlers."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, NoReturn

import typer
import yaml

from core.errors import StackError
from core.orchestrator import Orchestrator, RuntimeBundle
from executor.step_runner import StepRunner, describe_surface
from geometry.rect import Size
from stacks.window_stack import WindowStackManager


def _runtime(root: Path | None = None, journal: Path | None = None) -> RuntimeBundle:
    bundle = Orchestrator(root=root).build(journal_path=journal)
    logging.basicConfig(level=getattr(logging, bundle.settings.log_level, logging.WARNING))
    return bundle


def _load_document(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


def _viewport(raw: Any, fallback: Size) -> Size:
    if not isinstance(raw, dict):
        return fallback
    return Size(float(raw.get("width", fallback.width)), float(raw.get("height", fallback.height)))


def _fail(message: str) -> NoReturn:
    typer.echo(f"error: {message}", err=True)
    raise typer.Exit(code=1)


def replay(script: Path, snapshot_out: Path | None, journal: Path | None, strict: bool) -> None:
    """Run a step script and print the resulting surface."""
    bundle = _runtime(journal=journal)
    document = _load_document(script)
    if isinstance(document, list):
        document = {"steps": document}
    if not isinstance(document, dict):
        _fail(f"Script must be a mapping or a list of steps: {script}")

    try:
        manager = bundle.surface(str(document.get("surface", "windows")))
    except ValueError as exc:
        _fail(str(exc))
    viewport = _viewport(document.get("viewport"), bundle.settings.restore_viewport)
    runner = StepRunner(manager, bundle.codec, viewport=viewport)

    try:
        results = runner.run(document.get("steps") or [], strict=strict)
    except StackError as exc:
        _fail(str(exc))

    failed = [r for r in results if not r["success"]]
    for result in failed:
        typer.echo(f"step {result['step']} ({result['op']}) failed: {result['outcome']}", err=True)

    typer.echo(json.dumps(describe_surface(manager), indent=2))
    if snapshot_out is not None:
        snapshot_out.parent.mkdir(parents=True, exist_ok=True)
        snapshot_out.write_text(json.dumps(manager.serialize(), indent=2), encoding="utf-8")
        typer.echo(f"Snapshot written to {snapshot_out}")
    if failed:
        raise typer.Exit(code=1)


def inspect_snapshot(snapshot: Path, surface: str) -> None:
    """Restore a snapshot and print the surface."""
    bundle = _runtime()
    try:
        manager = bundle.surface(surface)
    except ValueError as exc:
        _fail(str(exc))
    try:
        record = json.loads(snapshot.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        _fail(f"Snapshot is not valid JSON: {exc}")

    try:
        model = manager.deserialize(record)
        if isinstance(manager, WindowStackManager):
            manager.restore(model, bundle.settings.restore_viewport)
        else:
            manager.restore(model)
    except StackError as exc:
        _fail(str(exc))
    typer.echo(json.dumps(describe_surface(manager), indent=2))


def config_show() -> None:
    """Show effective runtime config."""
    bundle = _runtime()
    typer.echo(json.dumps(bundle.config, indent=2))
