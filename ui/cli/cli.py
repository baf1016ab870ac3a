"""CLI entrypoint for deskstack."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ui.cli import commands

app = typer.Typer(help="Window and tab stack engine")
config_app = typer.Typer(help="Configuration commands")


@app.command("replay")
def replay_cmd(
    script: Path = typer.Argument(..., exists=True, dir_okay=False, help="YAML/JSON step script"),
    snapshot_out: Optional[Path] = typer.Option(
        None, "--snapshot-out", help="Write final snapshot"
    ),
    journal: Optional[Path] = typer.Option(None, "--journal", help="Append changes as JSONL"),
    strict: bool = typer.Option(False, "--strict", help="Stop at the first failing step"),
) -> None:
    """Run a step script against a window or tab surface."""
    commands.replay(script=script, snapshot_out=snapshot_out, journal=journal, strict=strict)


@app.command("inspect")
def inspect_cmd(
    snapshot: Path = typer.Argument(..., exists=True, dir_okay=False, help="Snapshot JSON file"),
    surface: str = typer.Option("windows", "--surface", help="windows or tabs"),
) -> None:
    """Restore a snapshot file and show the resulting surface."""
    commands.inspect_snapshot(snapshot=snapshot, surface=surface)


@config_app.command("show")
def config_show_cmd() -> None:
    """Show effective configuration."""
    commands.config_show()


app.add_typer(config_app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
