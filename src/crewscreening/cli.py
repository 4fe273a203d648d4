"""Typer CLI entrypoint for the crew assessment pipeline."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Optional

import typer
import yaml

from .container import create_container
from .logging import configure_logging
from .pipeline import ENGINE_NAMES, AuditLogger

app = typer.Typer(help="Maritime crew competency and stability scoring CLI.")


class EngineChoice(str, Enum):
    all = "all"
    competency = "competency"
    stability = "stability"


@app.callback()
def callback() -> None:
    """Maritime crew competency and stability scoring."""


@app.command()
def run(
    dataset: Path = typer.Option(..., exists=True, readable=True, dir_okay=False, help="Dataset JSON path."),
    output: Path = typer.Option(
        ...,
        exists=False,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
        help="Output JSON path.",
    ),
    engine: EngineChoice = typer.Option(EngineChoice.all, help="Engine(s) to run."),
    fleet: Optional[str] = typer.Option(None, help="Fleet type overriding each candidate's own."),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
    audit_log: Optional[Path] = typer.Option(None, dir_okay=False, help="Audit log output (JSONL)."),
) -> None:
    """Run the assessment pipeline."""
    settings: dict[str, Any] = {}
    if config:
        with config.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
            if not isinstance(loaded, dict):
                raise typer.BadParameter("Config file must be a YAML object", param_name="config")
            settings = loaded

    configure_logging(log_level)

    container = create_container(settings=settings)
    pipeline = container.pipeline()
    audit_logger = AuditLogger(audit_log) if audit_log else None
    engines = ENGINE_NAMES if engine is EngineChoice.all else (engine.value,)
    fleet_type = fleet or container.app_config().pipeline.fleet_type

    results = pipeline.run(
        dataset_path=dataset,
        output_path=output,
        engines=engines,
        fleet_type=fleet_type,
        audit_logger=audit_logger,
    )
    typer.echo(f"Processed {len(results)} candidates. Results saved to {output}.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
