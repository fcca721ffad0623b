"""Typer CLI entry points for the opinion space projection."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from pydantic import ValidationError

from .aggregate import aggregate_clusters
from .bridges import analyze_bridges
from .config import LayoutSettings, ProjectionSettings
from .io_utils import SimulationNotFoundError, find_simulation, read_json, read_jsonl, write_json, write_jsonl
from .project import project_simulation
from .schemas.simulation import Simulation
from .synth_data import write_simulation

DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level:<8}</level> | {message}"

app = typer.Typer(help="Opinion space projection CLI.")


def _configure_logger(level: str = DEFAULT_LOG_LEVEL) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        enqueue=False,
        colorize=True,
        format=LOG_FORMAT,
    )


@app.callback()
def main(
    log_level: str = typer.Option(
        DEFAULT_LOG_LEVEL,
        "--log-level",
        help="Log verbosity: TRACE, DEBUG, INFO, WARNING or ERROR.",
        case_sensitive=False,
    ),
) -> None:
    """Opinion space projection CLI."""
    _configure_logger(log_level)


def _load_simulation(input_path: Path) -> Simulation:
    try:
        return Simulation.model_validate(read_json(input_path))
    except ValidationError as exc:
        raise typer.BadParameter(f"{input_path} is not a valid simulation snapshot: {exc}") from exc


def _settings(iterations: int, include_bridges: bool) -> ProjectionSettings:
    return ProjectionSettings(layout=LayoutSettings(iterations=iterations), include_bridges=include_bridges)


@app.command("project")
def project_cli(
    input_path: Path = typer.Option(
        ...,
        "--input",
        "-i",
        exists=True,
        readable=True,
        resolve_path=True,
        help="Simulation snapshot JSON.",
    ),
    output_path: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        resolve_path=True,
        help="Destination JSON file. Prints to stdout when omitted.",
    ),
    bridges: bool = typer.Option(True, "--bridges/--no-bridges", help="Compute opinion bridges."),
    iterations: int = typer.Option(50, "--iterations", min=0, help="Layout relaxation rounds."),
) -> None:
    """Project one simulation into 3-D opinion space."""
    simulation = _load_simulation(input_path)
    response = project_simulation(simulation, _settings(iterations, bridges))
    if output_path is None:
        typer.echo(response.to_json(indent=True).decode("utf-8"))
        return
    write_json(output_path, response.to_payload())
    typer.echo(f"Wrote projection of {len(response.clusters)} clusters to {output_path}")


@app.command("bridges")
def bridges_cli(
    input_path: Path = typer.Option(
        ...,
        "--input",
        "-i",
        exists=True,
        readable=True,
        resolve_path=True,
        help="Simulation snapshot JSON.",
    ),
    limit: int = typer.Option(0, "--limit", "-n", min=0, help="Show only the N strongest bridges (0 = all)."),
) -> None:
    """List opinion bridges, strongest first."""
    simulation = _load_simulation(input_path)
    summaries = aggregate_clusters(simulation)
    names = {summary.id: summary.name for summary in summaries}
    ranked = analyze_bridges(summaries)
    for bridge in ranked[:limit] if limit else ranked:
        typer.echo(
            f"{bridge.strength:.2f}\t{bridge.bridge_type}\t"
            f"{names[bridge.source_id]} <-> {names[bridge.target_id]}\t{bridge.persuasion_vector}"
        )


@app.command("batch")
def batch_cli(
    input_path: Path = typer.Option(
        ...,
        "--input",
        "-i",
        exists=True,
        readable=True,
        resolve_path=True,
        help="JSONL file with one simulation snapshot per line.",
    ),
    output_path: Path = typer.Option(
        ...,
        "--output",
        "-o",
        resolve_path=True,
        help="Destination JSONL file of projections.",
    ),
    simulation_id: Optional[str] = typer.Option(
        None,
        "--simulation-id",
        help="Project only the snapshot with this id.",
    ),
    bridges: bool = typer.Option(True, "--bridges/--no-bridges", help="Compute opinion bridges."),
    iterations: int = typer.Option(50, "--iterations", min=0, help="Layout relaxation rounds."),
) -> None:
    """Project every snapshot of a JSONL file."""
    rows = read_jsonl(input_path)
    if simulation_id is not None:
        try:
            rows = [find_simulation(rows, simulation_id)]
        except SimulationNotFoundError as exc:
            logger.error("batch:not_found | simulation={}", simulation_id)
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=1) from exc

    settings = _settings(iterations, bridges)
    payloads = [project_simulation(Simulation.model_validate(row), settings).to_payload() for row in rows]
    write_jsonl(output_path, payloads)
    typer.echo(f"Wrote {len(payloads)} projections to {output_path}")


@app.command("synth-sim")
def synth_sim_cli(
    output_path: Path = typer.Option(
        ...,
        "--output",
        "-o",
        file_okay=True,
        dir_okay=False,
        writable=True,
        resolve_path=True,
        help="Destination JSON file.",
    ),
    clusters: int = typer.Option(4, "--clusters", "-k", min=1, help="Number of clusters."),
    agents: int = typer.Option(40, "--agents", "-n", min=0, help="Number of agents."),
    seed: int = typer.Option(13, "--seed", help="Seed for deterministic generation."),
) -> None:
    """Generate a synthetic simulation snapshot."""
    try:
        write_simulation(output_path, clusters=clusters, agents=agents, seed=seed)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(f"Wrote synthetic simulation with {agents} agents to {output_path}")


def run() -> None:
    """Entrypoint when invoking via `python -m` or the console script."""
    app()


if __name__ == "__main__":
    run()
