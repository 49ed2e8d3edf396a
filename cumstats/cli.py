# SPDX-License-Identifier: MIT
"""Command line interface: ``cumstats compute``.

Reads one numeric column from a CSV file, runs a cumulative statistic over it
and writes the result as CSV. Progress goes to stderr so stdout carries only
data when no ``--output`` is given.
"""
from __future__ import annotations

import hashlib
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Tuple

import click
import pandas as pd

from .config import ConfigError as SettingsError
from .config import CumStatsSettings, load_settings
from .indicators.errors import CumulativeStatsError
from .indicators.features import BatchCumulativeStatsFeature, CumulativeStatFeature
from .utils.logging import configure_logging, get_logger
from .utils.metrics import get_metrics_collector

STATISTIC_CHOICES = ("batch", "sum", "prod", "min", "max", "mean")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_logger = get_logger(__name__)


class CLIError(click.ClickException):
    """Base class for typed CLI failures with deterministic exit codes."""

    exit_code = 1


class ConfigError(CLIError):
    exit_code = 2


class ComputeError(CLIError):
    exit_code = 4


@contextmanager
def step_logger(command: str, name: str) -> Iterator[None]:
    """Emit start/stop step lines on stderr."""

    click.echo(f"[{command}] ▶ {name}", err=True)
    start = time.perf_counter()
    try:
        yield
    except Exception:
        duration = time.perf_counter() - start
        click.echo(f"[{command}] ✖ {name} ({duration:.2f}s)", err=True)
        raise
    else:
        duration = time.perf_counter() - start
        click.echo(f"[{command}] ✓ {name} ({duration:.2f}s)", err=True)


def _hash_bytes(payload: bytes) -> str:
    return hashlib.sha256(payload).hexdigest()


def _write_bytes(destination: Path, payload: bytes, *, command: str) -> Tuple[str, bool]:
    digest = _hash_bytes(payload)
    if destination.exists() and _hash_bytes(destination.read_bytes()) == digest:
        click.echo(f"[{command}] • {destination} unchanged (sha256={digest})", err=True)
        return digest, False
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(payload)
    click.echo(f"[{command}] • wrote {destination} (sha256={digest})", err=True)
    return digest, True


def _load_settings(config_path: Path | None) -> CumStatsSettings:
    try:
        return load_settings(config_path)
    except SettingsError as exc:
        raise ConfigError(str(exc)) from exc


def _read_series(path: Path, column: str) -> pd.Series:
    if path.suffix.lower() not in {".csv", ""}:
        raise ConfigError(f"Unsupported input format '{path.suffix}'")
    frame = pd.read_csv(path)
    if column not in frame.columns:
        available = ", ".join(map(str, frame.columns)) or "<none>"
        raise ConfigError(f"Column '{column}' not found in {path} (available: {available})")
    try:
        return pd.to_numeric(frame[column], errors="raise").astype(float)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Column '{column}' must be numeric: {exc}") from exc


def _compute(
    series: pd.Series,
    statistic: str,
    initial_value: float | None,
    chunk_size: int,
) -> pd.DataFrame:
    if statistic == "batch":
        feature = BatchCumulativeStatsFeature(
            0.0 if initial_value is None else initial_value,
            chunk_size=chunk_size,
        )
        return feature.transform_with_metrics(series).value
    single = CumulativeStatFeature(statistic, initial_value)
    result = single.transform_with_metrics(series)
    return pd.DataFrame({result.name: result.value}, index=series.index)


@click.group()
def cli() -> None:
    """Vectorized cumulative statistics."""


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--column", required=True, help="Numeric column to accumulate.")
@click.option(
    "--stat",
    "statistic",
    type=click.Choice(STATISTIC_CHOICES),
    default="batch",
    show_default=True,
    help="Statistic to compute; 'batch' emits all five columns.",
)
@click.option(
    "--initial-value",
    type=float,
    default=None,
    help="Offset (or product seed). Defaults to 1.0 for prod and 0.0 otherwise.",
)
@click.option("--chunk-size", type=click.IntRange(min=1), default=None, help="Batch block length.")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Destination CSV file (stdout when omitted).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML configuration file.",
)
@click.option("--log-level", type=click.Choice(LOG_LEVELS, case_sensitive=False), default=None)
def compute(
    input_path: Path,
    column: str,
    statistic: str,
    initial_value: float | None,
    chunk_size: int | None,
    output: Path | None,
    config_path: Path | None,
    log_level: str | None,
) -> None:
    """Compute cumulative statistics over one CSV column."""

    command = "compute"
    settings = _load_settings(config_path)
    configure_logging(
        (log_level or settings.logging.level).upper(),
        use_json=settings.logging.use_json,
    )
    get_metrics_collector().set_enabled(settings.metrics.enabled)

    with step_logger(command, f"load {input_path.name}"):
        series = _read_series(input_path, column)

    try:
        with step_logger(command, f"compute {statistic}"):
            frame = _compute(
                series,
                statistic,
                initial_value,
                chunk_size or settings.batch.chunk_size,
            )
    except CumulativeStatsError as exc:
        raise ComputeError(str(exc)) from exc

    _logger.info("compute_finished", statistic=statistic, rows=len(frame), column=column)
    payload = frame.to_csv(index=False).encode("utf-8")
    if output is None:
        click.echo(payload.decode("utf-8"), nl=False)
        return
    with step_logger(command, f"write {output.name}"):
        _write_bytes(output, payload, command=command)


def main() -> None:
    cli(prog_name="cumstats")


if __name__ == "__main__":  # pragma: no cover
    main()
