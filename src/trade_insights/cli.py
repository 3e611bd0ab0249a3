"""CLI entry point for the trade insights engine."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import click


def _load_trades(path: Path) -> list[Any]:
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise click.BadParameter(f"{path} is not valid JSON: {exc}") from exc
    if isinstance(data, dict) and "trades" in data:
        data = data["trades"]
    if not isinstance(data, list):
        raise click.BadParameter(f"{path} must contain a JSON array of trades")
    return data


def _parse_as_of(value: str | None) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise click.BadParameter(f"--as-of must be ISO-8601, got {value!r}") from exc


def _bootstrap(config: str | None, log_level: str | None):
    from .core.config import load_settings
    from .core.errors import ConfigError
    from .observability.logger import new_trace_id, setup_logging

    try:
        settings = load_settings(config)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    setup_logging(
        level=log_level or settings.observability.log_level,
        format=settings.observability.log_format,
    )
    new_trace_id()
    return settings


@click.group()
def main() -> None:
    """Trading journal analytics."""


@main.command()
@click.argument("trades_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--config", default=None, help="Config file path (TOML)")
@click.option("--as-of", "as_of", default=None, help="Reference time (ISO-8601), default now")
@click.option("--pretty", is_flag=True, help="Indent the JSON output")
@click.option("--log-level", default=None, help="Override the configured log level")
def analyze(
    trades_file: Path,
    config: str | None,
    as_of: str | None,
    pretty: bool,
    log_level: str | None,
) -> None:
    """Print the insights report for a JSON file of trades."""
    from .journal.engine import InsightsEngine
    from .observability.logger import get_logger

    settings = _bootstrap(config, log_level)
    trades = _load_trades(trades_file)
    engine = InsightsEngine(settings.engine)
    report = engine.analyze(trades, as_of=_parse_as_of(as_of))
    get_logger(__name__).info(
        "report_generated",
        records=len(trades),
        data_status=report.data_status.value,
    )
    click.echo(report.to_json(indent=2 if pretty else None))


@main.command()
@click.argument("trades_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--config", default=None, help="Config file path (TOML)")
@click.option("--as-of", "as_of", default=None, help="Reference time (ISO-8601), default now")
def sentiment(trades_file: Path, config: str | None, as_of: str | None) -> None:
    """Print the trader's recent long/short sentiment."""
    from .journal.sentiment import generate_market_sentiment
    from .journal.window import build_window

    _bootstrap(config, None)
    window = build_window(_load_trades(trades_file), as_of=_parse_as_of(as_of))
    click.echo(generate_market_sentiment(window).model_dump_json(indent=2))


if __name__ == "__main__":
    main()
