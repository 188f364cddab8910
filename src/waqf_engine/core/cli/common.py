"""Shared helpers for CLI commands."""

from __future__ import annotations

import json
from typing import IO, Any

import click

from waqf_engine.core.config import Config
from waqf_engine.core.config_schema import EngineConfig
from waqf_engine.core.exceptions import WaqfEngineError
from waqf_engine.core.utils.logging import configure_logging


def load_engine_config(config_file: str | None, log_level: str | None = None) -> EngineConfig:
    """Load and validate configuration, then configure logging from it."""
    try:
        config = Config(config_file=config_file)
        if log_level:
            config.set("logging.level", log_level)
        engine_config = config.validated()
    except WaqfEngineError as e:
        raise click.ClickException(str(e)) from e

    configure_logging(engine_config.logging)
    return engine_config


def read_json(stream: IO[str]) -> Any:
    """Parse a JSON document from an open file."""
    try:
        return json.load(stream)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON in {getattr(stream, 'name', 'input')}: {e}") from e


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))
