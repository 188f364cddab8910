"""Waqf commands: contribution, completion."""

from __future__ import annotations

import click

from waqf_engine.core.cli.common import echo_json, read_json
from waqf_engine.core.exceptions import WireFormatError
from waqf_engine.waqf.models import WaqfProfile


def _load_waqf(waqf_file) -> WaqfProfile:
    from waqf_engine.waqf.wire import waqf_profile_from_wire

    try:
        return waqf_profile_from_wire(read_json(waqf_file))
    except WireFormatError as e:
        raise click.ClickException(str(e)) from e


@click.command()
@click.argument("waqf_file", type=click.File("r"))
@click.argument("amount", type=float)
@click.pass_obj
def contribution(engine_config, waqf_file, amount: float) -> None:
    """Check whether a consumable waqf can accept AMOUNT."""
    from waqf_engine.waqf.contributions import can_accept_contribution

    result = can_accept_contribution(
        _load_waqf(waqf_file),
        amount,
        min_contribution=engine_config.limits.min_contribution,
    )
    echo_json(result.to_dict())


@click.command()
@click.argument("waqf_file", type=click.File("r"))
def completion(waqf_file) -> None:
    """Completion status and progress of a consumable waqf."""
    from waqf_engine.waqf.completion import get_completion_status, next_status

    waqf = _load_waqf(waqf_file)
    result = get_completion_status(waqf).to_dict()
    result["status"] = next_status(waqf).value
    echo_json(result)
