"""Portfolio commands: stats, impact, validate, to-waqf."""

from __future__ import annotations

import sys

import click

from waqf_engine.core.cli.common import echo_json, read_json
from waqf_engine.portfolio.models import Portfolio


def _load_portfolio(portfolio_file) -> Portfolio:
    data = read_json(portfolio_file)
    try:
        return Portfolio.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise click.ClickException(f"Invalid portfolio: {e}") from e


@click.command()
@click.argument("portfolio_file", type=click.File("r"))
def stats(portfolio_file) -> None:
    """Instrument mix, diversification, risk and liquidity of a portfolio."""
    from waqf_engine.portfolio.calculators.stats import calculate_portfolio_stats

    echo_json(calculate_portfolio_stats(_load_portfolio(portfolio_file)).to_dict())


@click.command()
@click.argument("portfolio_file", type=click.File("r"))
@click.option("--cost", type=float, default=None, help="Average cost per beneficiary (default from config).")
@click.pass_obj
def impact(engine_config, portfolio_file, cost: float | None) -> None:
    """Projected beneficiaries over 1, 5, 10 years and a lifetime."""
    from waqf_engine.portfolio.calculators.impact import ImpactAssumptions, calculate_impact_projection

    projection = calculate_impact_projection(
        _load_portfolio(portfolio_file),
        average_beneficiary_cost=cost if cost is not None else engine_config.impact.average_beneficiary_cost,
        assumptions=ImpactAssumptions.from_config(engine_config.impact),
    )
    echo_json(projection.to_dict())


@click.command()
@click.argument("portfolio_file", type=click.File("r"))
@click.option("--submission", is_flag=True, help="Also enforce the minimum submission amount.")
@click.pass_obj
def validate(engine_config, portfolio_file, submission: bool) -> None:
    """Check a portfolio's allocations. Exits 1 when invalid."""
    from waqf_engine.portfolio.validation import validate_for_submission, validate_portfolio

    portfolio = _load_portfolio(portfolio_file)
    if submission:
        result = validate_for_submission(portfolio, engine_config.limits.min_portfolio_amount)
    else:
        result = validate_portfolio(portfolio)

    echo_json(result.to_dict())
    if not result.is_valid:
        sys.exit(1)


@click.command("to-waqf")
@click.argument("portfolio_file", type=click.File("r"))
@click.option("--user-id", required=True, help="Creator of the waqf.")
@click.option("--lock-months", type=int, default=12, show_default=True, help="Lock period for revolving principal.")
def to_waqf(portfolio_file, user_id: str, lock_months: int) -> None:
    """Map a confirmed portfolio to a waqf profile in the store's format."""
    from waqf_engine.waqf.mapper import portfolio_to_waqf_profile
    from waqf_engine.waqf.wire import waqf_profile_to_wire

    profile = portfolio_to_waqf_profile(_load_portfolio(portfolio_file), user_id, lock_period_months=lock_months)
    echo_json(waqf_profile_to_wire(profile))
