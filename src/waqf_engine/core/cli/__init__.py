"""waqf-engine CLI: run the engine's calculations over JSON files."""

import click

from waqf_engine import __version__

from .common import load_engine_config


@click.group()
@click.version_option(version=__version__, package_name="waqf-engine")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False), help="YAML or JSON config file.")
@click.option("--log-level", default=None, help="Override logging.level (DEBUG, INFO, WARNING, ...).")
@click.pass_context
def main(ctx: click.Context, config_file: str | None, log_level: str | None) -> None:
    """Waqf engine: portfolio allocation and waqf lifecycle calculations."""
    ctx.obj = load_engine_config(config_file, log_level)


from .portfolio_cmd import impact, stats, to_waqf, validate
from .waqf_cmd import completion, contribution

main.add_command(stats)
main.add_command(impact)
main.add_command(validate)
main.add_command(to_waqf)
main.add_command(contribution)
main.add_command(completion)
