from __future__ import annotations

from pathlib import Path

import click

from invtrack.infrastructure.cli.product_commands import (
    product_add,
    product_delete,
    product_history,
    product_list,
    product_next_code,
    product_search,
    product_show,
    product_update,
)
from invtrack.infrastructure.config import Config
from invtrack.infrastructure.logging_setup import setup_logging


@click.group()
@click.option(
    "--env-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Load settings from this .env file.",
)
@click.option("--debug", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, env_file: Path | None, debug: bool) -> None:
    """invtrack — product inventory and price history"""
    try:
        config = Config.from_env(env_file)
        config.validate()
    except ValueError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}")

    setup_logging(config.log_level, debug)
    ctx.obj = config


@cli.group()
def product() -> None:
    """Manage products."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_delete)
product.add_command(product_history)
product.add_command(product_list)
product.add_command(product_next_code)
product.add_command(product_search)
product.add_command(product_show)
product.add_command(product_update)
