"""Configuration command."""

from pathlib import Path
from typing import Optional

import click

from boneled.exceptions import BoneLedError
from boneled.models import AppConfig


@click.command()
@click.option(
    '--config',
    '-c',
    'config_path',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Config file (default: ~/.boneled/config.json)'
)
def config(config_path: Optional[Path]):
    """Show the effective configuration as JSON."""
    try:
        app_config = AppConfig.load_or_default(config_path)
    except BoneLedError as e:
        raise click.ClickException(e.get_full_message()) from e

    click.echo(app_config.model_dump_json(indent=2))
