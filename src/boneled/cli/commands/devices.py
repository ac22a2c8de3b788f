"""Device registry commands."""

from pathlib import Path
from typing import Optional

import click

from boneled.exceptions import BoneLedError
from boneled.framework import DeviceRegistry
from boneled.models import AppConfig


@click.group(name="devices")
def devices_group():
    """Inspect stored device records."""
    pass


@devices_group.command(name="list")
@click.option(
    '--config',
    '-c',
    'config_path',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Config file whose registry_path is used (default: ~/.boneled/config.json)'
)
@click.option(
    '--registry',
    '-r',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Registry file (default: registry_path from the config)'
)
def list_devices(config_path: Optional[Path], registry: Optional[Path]):
    """List device records stored in the registry."""
    try:
        path = registry or AppConfig.load_or_default(config_path).registry_path
        if path is None:
            raise click.ClickException("The configuration keeps device records in memory only.")
        records = DeviceRegistry(path).records()
    except BoneLedError as e:
        raise click.ClickException(e.get_full_message()) from e

    if not records:
        click.echo(f"No devices stored in {path}")
        return

    click.echo(f"Devices in {path}:\n")
    for record in records:
        pin = record.properties.get("pin", "-")
        click.echo(f"  {record.id}  {record.type:<16} pin={pin:<6} state={record.state}")
