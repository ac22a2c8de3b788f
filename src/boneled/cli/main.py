"""Main CLI entry point."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from boneled import __version__
from boneled.models import GpioBackend

from .commands import config, devices_group

logger = logging.getLogger(__name__)


def resolve_log_path(debug: bool, log_file: Optional[Path]) -> Path:
    """Where log records go for the given flags."""
    if log_file:
        return log_file
    if debug:
        # Debug mode: log to current directory
        return Path.cwd() / "boneled-debug.log"
    return Path.home() / ".boneled" / "logs" / "boneled.log"


def setup_logging(verbose: int, debug: bool, log_file: Optional[Path], log_level: str) -> None:
    """
    Configure logging for the application.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: If True, enable debug mode with file logging in the current directory
        log_file: Custom log file path (optional)
        log_level: Log level for file logging (DEBUG/INFO/WARNING/ERROR)
    """
    if debug or verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Override with explicit log level if provided
    if log_file:
        level = getattr(logging, log_level.upper())

    log_path = resolve_log_path(debug, log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Create rotating file handler (keeps last 5 files, max 10MB each)
    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    # The server has no UI of its own, so records also go to stderr
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(stream_handler)

    logger.info(f"Logging configured: level={logging.getLevelName(level)}, file={log_path}")


@click.group(invoke_without_command=True)
@click.pass_context
@click.version_option(version=__version__, prog_name="boneled")
@click.option(
    '--config',
    '-c',
    'config_path',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Config file (default: ~/.boneled/config.json, used if present)'
)
@click.option(
    '--pin',
    '-p',
    'pins',
    multiple=True,
    help='Header pin to drive as an LED; repeat for more (default: P9_12 P9_11)'
)
@click.option('--host', type=str, default=None, help='Address to listen on (default: 127.0.0.1)')
@click.option('--port', type=int, default=None, help='Port to listen on (default: 1337)')
@click.option(
    '--backend',
    type=click.Choice([b.value for b in GpioBackend], case_sensitive=False),
    default=None,
    help='GPIO backend: bbio on the board, memory to run without hardware'
)
@click.option(
    '--registry',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Device registry file (default: ~/.boneled/registry.json)'
)
@click.option(
    '--ephemeral',
    is_flag=True,
    help='Keep device records in memory only'
)
@click.option(
    '-v', '--verbose',
    count=True,
    help='Increase verbosity (-v: INFO, -vv: DEBUG)'
)
@click.option(
    '--debug',
    is_flag=True,
    help='Enable debug mode (DEBUG level, logs to ./boneled-debug.log)'
)
@click.option(
    '--log-file',
    type=click.Path(path_type=Path),
    default=None,
    help='Custom log file path'
)
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    default='INFO',
    help='Log level for file logging (default: INFO)'
)
def cli(
    ctx,
    config_path: Optional[Path],
    pins: tuple[str, ...],
    host: Optional[str],
    port: Optional[int],
    backend: Optional[str],
    registry: Optional[Path],
    ephemeral: bool,
    verbose: int,
    debug: bool,
    log_file: Optional[Path],
    log_level: str
):
    """
    BeagleBone LED server - GPIO pins as on/off devices over HTTP.

    On startup every configured pin gets one LED device: a stored record
    for the pin is reattached, otherwise a new device is created. Devices
    are then switched through the HTTP API.

    \b
    Examples:
      # Serve P9_12 and P9_11 on port 1337
      boneled

      # Other pins, other port
      boneled -p P8_10 -p P8_12 --port 8080

      # Run on a workstation without hardware
      boneled --backend memory --ephemeral -v

      # Switch a device on
      curl -X POST -d action=turn-on http://127.0.0.1:1337/devices/<id>

      # List stored devices
      boneled devices list
    """
    # If a subcommand was invoked, don't run the server
    if ctx.invoked_subcommand is not None:
        return

    from boneled.app import run
    from boneled.exceptions import format_error_for_display, wrap_pydantic_error
    from boneled.models import AppConfig

    setup_logging(verbose, debug, log_file, log_level)
    log_path = resolve_log_path(debug, log_file)

    logger.info("Starting BeagleBone LED server")

    try:
        config_obj = AppConfig.load_or_default(config_path)

        overrides = {
            "pins": list(pins) or None,
            "host": host,
            "port": port,
            "backend": backend,
            "registry_path": registry,
        }
        merged = {**config_obj.model_dump(), **{k: v for k, v in overrides.items() if v is not None}}
        if ephemeral:
            merged["registry_path"] = None

        try:
            config_obj = AppConfig.model_validate(merged)
        except ValidationError as e:
            raise wrap_pydantic_error(e, "command line options") from e

        run(config_obj)

    except KeyboardInterrupt:
        logger.info("Server interrupted by user")
        click.echo("\nShutting down...", err=True)
    except Exception as e:
        logger.exception("Error running server")

        user_message, recovery_hint = format_error_for_display(e)

        click.echo("\n" + "="*70, err=True)
        click.echo(f"ERROR: {user_message}", err=True)
        click.echo("="*70, err=True)

        if recovery_hint:
            click.echo(f"\n{recovery_hint}", err=True)

        click.echo(f"\nFor details, check the log file: {log_path}", err=True)
        sys.exit(1)


cli.add_command(config)
cli.add_command(devices_group)

if __name__ == "__main__":
    cli()
