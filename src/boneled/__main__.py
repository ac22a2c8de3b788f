"""Main entry point for ``python -m boneled``."""

from boneled.cli.main import cli

if __name__ == "__main__":
    cli()
