"""sluice CLI entry point."""

import click


@click.group()
def cli():
    """sluice — rule-chain payload validation CLI."""
    pass


# Register subcommands
from sluice.cli.check_cmd import check  # noqa: E402

cli.add_command(check)
