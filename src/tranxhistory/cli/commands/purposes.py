"""Purpose listing command."""

import click

from tranxhistory.domain.entities import TranxPurpose


@click.command("purposes")
def list_purposes():
    """List the purpose codes a transaction can carry."""
    for purpose in sorted(TranxPurpose):
        click.echo(f"{purpose.code:<10} {purpose.label}")


def register_commands(cli):
    """Register purposes command with main CLI."""
    cli.add_command(list_purposes)
