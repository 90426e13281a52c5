"""Ledger bounds command."""

import click


@click.command("extrema")
@click.pass_context
def show_extrema(ctx):
    """Show the earliest and latest moments and the smallest and largest amounts."""
    bounds = ctx.obj["history"].extrema
    if bounds is None:
        click.echo("Ledger is empty.")
        return

    click.echo(f"Earliest: {bounds.min_moment}")
    click.echo(f"Latest:   {bounds.max_moment}")
    click.echo(f"Smallest: {bounds.min_amount}")
    click.echo(f"Largest:  {bounds.max_amount}")


def register_commands(cli):
    """Register extrema command with main CLI."""
    cli.add_command(show_extrema)
