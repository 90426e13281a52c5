"""Add transaction command."""

import time

import click

from tranxhistory.cli.error_handling import handle_domain_error
from tranxhistory.domain.amount import Amount
from tranxhistory.domain.entities import Direction, TranxPurpose
from tranxhistory.domain.errors import DomainError, StoreError
from tranxhistory.logging_setup import get_logger
from tranxhistory.utils.date_parser import parse_moment

logger = get_logger(__name__)


@click.command("add")
@click.option("--amount", required=True, help="Amount as CURRENCY:VALUE (e.g., EUR:12.50)")
@click.option(
    "--direction",
    type=click.Choice(["incoming", "outgoing"], case_sensitive=False),
    required=True,
    help="Whether money came into or left the wallet",
)
@click.option("--purpose", help="Purpose code (see 'tranxhistory purposes')")
@click.option(
    "--at",
    "moment",
    default="now",
    show_default=True,
    help="Transaction moment (ISO-8601, YYYY-MM-DD, or relative like 'yesterday')",
)
@click.option("--tid", help="Transaction identity (auto-generated if not provided)")
@click.pass_context
def add_transaction(
    ctx,
    amount: str,
    direction: str,
    purpose: str | None,
    moment: str,
    tid: str | None,
):
    """Record a transaction in the ledger.

    Examples:
        tranxhistory add --amount EUR:12.50 --direction outgoing --purpose EXPN_GRCR
        tranxhistory add --amount KES:1000 --direction incoming --at 2024-01-15
    """
    tranx_history = ctx.obj["history"]

    try:
        tranx_amount = Amount.from_json_string(amount)
    except DomainError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        tranx_moment = parse_moment(moment)
    except ValueError as e:
        click.echo(f"Error: Invalid moment: {e}", err=True)
        ctx.exit(1)

    tranx_purpose = None
    if purpose:
        tranx_purpose = TranxPurpose.lookup(purpose.strip().upper())
        if tranx_purpose is None:
            click.echo(f"Error: Unknown purpose code '{purpose}'", err=True)
            ctx.exit(1)

    if tid is None:
        tid = f"manual_{int(time.time() * 1000000)}"

    try:
        tranx = tranx_history.new_transaction(
            tid=tid,
            purpose=tranx_purpose,
            amount=tranx_amount,
            direction=Direction.parse(direction),
            moment=tranx_moment,
        )
    except (DomainError, StoreError) as e:
        handle_domain_error(ctx, e)

    logger.info("recorded transaction %s as row %s", tranx.tid, tranx.id)
    click.echo(f"Created transaction {tranx.id}")
    click.echo(f"  Identity: {tranx.tid}")
    click.echo(f"  Moment: {tranx.moment}")
    click.echo(f"  Amount: {tranx.amount}")
    click.echo(f"  Direction: {tranx.direction.name.lower()}")
    if tranx.purpose is not None:
        click.echo(f"  Purpose: {tranx.purpose.code} ({tranx.purpose.label})")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
