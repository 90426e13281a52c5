"""Transaction history viewing command."""

from datetime import date

import click

from tranxhistory.cli.error_handling import handle_domain_error
from tranxhistory.database import schema
from tranxhistory.domain.amount import Amount
from tranxhistory.domain.entities import Direction, TranxPurpose
from tranxhistory.domain.errors import DomainError, StoreError
from tranxhistory.domain.filters import (
    AmountOneOf,
    AmountRange,
    DatetimeRange,
    DirectionExact,
    PurposeExact,
    PurposeOneOf,
    TranxFilter,
)
from tranxhistory.logging_setup import get_logger
from tranxhistory.utils.date_parser import day_bounds, parse_date

logger = get_logger(__name__)


def _date_filter(ctx, start_date: str | None, end_date: str | None) -> DatetimeRange | None:
    """Build an inclusive whole-day range; an open side extends to the calendar limit."""
    if not start_date and not end_date:
        return None

    start = date.min
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    end = date.max
    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    return DatetimeRange(*day_bounds(start, end))


def _amount_filter(
    ctx, amounts: tuple[str, ...], min_amount: str | None, max_amount: str | None
) -> AmountOneOf | AmountRange | None:
    if amounts and (min_amount or max_amount):
        click.echo("Error: --amount cannot be combined with --min-amount/--max-amount", err=True)
        ctx.exit(1)

    try:
        if amounts:
            return AmountOneOf(Amount.from_json_string(a) for a in amounts)
        if not min_amount and not max_amount:
            return None
        low = Amount.from_json_string(min_amount) if min_amount else None
        high = Amount.from_json_string(max_amount) if max_amount else None
    except DomainError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    if low is None:
        low = Amount.zero(high.currency)
    if high is None:
        high = Amount.from_scalar(low.currency, schema.MAX_STORED_AMOUNT)
    return AmountRange(low, high)


@click.command("history")
@click.option(
    "--direction",
    type=click.Choice(["incoming", "outgoing"], case_sensitive=False),
    help="Only show transactions in this direction",
)
@click.option("--purpose", multiple=True, help="Purpose code; repeat to match any of several")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date, inclusive (YYYY-MM-DD)")
@click.option("--amount", "amounts", multiple=True, help="Exact CURRENCY:VALUE; repeatable")
@click.option("--min-amount", help="Lower amount bound as CURRENCY:VALUE")
@click.option("--max-amount", help="Upper amount bound as CURRENCY:VALUE")
@click.option("--verbose", "-v", is_flag=True, help="Show identity and purpose label of each entry")
@click.pass_context
def view_history(
    ctx,
    direction: str | None,
    purpose: tuple[str, ...],
    start_date: str | None,
    end_date: str | None,
    amounts: tuple[str, ...],
    min_amount: str | None,
    max_amount: str | None,
    verbose: bool,
):
    """View ledger entries, oldest first, with optional filters.

    Examples:
        tranxhistory history --direction incoming
        tranxhistory history --purpose EXPN_GRCR --purpose EXPN_RENT --start-date "last month"
        tranxhistory history --min-amount EUR:10 --max-amount EUR:50
    """
    tranx_history = ctx.obj["history"]

    purposes = []
    for code in purpose:
        found = TranxPurpose.lookup(code.strip().upper())
        if found is None:
            click.echo(f"Error: Unknown purpose code '{code}'", err=True)
            ctx.exit(1)
        purposes.append(found)

    try:
        tranx_filter = TranxFilter(
            direction=DirectionExact(Direction.parse(direction)) if direction else None,
            purpose=(
                PurposeExact(purposes[0])
                if len(purposes) == 1
                else PurposeOneOf(purposes) if purposes else None
            ),
            datetime=_date_filter(ctx, start_date, end_date),
            amount=_amount_filter(ctx, amounts, min_amount, max_amount),
        )
        tranx_history.set_filter(tranx_filter)
        entries = tranx_history.get_history()
    except (DomainError, StoreError) as e:
        handle_domain_error(ctx, e)

    logger.debug("history query returned %d entries", len(entries))

    if not entries:
        click.echo("No transactions found.")
        return

    if verbose:
        click.echo(f"\nFound {len(entries)} transaction(s):")
        click.echo("=" * 80)
        for tranx in entries:
            click.echo(f"\nTransaction ID: {tranx.id}")
            click.echo(f"  Identity: {tranx.tid}")
            click.echo(f"  Moment: {tranx.moment}")
            click.echo(f"  Direction: {tranx.direction.name.lower()}")
            click.echo(f"  Amount: {tranx.amount}")
            if tranx.purpose is not None:
                click.echo(f"  Purpose: {tranx.purpose.code} ({tranx.purpose.label})")
            else:
                click.echo("  Purpose: -")
        return

    click.echo(f"{'ID':<6} {'Moment':<24} {'Dir':<4} {'Purpose':<10} {'Amount':>20}")
    click.echo("-" * 68)
    for tranx in entries:
        sign = "+" if tranx.direction.is_incoming else "-"
        code = tranx.purpose.code if tranx.purpose is not None else ""
        click.echo(
            f"{tranx.id:<6} {tranx.moment.strftime('%Y-%m-%d %H:%M:%S'):<24} "
            f"{sign:<4} {code:<10} {str(tranx.amount):>20}"
        )
    click.echo(f"\n{len(entries)} transaction(s)")


def register_commands(cli):
    """Register history command with main CLI."""
    cli.add_command(view_history)
