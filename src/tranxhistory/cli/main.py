"""Main CLI entry point."""

import click

from tranxhistory.cli.commands import add, extrema, history, purposes
from tranxhistory.cli.error_handling import handle_domain_error
from tranxhistory.database.factories import DB_PATH_ENV, create_sqlite_store
from tranxhistory.domain.errors import StoreError
from tranxhistory.domain.history import TranxHistory
from tranxhistory.logging_setup import LOG_LEVEL_ENV, configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to ledger database file (overrides {DB_PATH_ENV} environment variable)",
    envvar=DB_PATH_ENV,
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    envvar=LOG_LEVEL_ENV,
    help="Diagnostic log level written to stderr",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """Tranxhistory - wallet transaction ledger.

    Record wallet transactions and browse them through filters on
    direction, purpose, moment and amount.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Open the ledger only when actually running a command (not for --help)
    if ctx.invoked_subcommand is not None and "history" not in ctx.obj:
        tranx_history = TranxHistory()
        try:
            tranx_history.init(lambda: create_sqlite_store(db_path))
        except StoreError as e:
            handle_domain_error(ctx, e)
        logger.info("opened ledger at %s", db_path or "default location")
        ctx.obj["history"] = tranx_history


add.register_commands(cli)
history.register_commands(cli)
extrema.register_commands(cli)
purposes.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
