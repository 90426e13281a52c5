"""CLI error handling helpers."""

import click

from tranxhistory.domain.errors import DomainError, StoreError
from tranxhistory.logging_setup import get_logger

logger = get_logger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | StoreError | ValueError) -> None:
    """Render a domain or store error and exit with failure."""
    logger.debug("command failed: %r", error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
