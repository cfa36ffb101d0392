"""CLI commands for the customer directory."""

from __future__ import annotations

import click

from storeops.domain.exceptions import DomainException


@click.command("search")
@click.argument("query")
@click.option("--limit", default=10, show_default=True, type=click.IntRange(min=1))
@click.pass_obj
def customer_search(container, query: str, limit: int) -> None:
    """Find active registered customers by name or email."""
    try:
        customers = container.search_customers().handle(query, limit)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not customers:
        click.echo("No customers found.")
        return

    for c in customers:
        click.echo(f"{c.user_id:<8} {c.name:<28} {c.contact}")
