"""CLI commands for reviewing transfer-paid sales."""

from __future__ import annotations

import click

from storeops.domain.exceptions import DomainException


@click.command("pending")
@click.pass_obj
def transfer_pending(container) -> None:
    """List sales waiting for transfer confirmation."""
    try:
        sales = container.pending_transfers().handle()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not sales:
        click.echo("No transfers awaiting confirmation.")
        return

    click.echo(f"{'ID':<8} {'Number':<14} {'Customer':<22} {'Voucher':<16} {'Total':>10}")
    click.echo("-" * 74)
    for s in sales:
        click.echo(
            f"{s.id:<8} {s.sale_number or '-':<14} {s.customer:<22} "
            f"{s.voucher_ref or '-':<16} {s.total:>10}"
        )
    click.echo(f"\n{len(sales)} pending")


@click.command("confirm")
@click.argument("sale_id")
@click.option("--notes", default="", help="Reviewer notes.")
@click.pass_obj
def transfer_confirm(container, sale_id: str, notes: str) -> None:
    """Confirm that a transfer reached the bank (administrators only)."""
    try:
        dto = container.confirm_transfer().handle(container.actor, sale_id, notes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Sale #{dto.sale_number or dto.id} transfer confirmed  (status={dto.status})")
