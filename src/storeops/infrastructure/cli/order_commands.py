"""CLI commands for the online Order worklist."""

from __future__ import annotations

import click

from storeops.application.dto import OrderDTO
from storeops.domain.exceptions import DomainException


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.order_number}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_name}")
    click.echo(f"Delivery: {dto.delivery_type}    Payment: {dto.payment_method or '-'}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*51}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<24} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*51}")
    click.echo(f"  {'Order Total':<31} {dto.total:>20}")
    if dto.allowed_next:
        click.echo(f"Next: {', '.join(dto.allowed_next)}")


@click.command("list")
@click.option("--status", default=None, help="Only orders in this status.")
@click.option("--delivery", "delivery_type", default=None,
              type=click.Choice(["pickup", "delivery", "express"]),
              help="Only orders with this delivery type.")
@click.pass_obj
def order_list(container, status: str | None, delivery_type: str | None) -> None:
    """List online orders."""
    try:
        orders = container.list_orders().handle(status=status, delivery_type=delivery_type)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'Number':<14} {'Customer':<22} {'Delivery':<10} {'Status':<18} {'Total':>10}")
    click.echo("-" * 78)
    for o in orders:
        click.echo(
            f"{o.order_number:<14} {o.customer_name:<22} {o.delivery_type:<10} {o.status:<18} {o.total:>10}"
        )


@click.command("summary")
@click.pass_obj
def order_summary(container) -> None:
    """Show order counts and completed revenue."""
    try:
        dto = container.list_orders().summary()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Pending:     {dto.pending}")
    click.echo(f"In progress: {dto.in_progress}")
    click.echo(f"Completed:   {dto.completed}")
    click.echo(f"Cancelled:   {dto.cancelled}")
    click.echo(f"Revenue:     {dto.completed_revenue}")


@click.command("show")
@click.argument("order_id")
@click.pass_obj
def order_show(container, order_id: str) -> None:
    """Show details of an order."""
    try:
        dto = container.show_order().handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


def _run_transition(container, action: str, order_id: str, *args: str) -> None:
    handler = container.update_order_status()
    try:
        dto = getattr(handler, action)(order_id, *args)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.order_number} is now {dto.status}")


@click.command("status")
@click.argument("order_id")
@click.argument("new_status")
@click.option("--notes", default="", help="Notes stored with the change.")
@click.pass_obj
def order_status(container, order_id: str, new_status: str, notes: str) -> None:
    """Move an order to NEW_STATUS."""
    _run_transition(container, "handle", order_id, new_status, notes)


@click.command("confirm")
@click.argument("order_id")
@click.option("--notes", default="", help="Notes stored with the change.")
@click.pass_obj
def order_confirm(container, order_id: str, notes: str) -> None:
    """Confirm a pending order."""
    _run_transition(container, "confirm", order_id, notes)


@click.command("advance")
@click.argument("order_id")
@click.option("--notes", default="", help="Notes stored with the change.")
@click.pass_obj
def order_advance(container, order_id: str, notes: str) -> None:
    """Move an order one step forward."""
    _run_transition(container, "advance", order_id, notes)


@click.command("deliver")
@click.argument("order_id")
@click.option("--notes", default="", help="Notes stored with the change.")
@click.pass_obj
def order_deliver(container, order_id: str, notes: str) -> None:
    """Mark a shipped order as delivered."""
    _run_transition(container, "deliver", order_id, notes)


@click.command("pickup")
@click.argument("order_id")
@click.option("--notes", default="", help="Notes stored with the change.")
@click.pass_obj
def order_pickup(container, order_id: str, notes: str) -> None:
    """Mark a pickup order as collected."""
    _run_transition(container, "pickup", order_id, notes)


@click.command("cancel")
@click.argument("order_id")
@click.option("--reason", required=True, help="Why the order is cancelled.")
@click.pass_obj
def order_cancel(container, order_id: str, reason: str) -> None:
    """Cancel an order that has not been completed."""
    _run_transition(container, "cancel", order_id, reason)


@click.command("search")
@click.argument("term")
@click.option("--by", default="number", show_default=True,
              type=click.Choice(["number", "customer", "product"]),
              help="Match TERM against the order number, customer or product name.")
@click.pass_obj
def order_search(container, term: str, by: str) -> None:
    """Search online orders."""
    try:
        orders = container.list_orders().search(term, by=by)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not orders:
        click.echo("No orders found.")
        return

    for o in orders:
        click.echo(f"{o.order_number:<14} {o.customer_name:<22} {o.status:<18} {o.total:>10}")


@click.command("transfers")
@click.pass_obj
def order_transfers(container) -> None:
    """List online orders waiting for transfer confirmation."""
    try:
        orders = container.confirm_order_transfer().pending()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not orders:
        click.echo("No pending transfers.")
        return

    for o in orders:
        click.echo(f"{o.id:<6} {o.order_number:<14} {o.customer_name:<22} {o.total:>10}")


@click.command("confirm-transfer")
@click.argument("order_id")
@click.option("--bank-ref", default="", help="Bank reference of the transfer.")
@click.option("--notes", default="", help="Reviewer notes.")
@click.pass_obj
def order_confirm_transfer(container, order_id: str, bank_ref: str, notes: str) -> None:
    """Confirm that an online order's transfer reached the bank."""
    try:
        dto = container.confirm_order_transfer().handle(
            container.actor, order_id, bank_reference=bank_ref, notes=notes
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Transfer for order #{dto.order_number} confirmed  (status={dto.status})")
