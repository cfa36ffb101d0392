"""CLI commands for building and checking out a point-of-sale cart."""

from __future__ import annotations

import click

from storeops.application.dto import CartDTO
from storeops.domain.exceptions import DomainException, RequestTimeout
from storeops.domain.model.customer import FinalConsumer
from storeops.domain.model.payment import CashPayment, TransferPayment
from storeops.domain.model.value_objects import Money


def _display_cart(dto: CartDTO) -> None:
    """Shared formatting for displaying the cart draft."""
    if not dto.items:
        click.echo("Cart is empty.")
        return

    click.echo(f"Customer: {dto.customer}")
    click.echo()
    click.echo(f"  {'SKU':<12} {'Product':<22} {'Qty':>5} {'Stock':>6} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*70}")
    for item in dto.items:
        flag = "  (no longer in catalog)" if item.stale else ""
        click.echo(
            f"  {item.sku:<12} {item.name:<22} {item.quantity:>5} {item.stock_snapshot:>6} "
            f"{item.unit_price:>10} {item.line_total:>10}{flag}"
        )
    click.echo(f"  {'-'*70}")
    click.echo(f"  {'Subtotal':<58} {dto.subtotal:>10}")
    if dto.discount != str(Money.zero()):
        click.echo(f"  {'Discount':<58} -{dto.discount:>9}")
    click.echo(f"  {'Total':<58} {dto.total:>10}")
    if dto.notes:
        click.echo(f"Notes: {dto.notes}")


@click.command("search")
@click.argument("query")
@click.option("--images", is_flag=True, default=False, help="Also show the primary image URL.")
@click.pass_obj
def sale_search(container, query: str, images: bool) -> None:
    """Search the catalog for products to sell."""
    search = container.catalog_search()

    try:
        products = search.lookup(query)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<8} {'SKU':<12} {'Name':<24} {'Price':>10} {'Stock':>6}")
    click.echo("-" * 64)
    for p in products:
        marker = "" if p.in_stock else "  out of stock"
        click.echo(
            f"{p.id:<8} {p.sku:<12} {p.name:<24} {str(p.unit_price):>10} {p.stock_quantity:>6}{marker}"
        )
        if images:
            image = search.primary_image(p.id)
            if image is not None:
                click.echo(f"{'':<8} {image.url}")


@click.command("add")
@click.argument("product")
@click.option("--qty", "quantity", default=1, show_default=True, type=click.IntRange(min=1),
              help="Units to add.")
@click.pass_obj
def sale_add(container, product: str, quantity: int) -> None:
    """Add a product (by SKU or ID) to the cart."""
    try:
        dto = container.add_to_cart().handle(product, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)


@click.command("qty")
@click.argument("product_id")
@click.argument("quantity", type=int)
@click.pass_obj
def sale_qty(container, product_id: str, quantity: int) -> None:
    """Set the quantity of a cart line (0 removes it)."""
    try:
        dto = container.edit_cart().update_quantity(product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)


@click.command("remove")
@click.argument("product_id")
@click.pass_obj
def sale_remove(container, product_id: str) -> None:
    """Remove a line from the cart."""
    try:
        dto = container.edit_cart().remove(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)


@click.command("discount")
@click.argument("amount")
@click.pass_obj
def sale_discount(container, amount: str) -> None:
    """Set the discount applied to the cart total."""
    try:
        dto = container.edit_cart().set_discount(amount)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)


@click.command("notes")
@click.argument("text")
@click.pass_obj
def sale_notes(container, text: str) -> None:
    """Attach notes to the sale."""
    try:
        dto = container.edit_cart().set_notes(text)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_cart(dto)


@click.command("customer")
@click.option("--user-id", default=None, help="Registered customer to attach.")
@click.option("--name", default="", help="Final-consumer name (optional).")
@click.option("--phone", default="", help="Final-consumer phone (optional).")
@click.option("--address", default="", help="Final-consumer address (optional).")
@click.pass_obj
def sale_customer(container, user_id: str | None, name: str, phone: str, address: str) -> None:
    """Set the buyer: a registered customer, or the final consumer (default)."""
    try:
        if user_id:
            buyer = container.search_customers().resolve(user_id)
        else:
            buyer = FinalConsumer(name=name.strip(), phone=phone.strip(), address=address.strip())
        dto = container.edit_cart().set_customer(buyer)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Customer set to {dto.customer}")


@click.command("show")
@click.pass_obj
def sale_show(container) -> None:
    """Show the current cart."""
    _display_cart(container.edit_cart().show())


@click.command("clear")
@click.pass_obj
def sale_clear(container) -> None:
    """Abandon the current cart."""
    container.edit_cart().clear()
    click.echo("Cart cleared.")


@click.command("checkout")
@click.option("--cash", "cash_received", default=None, help="Cash received from the customer.")
@click.option("--transfer", "voucher", default=None, help="Transfer voucher reference.")
@click.option("--bank-ref", default="", help="Bank reference of the transfer (optional).")
@click.pass_obj
def sale_checkout(container, cash_received: str | None, voucher: str | None, bank_ref: str) -> None:
    """Submit the cart as a sale, paid by cash or transfer."""
    if (cash_received is None) == (voucher is None):
        raise click.UsageError("Give exactly one of --cash or --transfer")

    try:
        if cash_received is not None:
            payment = CashPayment(cash_received=Money.of(cash_received))
        else:
            payment = TransferPayment(voucher=voucher, bank_reference=bank_ref)
        dto = container.checkout().handle(payment)
    except RequestTimeout as exc:
        raise click.ClickException(
            f"{exc}. The cart was kept; running checkout again with the same payment is safe."
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    number = dto.sale_number or dto.id
    click.echo(f"Sale #{number} recorded  (status={dto.status})")
    click.echo(f"Customer: {dto.customer}")
    click.echo(f"Total:    {dto.total}")
    if dto.change_due is not None:
        click.echo(f"Change:   {dto.change_due}")
    if dto.status == "pending_confirmation":
        click.echo("Transfer must be confirmed by an administrator.")


# --- History and reports -----------------------------------------------------


@click.command("list")
@click.option("--status", default=None,
              type=click.Choice(["finalized", "pending_confirmation", "confirmed", "cancelled"]),
              help="Only sales in this status.")
@click.option("--method", "payment_method", default=None, type=click.Choice(["cash", "transfer"]),
              help="Only sales paid this way.")
@click.option("--from", "start_date", default=None, help="First day, YYYY-MM-DD.")
@click.option("--to", "end_date", default=None, help="Last day, YYYY-MM-DD.")
@click.pass_obj
def sale_list(container, status, payment_method, start_date, end_date) -> None:
    """List recorded sales."""
    handler = container.list_sales()
    filters = dict(
        status=status, payment_method=payment_method, start_date=start_date, end_date=end_date
    )
    try:
        sales = handler.handle(**filters)
        summary = handler.summary(**filters)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not sales:
        click.echo("No sales found.")
        return

    click.echo(f"{'Number':<12} {'Customer':<22} {'Method':<10} {'Status':<22} {'Total':>10}")
    click.echo("-" * 80)
    for s in sales:
        click.echo(
            f"{s.sale_number or s.id:<12} {s.customer:<22} {s.payment_method:<10} {s.status:<22} {s.total:>10}"
        )
    click.echo("-" * 80)
    click.echo(f"{summary.count} sales, revenue {summary.revenue}")
    if summary.pending_count:
        click.echo(f"{summary.pending_count} transfers pending ({summary.pending_amount})")


@click.command("report")
@click.option("--date", "day", default=None, help="Day to report, YYYY-MM-DD (default today).")
@click.pass_obj
def sale_report(container, day: str | None) -> None:
    """Show the daily sales report."""
    try:
        dto = container.list_sales().daily_report(day)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Sales report for {dto.date}")
    click.echo(f"Sales:          {dto.total_sales}  (cash {dto.cash_sales}, transfer {dto.transfer_sales})")
    click.echo(f"Revenue:        {dto.revenue}")
    click.echo(f"Average ticket: {dto.average_ticket}")
    click.echo(f"Paid in cash:   {dto.cash_share:.1%}")
    if dto.top_products:
        click.echo()
        click.echo(f"  {'Product':<28} {'Qty':>5} {'Revenue':>12}")
        for p in dto.top_products:
            click.echo(f"  {p.name:<28} {p.quantity:>5} {p.revenue:>12}")


@click.command("stats")
@click.pass_obj
def sale_stats(container) -> None:
    """Show your own sales figures."""
    try:
        dto = container.list_sales().my_stats()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Sales:             {dto.total_sales}  (cash {dto.cash_sales}, transfer {dto.transfer_sales})")
    click.echo(f"Revenue:           {dto.revenue}")
    click.echo(f"Pending transfers: {dto.pending_transfers}")
