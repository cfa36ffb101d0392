import logging

import click

from storeops.domain.exceptions import DomainException
from storeops.infrastructure.bootstrap import build_container
from storeops.infrastructure.cli.customer_commands import customer_search
from storeops.infrastructure.cli.order_commands import (
    order_advance,
    order_cancel,
    order_confirm,
    order_confirm_transfer,
    order_deliver,
    order_list,
    order_pickup,
    order_search,
    order_show,
    order_status,
    order_summary,
    order_transfers,
)
from storeops.infrastructure.cli.sale_commands import (
    sale_add,
    sale_checkout,
    sale_clear,
    sale_customer,
    sale_discount,
    sale_list,
    sale_notes,
    sale_qty,
    sale_remove,
    sale_report,
    sale_search,
    sale_show,
    sale_stats,
)
from storeops.infrastructure.cli.transfer_commands import transfer_confirm, transfer_pending
from storeops.infrastructure.config import Settings


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug output.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """storeops — point of sale and online order desk"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if ctx.obj is None:
        try:
            container = build_container(Settings())
        except DomainException as exc:
            raise click.ClickException(str(exc))
        ctx.obj = container
        ctx.call_on_close(container.close)


@cli.group()
def sale() -> None:
    """Build and check out point-of-sale carts."""


@cli.group()
def transfer() -> None:
    """Review transfer-paid sales."""


@cli.group()
def order() -> None:
    """Move online orders through fulfillment."""


@cli.group()
def customer() -> None:
    """Look up registered customers."""


# Register subcommands
sale.add_command(sale_search)
sale.add_command(sale_add)
sale.add_command(sale_qty)
sale.add_command(sale_remove)
sale.add_command(sale_discount)
sale.add_command(sale_notes)
sale.add_command(sale_customer)
sale.add_command(sale_show)
sale.add_command(sale_clear)
sale.add_command(sale_checkout)
sale.add_command(sale_list)
sale.add_command(sale_report)
sale.add_command(sale_stats)
transfer.add_command(transfer_pending)
transfer.add_command(transfer_confirm)
order.add_command(order_list)
order.add_command(order_summary)
order.add_command(order_show)
order.add_command(order_status)
order.add_command(order_confirm)
order.add_command(order_advance)
order.add_command(order_deliver)
order.add_command(order_pickup)
order.add_command(order_cancel)
order.add_command(order_search)
order.add_command(order_transfers)
order.add_command(order_confirm_transfer)
customer.add_command(customer_search)
