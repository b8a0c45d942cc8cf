"""CLI commands for the product catalog and its price history."""

from __future__ import annotations

import click

from invtrack.application.dto import PriceHistoryLineDTO, ProductDraft, ProductDTO
from invtrack.application.product_repository import ProductRepository
from invtrack.domain.exceptions import DomainException, EntityNotFoundError
from invtrack.domain.model.product import DEFAULT_CATEGORY, DEFAULT_UNIT, Product
from invtrack.domain.model.value_objects import Money, Quantity
from invtrack.infrastructure.bootstrap import product_repository
from invtrack.infrastructure.config import Config


def _open(config: Config) -> ProductRepository:
    try:
        repo = product_repository(config)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.get_current_context().call_on_close(repo.close)
    return repo


def _resolve(repo: ProductRepository, ref: str) -> Product:
    """Look a product up by code first, then by ID."""
    product = repo.get_by_code(ref) or repo.get(ref)
    if product is None:
        raise click.ClickException(f"Product not found: '{ref}'")
    return product


def _print_table(dtos: list[ProductDTO]) -> None:
    click.echo(f"{'Code':<8} {'Name':<24} {'Category':<16} {'Qty':>6} {'Unit':<8} {'Price':>10}")
    click.echo("-" * 77)
    for dto in dtos:
        click.echo(
            f"{dto.code:<8} {dto.name:<24} {dto.category:<16} "
            f"{dto.quantity:>6} {dto.unit:<8} {dto.price:>10}"
        )


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Unit price (e.g. 15.00).")
@click.option("--category", default=DEFAULT_CATEGORY, show_default=True, help="Category.")
@click.option("--unit", default=DEFAULT_UNIT, show_default=True, help="Unit of measure.")
@click.option("--quantity", default=0, type=int, show_default=True, help="Quantity in stock.")
@click.pass_obj
def product_add(
    config: Config, name: str, price: str, category: str, unit: str, quantity: int
) -> None:
    """Add a new product to the catalog."""
    repo = _open(config)
    draft = ProductDraft(
        name=name, price=price, quantity=quantity, unit=unit, category=category
    )

    try:
        product = repo.create(draft)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.code} '{product.name}' added at {product.price}")


@click.command("list")
@click.pass_obj
def product_list(config: Config) -> None:
    """List all products in the catalog."""
    products = _open(config).list_all()

    if not products:
        click.echo("No products found.")
        return

    _print_table([ProductDTO.from_product(p) for p in products])


@click.command("search")
@click.argument("query", default="")
@click.pass_obj
def product_search(config: Config, query: str) -> None:
    """Find products whose name, code or category contains QUERY."""
    products = _open(config).search(query)

    if not products:
        click.echo(f"No products match '{query}'.")
        return

    _print_table([ProductDTO.from_product(p) for p in products])


@click.command("show")
@click.argument("ref")
@click.pass_obj
def product_show(config: Config, ref: str) -> None:
    """Show one product, by code or ID."""
    dto = ProductDTO.from_product(_resolve(_open(config), ref))

    click.echo(f"{dto.code}  {dto.name}")
    click.echo(f"ID:       {dto.id}")
    click.echo(f"Category: {dto.category}")
    click.echo(f"Stock:    {dto.quantity} {dto.unit}")
    click.echo(f"Price:    {dto.price}")
    click.echo(f"Created:  {dto.created_at}")


@click.command("update")
@click.argument("ref")
@click.option("--name", default=None, help="New name.")
@click.option("--price", default=None, help="New unit price (e.g. 29.99).")
@click.option("--category", default=None, help="New category.")
@click.option("--unit", default=None, help="New unit of measure.")
@click.option("--quantity", default=None, type=int, help="New quantity in stock.")
@click.pass_obj
def product_update(
    config: Config,
    ref: str,
    name: str | None,
    price: str | None,
    category: str | None,
    unit: str | None,
    quantity: int | None,
) -> None:
    """Update a product, by code or ID. Price changes are recorded in its history."""
    repo = _open(config)
    current = _resolve(repo, ref)

    changes: dict = {}
    if name is not None:
        changes["name"] = name
    if category is not None:
        changes["category"] = category
    if unit is not None:
        changes["unit"] = unit

    try:
        if price is not None:
            changes["price"] = Money.of(price, current.price.currency)
        if quantity is not None:
            changes["quantity"] = Quantity(quantity)
        updated = repo.update(current.with_changes(**changes))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {updated.code} updated (price {updated.price})")


@click.command("delete")
@click.argument("ref")
@click.pass_obj
def product_delete(config: Config, ref: str) -> None:
    """Delete a product and its price history, by code or ID."""
    repo = _open(config)
    product = repo.get_by_code(ref) or repo.get(ref)
    if product is None:
        click.echo(f"No product '{ref}'; nothing deleted.")
        return

    try:
        repo.delete(product.id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.code} deleted.")


@click.command("history")
@click.argument("ref")
@click.pass_obj
def product_history(config: Config, ref: str) -> None:
    """Show the price history of a product, oldest first."""
    repo = _open(config)
    product = _resolve(repo, ref)
    lines = [PriceHistoryLineDTO.from_entry(e) for e in repo.price_history_of(product.id)]

    click.echo(f"Price history for {product.code} '{product.name}'")
    if not lines:
        click.echo("  (no recorded prices)")
        return
    click.echo(f"  {'Effective':<12} {'Price':>10}")
    click.echo(f"  {'-'*23}")
    for line in lines:
        click.echo(f"  {line.date:<12} {line.price:>10}")
    try:
        click.echo(f"  Current price: {repo.latest_price(product.id)}")
    except EntityNotFoundError as exc:
        raise click.ClickException(str(exc))


@click.command("next-code")
@click.option("--category", default=DEFAULT_CATEGORY, show_default=True, help="Category.")
@click.pass_obj
def product_next_code(config: Config, category: str) -> None:
    """Preview the code the next product in a category would get."""
    click.echo(_open(config).next_code(category))
