"""
Flask CLI commands for the POS.

Commands:
- flask seed-catalog: Load a demo catalog into an empty store
- flask sales-report: Print the business report for a period
"""

import click
from flask import current_app

from pos.exceptions import PosError
from pos.services.report_service import Period, export_report_text

DEMO_PRODUCTS = [
    {'name': 'Classic Burger', 'price': '12.99', 'category': 'food', 'stock': 50, 'barcode': '1234567890123'},
    {'name': 'Margherita Pizza', 'price': '14.50', 'category': 'food', 'stock': 30, 'barcode': '1234567890124'},
    {'name': 'Caesar Salad', 'price': '9.99', 'category': 'food', 'stock': 25},
    {'name': 'Espresso', 'price': '3.50', 'category': 'drinks', 'stock': 100, 'barcode': '2234567890123'},
    {'name': 'Fresh Orange Juice', 'price': '4.99', 'category': 'drinks', 'stock': 8},
    {'name': 'Chocolate Cake', 'price': '6.99', 'category': 'desserts', 'stock': 12},
    {'name': 'Vanilla Ice Cream', 'price': '4.50', 'category': 'desserts', 'stock': 5},
]


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('seed-catalog')
    @click.option('--force', is_flag=True, help='Add demo products even if the catalog is not empty')
    def seed_catalog(force):
        """Load demo products into the catalog."""
        pos = current_app.extensions['pos']

        if pos.list_products() and not force:
            click.echo(click.style('Catalog already has products, nothing to do (use --force).', fg='yellow'))
            return

        try:
            for data in DEMO_PRODUCTS:
                product = pos.add_product(data)
                click.echo(f'   {product.id}  {product.name}  ${product.price}  (stock {product.stock})')
        except PosError as e:
            click.echo(click.style(f'Error seeding catalog: {e.message}', fg='red'))
            raise SystemExit(1)

        click.echo(click.style(f'\nSeeded {len(DEMO_PRODUCTS)} products.', fg='green', bold=True))

    @app.cli.command('sales-report')
    @click.option(
        '--period',
        type=click.Choice([p.value for p in Period]),
        default=Period.TODAY.value,
        show_default=True,
        help='Reporting window'
    )
    def sales_report(period):
        """Print the business report."""
        pos = current_app.extensions['pos']
        click.echo(export_report_text(pos.report(period)))
