"""
Report service.
Read-only aggregations over sale history and the current catalog, computed on
demand and never persisted.
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Dict, Any, Iterable, Tuple, Union

from pos.exceptions import ValidationError
from pos.models import Sale, Product
from pos.utils.formatters import money


class Period(str, enum.Enum):
    """Reporting window."""
    TODAY = 'today'
    WEEK = 'week'
    MONTH = 'month'
    ALL = 'all'


def normalize_period(value: Union[str, Period, None]) -> Period:
    if isinstance(value, Period):
        return value
    try:
        return Period((value or Period.TODAY.value).strip().lower())
    except (ValueError, AttributeError):
        valid = ', '.join(p.value for p in Period)
        raise ValidationError(f'Invalid period: {value}. Use one of: {valid}')


def get_period_start(period: Period, now: datetime) -> Optional[datetime]:
    """
    First instant included in ``period``.

    All windows are anchored at local midnight of ``now``: today starts at
    midnight, week 7 days before it and month 30 days before it. ``all`` has
    no start.
    """
    midnight = datetime.combine(now.date(), time.min)
    if period == Period.TODAY:
        return midnight
    if period == Period.WEEK:
        return midnight - timedelta(days=7)
    if period == Period.MONTH:
        return midnight - timedelta(days=30)
    return None


def filter_sales_by_period(sales: Iterable[Sale], period: Period, now: Optional[datetime] = None) -> List[Sale]:
    start = get_period_start(period, now or datetime.now())
    if start is None:
        return list(sales)
    return [s for s in sales if s.timestamp >= start]


@dataclass
class TopProduct:
    product_id: str
    name: str
    quantity: int = 0
    revenue: Decimal = Decimal('0')

    def to_dict(self) -> Dict[str, Any]:
        return {
            'product_id': self.product_id,
            'name': self.name,
            'quantity': self.quantity,
            'revenue': str(self.revenue),
        }


def get_top_products(sales: Iterable[Sale], limit: int = 5) -> List[TopProduct]:
    """
    Best sellers by revenue.

    Revenue uses the price stored in each sale, not the current catalog
    price. Ties keep the order in which products were first encountered.
    """
    grouped: Dict[str, TopProduct] = {}
    for sale in sales:
        for item in sale.items:
            entry = grouped.get(item.product.id)
            if entry is None:
                entry = grouped[item.product.id] = TopProduct(item.product.id, item.product.name)
            entry.quantity += item.quantity
            entry.revenue += item.product.price * item.quantity

    # sorted() is stable, which gives the tie-break for free
    return sorted(grouped.values(), key=lambda p: p.revenue, reverse=True)[:limit]


def get_inventory_summary(products: Iterable[Product], low_stock_threshold: int = 10) -> Tuple[int, Decimal]:
    """Return (low stock product count, total inventory value)."""
    low_stock = 0
    value = Decimal('0')
    for product in products:
        if product.stock < low_stock_threshold:
            low_stock += 1
        value += product.price * product.stock
    return low_stock, value


@dataclass
class BusinessReport:
    period: Period
    revenue: Decimal
    transaction_count: int
    average_transaction: Decimal
    items_sold: int
    low_stock_count: int
    inventory_value: Decimal
    top_products: List[TopProduct] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'period': self.period.value,
            'revenue': str(self.revenue),
            'transaction_count': self.transaction_count,
            'average_transaction': str(self.average_transaction),
            'items_sold': self.items_sold,
            'low_stock_count': self.low_stock_count,
            'inventory_value': str(self.inventory_value),
            'top_products': [p.to_dict() for p in self.top_products],
        }


def build_report(
    sales: Iterable[Sale],
    products: Iterable[Product],
    period: Union[str, Period] = Period.TODAY,
    now: Optional[datetime] = None,
    low_stock_threshold: int = 10,
    top_limit: int = 5
) -> BusinessReport:
    """
    Build the business report for a period.

    Args:
        sales: Full sale history
        products: Current catalog (inventory figures ignore the period)
        period: today | week | month | all
        now: Reference time (defaults to the local clock)
        low_stock_threshold: Products with stock strictly below this count as low
        top_limit: Number of best sellers to return

    Returns:
        BusinessReport
    """
    period = normalize_period(period)
    filtered = filter_sales_by_period(sales, period, now)

    revenue = sum((s.total for s in filtered), Decimal('0'))
    count = len(filtered)
    average = (revenue / count).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP) if count else Decimal('0')
    items_sold = sum(s.item_count for s in filtered)
    low_stock, inventory_value = get_inventory_summary(products, low_stock_threshold)

    return BusinessReport(
        period=period,
        revenue=revenue,
        transaction_count=count,
        average_transaction=average,
        items_sold=items_sold,
        low_stock_count=low_stock,
        inventory_value=inventory_value,
        top_products=get_top_products(filtered, top_limit),
    )


def export_report_text(report: BusinessReport) -> str:
    """Plain-text version of a report, suitable for sharing."""
    lines = [
        f"Business Report - {report.period.value.upper()}",
        "",
        f"Revenue: {money(report.revenue)}",
        f"Transactions: {report.transaction_count}",
        f"Average Transaction: {money(report.average_transaction)}",
        f"Items Sold: {report.items_sold}",
        f"Inventory Value: {money(report.inventory_value)}",
        f"Low Stock Items: {report.low_stock_count}",
        "",
        "Top Products:",
    ]
    if not report.top_products:
        lines.append("No sales in this period")
    for index, product in enumerate(report.top_products, start=1):
        lines.append(f"{index}. {product.name} - {money(product.revenue)} ({product.quantity} sold)")
    return "\n".join(lines) + "\n"
