"""
Derived financials: pure functions, no I/O.

Inventory is valued at material cost, not selling price. Stock bands:

    quantity == 0   -> out
    1 .. 5          -> low
    6 .. 10         -> medium
    > 10            -> good

Growth figures compare the last 7 days with the 7 days before that and are
reported in percent with one decimal; they are 0 when the earlier window is
empty.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Optional

from bizpulse.models.enums import StockStatus
from bizpulse.models.insights import BusinessKpis, DailySales, InventoryItem, ProductPerformance
from bizpulse.models.records import ProductRecord, SaleRecord
from bizpulse.utils.coercion import parse_timestamp

LOW_STOCK_MAX = 5
MEDIUM_STOCK_MAX = 10
GROWTH_WINDOW = timedelta(days=7)
UNNAMED_PRODUCT = "Unnamed Product"


def profit_margin_percent(material_cost: float, selling_price: float) -> float:
    """Margin as a percentage of selling price; 0 when there is no selling price."""
    if selling_price <= 0:
        return 0.0
    return ((selling_price - material_cost) / selling_price) * 100


def inventory_value(products: Iterable[ProductRecord]) -> float:
    return sum(p.quantity * p.material_cost for p in products)


def stock_status(quantity: int) -> StockStatus:
    if quantity <= 0:
        return StockStatus.OUT
    if quantity <= LOW_STOCK_MAX:
        return StockStatus.LOW
    if quantity <= MEDIUM_STOCK_MAX:
        return StockStatus.MEDIUM
    return StockStatus.GOOD


def inventory_rows(products: Iterable[ProductRecord]) -> list[InventoryItem]:
    """Inventory table rows, most valuable stock first."""
    rows = [
        InventoryItem(
            id=p.id,
            product_name=p.product_name or UNNAMED_PRODUCT,
            quantity=p.quantity,
            material_cost=p.material_cost,
            selling_price=p.selling_price,
            total_value=p.quantity * p.material_cost,
            profit_margin=profit_margin_percent(p.material_cost, p.selling_price),
            stock_status=stock_status(p.quantity),
            last_updated=p.updated_at or p.created_at,
        )
        for p in products
    ]
    return sorted(rows, key=lambda r: r.total_value, reverse=True)


def _sale_time(sale: SaleRecord) -> Optional[datetime]:
    return parse_timestamp(sale.sale_date or sale.created_at)


def _window_totals(
    sales: Iterable[SaleRecord],
    now: datetime,
    amount: Callable[[SaleRecord], float],
) -> tuple[float, float]:
    """
    Sum ``amount`` over the last 7 days and over the 7 days before that.

    The recent window starts exactly 7 days before ``now`` (inclusive); the
    previous window covers [now - 14d, now - 7d). Sales without a readable
    date are left out.
    """
    recent_start = now - GROWTH_WINDOW
    previous_start = now - 2 * GROWTH_WINDOW

    recent_total = 0.0
    previous_total = 0.0
    for sale in sales:
        when = _sale_time(sale)
        if when is None:
            continue
        if when >= recent_start:
            recent_total += amount(sale)
        elif when >= previous_start:
            previous_total += amount(sale)
    return recent_total, previous_total


def _growth_percent(recent: float, previous: float) -> float:
    if previous <= 0:
        return 0.0
    return round(((recent - previous) / previous) * 100, 1)


def sales_growth_percent(sales: Iterable[SaleRecord], now: Optional[datetime] = None) -> float:
    """Revenue growth of the last 7 days against the 7 days before, in percent."""
    now = now or datetime.now(timezone.utc)
    return _growth_percent(*_window_totals(sales, now, lambda s: s.revenue))


def product_growth_percent(sales: Iterable[SaleRecord], now: Optional[datetime] = None) -> float:
    """Units-sold growth of the last 7 days against the 7 days before, in percent."""
    now = now or datetime.now(timezone.utc)
    return _growth_percent(*_window_totals(sales, now, lambda s: s.quantity))


def product_breakdown(
    sales: Iterable[SaleRecord],
    products: Iterable[ProductRecord],
) -> list[ProductPerformance]:
    """
    Units sold, revenue and profit per product name, best sellers first.

    Products with no sales are listed with zero units. Profit uses the
    material cost of the product record carrying the same name; when
    several records share a name the last one read wins.
    """
    units: dict[str, int] = {}
    revenue: dict[str, float] = {}
    for sale in sales:
        name = sale.product_name or UNNAMED_PRODUCT
        units[name] = units.get(name, 0) + sale.quantity
        revenue[name] = revenue.get(name, 0.0) + sale.revenue

    material_cost: dict[str, float] = {}
    for product in products:
        name = product.product_name or UNNAMED_PRODUCT
        units.setdefault(name, 0)
        revenue.setdefault(name, 0.0)
        material_cost[name] = product.material_cost

    rows = [
        ProductPerformance(
            name=name,
            units_sold=sold,
            revenue=revenue[name],
            profit=revenue[name] - material_cost.get(name, 0.0) * sold,
        )
        for name, sold in units.items()
    ]
    return sorted(rows, key=lambda r: r.units_sold, reverse=True)


def daily_sales(sales: Iterable[SaleRecord], now: Optional[datetime] = None) -> list[DailySales]:
    """Units and revenue per calendar day, oldest day first."""
    now = now or datetime.now(timezone.utc)
    by_day: dict[str, DailySales] = {}
    for sale in sales:
        stamp = sale.sale_date or sale.created_at or now.isoformat()
        day = stamp.split("T")[0]
        row = by_day.setdefault(day, DailySales(date=day))
        row.sales += sale.quantity
        row.revenue += sale.revenue

    def day_key(row: DailySales) -> tuple[int, str]:
        parsed = parse_timestamp(row.date)
        return (0, parsed.isoformat()) if parsed else (1, row.date)

    return sorted(by_day.values(), key=day_key)


def sales_kpis(
    sales: list[SaleRecord],
    products: list[ProductRecord],
    now: Optional[datetime] = None,
) -> BusinessKpis:
    total_revenue = sum(s.revenue for s in sales)
    breakdown = product_breakdown(sales, products)
    return BusinessKpis(
        products_sold=sum(s.quantity for s in sales),
        total_revenue=total_revenue,
        top_seller=breakdown[0].name if breakdown else "No data",
        sales_growth=sales_growth_percent(sales, now=now),
        product_growth=product_growth_percent(sales, now=now),
        average_order_value=round(total_revenue / len(sales), 2) if sales else 0.0,
        inventory_value=round(inventory_value(products), 2),
    )
