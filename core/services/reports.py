"""
Read-side aggregations over the catalog and the ledger.

Every function takes plain snapshots (lists of ``InventoryItem`` /
``LedgerEntry``) or a store, and never mutates anything.
"""
from __future__ import annotations

from collections import OrderedDict
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from django.conf import settings
from django.utils import timezone

from core.domain import KIND_BILL, KIND_SALE, STATUS_ADMITTED, InventoryItem, LedgerEntry, LedgerFilter, money

ZERO = money(0)


def inventory_value(items: Iterable[InventoryItem]) -> Decimal:
    return sum((item.price * item.stock for item in items), ZERO)


def low_stock(items: Iterable[InventoryItem], threshold: Optional[int] = None) -> list[InventoryItem]:
    """Items with ``0 < stock < threshold``; out-of-stock items are reported separately."""
    if threshold is None:
        threshold = settings.HOSPITAL_LOW_STOCK_THRESHOLD
    return [item for item in items if 0 < item.stock < threshold]


def sold_quantities(entries: Iterable[LedgerEntry]) -> 'OrderedDict[str, int]':
    """Units sold per product, keyed in first-sold order."""
    totals: OrderedDict[str, int] = OrderedDict()
    for entry in entries:
        if entry.kind != KIND_SALE or not entry.product:
            continue
        totals[entry.product] = totals.get(entry.product, 0) + entry.quantity
    return totals


def best_sellers(entries: Iterable[LedgerEntry], n: Optional[int] = None) -> list[tuple[str, int]]:
    """Top ``n`` products by units sold.

    Ties keep the order in which the products were first sold (``sorted`` is
    stable and ``entries`` come oldest first from the store).
    """
    if n is None:
        n = settings.HOSPITAL_BEST_SELLERS
    ranked = sorted(sold_quantities(entries).items(), key=lambda kv: -kv[1])
    return ranked[:n]


def total_revenue(entries: Iterable[LedgerEntry], since: Optional[datetime] = None,
                  until: Optional[datetime] = None) -> Decimal:
    total = ZERO
    for entry in entries:
        if since and entry.date < since:
            continue
        if until and entry.date > until:
            continue
        total += entry.total
    return total


def least_in_stock(items: list[InventoryItem]) -> Optional[InventoryItem]:
    # min/max return the first of equal elements
    return min(items, key=lambda i: i.stock) if items else None


def most_in_stock(items: list[InventoryItem]) -> Optional[InventoryItem]:
    return max(items, key=lambda i: i.stock) if items else None


def recent_window(days: Optional[int] = None) -> datetime:
    if days is None:
        days = settings.HOSPITAL_RECENT_DAYS
    return timezone.now() - timedelta(days=days)


def sales_by_product(entries: Iterable[LedgerEntry]) -> list[dict]:
    """Units and revenue per product (sales) or per service (bill lines)."""
    rows: OrderedDict[str, dict] = OrderedDict()

    def bump(name, quantity, revenue):
        row = rows.setdefault(name, {'product': name, 'quantity': 0, 'revenue': ZERO})
        row['quantity'] += quantity
        row['revenue'] += revenue

    for entry in entries:
        if entry.kind == KIND_SALE:
            bump(entry.product, entry.quantity, entry.total)
        else:
            for line in entry.items:
                bump(line.service, line.quantity, line.line_total)
    return list(rows.values())


def inventory_stats(items: list[InventoryItem], threshold: Optional[int] = None) -> dict:
    return {
        'totalItems': len(items),
        'totalValue': inventory_value(items),
        'lowStockCount': len(low_stock(items, threshold)),
        'outOfStockCount': sum(1 for i in items if i.stock == 0),
    }


# ---------------------------------------------------------------------
# Endpoint payloads
# ---------------------------------------------------------------------

def dashboard(store, threshold: Optional[int] = None) -> dict:
    items = store.list_items()
    since = recent_window()
    recent = store.query(LedgerFilter(date_from=since))
    return {
        'totalSales': total_revenue(recent),
        'inventoryValue': inventory_value(items),
        'lowStockItems': [{'name': i.name, 'quantity': i.stock} for i in low_stock(items, threshold)],
        'bestSellers': [{'name': name, 'soldQuantity': qty} for name, qty in best_sellers(store.query())],
        'leastInStock': _item_or_none(least_in_stock(items)),
        'mostInStock': _item_or_none(most_in_stock(items)),
        'recentSales': [e.as_json() for e in reversed(recent[-5:])],
    }


def user_dashboard(store, threshold: Optional[int] = None) -> dict:
    items = store.list_items()
    top = best_sellers(store.query(), 1)
    if top:
        best_seller = {'name': top[0][0], 'quantity': top[0][1]}
    else:
        best_seller = {'name': 'No products sold yet', 'quantity': 0}
    if items:
        priciest = max(items, key=lambda i: i.price)
        preference = {'name': priciest.name, 'price': priciest.price}
    else:
        preference = {'name': 'No items in inventory', 'price': ZERO}
    return {
        'bestSeller': best_seller,
        'ourPreference': preference,
        'recentlyAdded': _item_or_none(items[-1] if items else None),
        'lowStockItems': [{'name': i.name, 'stock': i.stock} for i in low_stock(items, threshold)],
    }


def sales_report(store, since: Optional[datetime] = None, until: Optional[datetime] = None) -> dict:
    entries = store.query(LedgerFilter(date_from=since, date_to=until))
    return {
        'totalRevenue': total_revenue(entries),
        'salesData': sales_by_product(entries),
    }


def revenue_summary(store) -> dict:
    entries = store.query()
    bills = [e for e in entries if e.kind == KIND_BILL]
    patients = store.list_patients()
    return {
        'totalRevenue': total_revenue(entries),
        'billCount': len(bills),
        'saleCount': len(entries) - len(bills),
        'patientCount': len(patients),
        'admittedCount': sum(1 for p in patients if p.status == STATUS_ADMITTED),
        'recentBills': [b.as_json() for b in reversed(bills[-5:])],
    }


def _item_or_none(item: Optional[InventoryItem]) -> Optional[dict]:
    return item.as_json() if item else None
