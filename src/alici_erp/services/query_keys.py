"""
Cache keys for server-owned collections.

A key is a tuple: the collection name, optionally followed by filter
parameters. Invalidating a key also invalidates every key it prefixes,
so ("orders",) covers ("orders", "PENDIENTE") and ("orders", None).
"""

from typing import Hashable, Optional, Tuple

QueryKey = Tuple[Hashable, ...]

PRODUCTS: QueryKey = ("productos",)
INGREDIENTS: QueryKey = ("insumos",)
RECIPES: QueryKey = ("recetas",)
INVENTORY_CATEGORIES: QueryKey = ("inventory-categories",)
PROVIDERS: QueryKey = ("providers",)
PAYROLL: QueryKey = ("payroll",)
CASH: QueryKey = ("cash",)
ORDERS: QueryKey = ("orders",)
WASTE: QueryKey = ("waste",)
PRODUCTION_HISTORY: QueryKey = ("production-history",)
CONFIG: QueryKey = ("config",)
CONVERSIONS: QueryKey = ("conversions",)
SALES: QueryKey = ("sales",)
USERS: QueryKey = ("users",)
DASHBOARD_STATS: QueryKey = ("dashboard-stats",)


def recipe_cost(recipe_id) -> QueryKey:
    return ("recipe-cost", str(recipe_id))


def recipe_by_product(product_id) -> QueryKey:
    return ("recipe-by-product", str(product_id))


def order_detail(order_id) -> QueryKey:
    return ("order-detail", str(order_id))


def orders(status: Optional[str] = None) -> QueryKey:
    """Orders list, optionally filtered by status (None = all)."""
    return ORDERS + (status,)


def cash(filters: Optional[dict] = None) -> QueryKey:
    """Cash movements for the given (already sanitized) filters."""
    filters = filters or {}
    return CASH + (filters.get("from"), filters.get("to"), filters.get("tipo"))


def sales(date_from: Optional[str] = None, date_to: Optional[str] = None) -> QueryKey:
    return SALES + (date_from, date_to)


def is_prefix(prefix: QueryKey, key: QueryKey) -> bool:
    """True if key starts with every element of prefix."""
    return len(prefix) <= len(key) and tuple(key[: len(prefix)]) == tuple(prefix)
