"""Services package - client-side logic for the ALICI ERP dashboard.

Architecture:
- Calculators: pure functions over Decimal (currency, payment, units,
  recipe cost); no I/O
- Resource services: plain functions taking an AppContext, reads served
  through the QueryCache and writes run through perform_mutation()
- Exceptions: consistent error handling via the ServiceError hierarchy
- Validation: every form is validated before any request is sent

Calculators:
- currency_converter: NIO/USD conversion
- payment_service: tender reconciliation and change
- unit_converter: unit conversion table
- recipe_cost_service: recipe cost and margin

Resource services:
- inventory_service, provider_service, category_service: inventory
- product_service, recipe_service, conversion_service: catalogue
- production_service, waste_service: production floor
- sales_service, orders_service: till and customer orders
- cash_service, payroll_service: finance
- config_service, dashboard_service, users_service: administration

Infrastructure:
- api_client: HTTP client for the remote API
- auth_service: login session and token handling
- app_context: per-session wiring of the above
- query_keys, query_cache, cache_rules, mutations: cached server data
- database, local_storage: SQLite-backed key/value store for the token
- notifications, error_messages: user-facing messages
- exceptions: custom exception classes for service layer errors
"""

from . import (
    cash_service,
    category_service,
    config_service,
    conversion_service,
    currency_converter,
    dashboard_service,
    inventory_service,
    orders_service,
    payment_service,
    payroll_service,
    product_service,
    production_service,
    provider_service,
    recipe_cost_service,
    recipe_service,
    sales_service,
    unit_converter,
    users_service,
    waste_service,
)
from .app_context import AppContext, create_app_context
from .cache_rules import INVALIDATION_RULES, Mutation, keys_for
from .exceptions import (
    ConversionNotFound,
    EmptyCart,
    InsufficientPayment,
    InvalidExchangeRate,
    RequestFailed,
    ServiceError,
    Unauthorized,
    ValidationError,
)
from .mutations import MutationResult, perform_mutation
from .query_cache import QueryCache

__all__ = [
    "cash_service",
    "category_service",
    "config_service",
    "conversion_service",
    "currency_converter",
    "dashboard_service",
    "inventory_service",
    "orders_service",
    "payment_service",
    "payroll_service",
    "product_service",
    "production_service",
    "provider_service",
    "recipe_cost_service",
    "recipe_service",
    "sales_service",
    "unit_converter",
    "users_service",
    "waste_service",
    "AppContext",
    "create_app_context",
    "INVALIDATION_RULES",
    "Mutation",
    "keys_for",
    "ConversionNotFound",
    "EmptyCart",
    "InsufficientPayment",
    "InvalidExchangeRate",
    "RequestFailed",
    "ServiceError",
    "Unauthorized",
    "ValidationError",
    "MutationResult",
    "perform_mutation",
    "QueryCache",
]
