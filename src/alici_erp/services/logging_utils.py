"""Service layer logging utilities.

Every mutation against the API and every cache invalidation is logged in
one format, "<operation>: <outcome>", with the identifiers involved
attached as structured ``extra`` fields.

Usage:
    from alici_erp.services.logging_utils import get_service_logger, log_operation

    logger = get_service_logger(__name__)

    log_operation(
        logger,
        operation="checkout",
        outcome="success",
        total_cents=12500,
    )

    log_operation(
        logger,
        operation="calculate_recipe_cost",
        outcome="conversion_not_found",
        level=logging.WARNING,
        from_unit="TAZA",
        to_unit="KG",
    )
"""

import logging
from typing import Any

# LogRecord attributes that must not be overwritten through ``extra``
_RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def get_service_logger(name: str) -> logging.Logger:
    """
    Get a logger for a service module.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Logger named 'alici_erp.services.<module>'

    Example:
        >>> get_service_logger("alici_erp.services.sales_service").name
        'alici_erp.services.sales_service'
    """
    if "." in name:
        name = name.split(".")[-1]
    return logging.getLogger(f"alici_erp.services.{name}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **context: Any,
) -> None:
    """
    Log a service operation with structured context.

    Args:
        logger: Logger instance to use
        operation: Operation name (e.g., "checkout", "register_purchase")
        outcome: Outcome (e.g., "success", "request_failed", "validation_failed")
        level: Log level (default: INFO). DEBUG for frequent events such as
            cache invalidation.
        **context: Extra fields (resource ids, status codes, cache keys).
            Names that collide with LogRecord attributes get a ``ctx_`` prefix.
    """
    extra = {"operation": operation, "outcome": outcome}
    for key, value in context.items():
        extra[f"ctx_{key}" if key in _RESERVED else key] = value
    logger.log(level, f"{operation}: {outcome}", extra=extra)
