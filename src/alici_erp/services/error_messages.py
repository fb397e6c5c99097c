"""Centralized error handling for callers of the service layer.

Maps service exceptions to user-facing (Spanish) messages, logs the
technical details, and emits an error notification in place of a dialog.
"""

import logging
from typing import Optional, Tuple

from ..utils.constants import GENERIC_ERROR_MESSAGE
from ..utils.format import format_currency, amount_to_cents
from .exceptions import (
    ConversionNotFound,
    InsufficientPayment,
    InvalidExchangeRate,
    RequestFailed,
    ServiceError,
    Unauthorized,
    ValidationError,
    EmptyCart,
)
from .notifications import Notifier

logger = logging.getLogger(__name__)


def handle_error(
    exception: Exception,
    notifier: Optional[Notifier] = None,
    operation: str = "Operación",
) -> Tuple[str, str]:
    """Handle an exception and optionally notify the user.

    Args:
        exception: The caught exception
        notifier: Where to emit the error notification (optional)
        operation: What was being attempted (e.g., "Registrar compra")

    Returns:
        Tuple of (title, user_message)

    Example:
        try:
            inventory_service.register_purchase(ctx, data)
        except ServiceError as e:
            handle_error(e, ctx.notifier, operation="Registrar compra")
    """
    title, message = get_user_message(exception, operation)
    _log_error(exception, operation)

    # The forced logout already told the user
    if notifier is not None and not isinstance(exception, Unauthorized):
        notifier.error(message)

    return title, message


def get_user_message(exception: Exception, operation: str = "Operación") -> Tuple[str, str]:
    """Convert an exception to a user-facing title and message.

    Specific types are checked before their base classes.
    """
    if isinstance(exception, InvalidExchangeRate):
        return "Tasa inválida", "La tasa de cambio debe ser un número mayor a cero."

    if isinstance(exception, EmptyCart):
        return "Carrito vacío", "Agrega al menos un producto antes de cobrar."

    if isinstance(exception, ValidationError):
        if exception.errors:
            return "Datos inválidos", "; ".join(str(e) for e in exception.errors)
        return "Datos inválidos", str(exception)

    if isinstance(exception, ConversionNotFound):
        message = f"No hay conversión de {exception.from_unit} a {exception.to_unit}"
        if exception.line:
            message += f" (insumo {exception.line})"
        return "Conversión faltante", message + "."

    if isinstance(exception, InsufficientPayment):
        missing = exception.total_due - exception.total_tendered
        return (
            "Pago insuficiente",
            f"Faltan {format_currency(amount_to_cents(missing))} para completar el pago.",
        )

    if isinstance(exception, Unauthorized):
        return "Sesión expirada", "Tu sesión expiró. Inicia sesión nuevamente."

    if isinstance(exception, RequestFailed):
        return "Error", exception.message or f"{operation}: {GENERIC_ERROR_MESSAGE}"

    if isinstance(exception, ServiceError):
        return "Error", f"{operation}: {exception}"

    return "Error inesperado", GENERIC_ERROR_MESSAGE


def _log_error(exception: Exception, operation: str) -> None:
    """Log technical details; unexpected exceptions get a stack trace."""
    if isinstance(exception, ServiceError):
        logger.error(
            f"{operation} failed: {exception.__class__.__name__}: {exception}",
            extra={
                "operation": operation,
                "exception_type": exception.__class__.__name__,
                "status_code": getattr(exception, "status_code", None),
            },
        )
    else:
        logger.exception(f"{operation} failed with unexpected error: {exception.__class__.__name__}")
