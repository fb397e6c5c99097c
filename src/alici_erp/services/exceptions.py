"""Service layer exception classes for the ALICI ERP client.

This module defines all custom exceptions used by the service layer to provide
consistent error handling across the application.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    │   ├── InvalidExchangeRate
    │   └── EmptyCart
    ├── ConversionNotFound
    ├── InsufficientPayment
    ├── RequestFailed
    └── Unauthorized

Validation and domain errors (conversion, insufficient payment) are raised
before any network call is attempted. RequestFailed and Unauthorized only
come from the API client.
"""

from decimal import Decimal
from typing import List, Optional


class ServiceError(Exception):
    """Base exception for all service layer errors.

    All service-specific exceptions should inherit from this class.
    """

    pass


class ValidationError(ServiceError):
    """Raised when user input fails validation.

    Args:
        errors: List of human-readable validation messages

    Example:
        >>> raise ValidationError(["Nombre: Este campo es obligatorio"])
        ValidationError: Validation failed: Nombre: Este campo es obligatorio
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(f"Validation failed: {'; '.join(self.errors)}")


class InvalidExchangeRate(ValidationError):
    """Raised when an exchange rate is not a finite number greater than zero."""

    def __init__(self, rate):
        self.rate = rate
        super().__init__([f"Tasa de cambio inválida: {rate!r}"])


class EmptyCart(ValidationError):
    """Raised when checkout is attempted with no items."""

    def __init__(self):
        super().__init__(["El carrito está vacío"])


class ConversionNotFound(ServiceError):
    """Raised when no conversion entry exists between two units.

    Args:
        from_unit: Unit the quantity is stated in
        to_unit: Unit it must be converted to
        line: Optional description of the recipe line being costed

    Example:
        >>> raise ConversionNotFound("TAZA", "KG", line="Harina")
        ConversionNotFound: No conversion from 'TAZA' to 'KG' (line: Harina)
    """

    def __init__(self, from_unit: str, to_unit: str, line: Optional[str] = None):
        self.from_unit = from_unit
        self.to_unit = to_unit
        self.line = line
        message = f"No conversion from '{from_unit}' to '{to_unit}'"
        if line:
            message += f" (line: {line})"
        super().__init__(message)


class InsufficientPayment(ServiceError):
    """Raised when tendered money does not cover the amount due.

    Args:
        total_due: Amount due (primary currency)
        total_tendered: Amount tendered after conversion (primary currency)
    """

    def __init__(self, total_due: Decimal, total_tendered: Decimal):
        self.total_due = total_due
        self.total_tendered = total_tendered
        super().__init__(
            f"Insufficient payment: due {total_due}, tendered {total_tendered}"
        )


class RequestFailed(ServiceError):
    """Raised when a request to the API fails (HTTP error, network error, timeout).

    Args:
        message: Server-provided message when available, else a fallback
        status_code: HTTP status, if a response was received
        errors: Field-level messages the server sent under "errors"/"details"
        from_server: True when message came from the response body
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        errors: Optional[List[str]] = None,
        from_server: bool = False,
    ):
        self.message = message
        self.status_code = status_code
        self.errors = list(errors or [])
        self.from_server = from_server
        super().__init__(message)


class Unauthorized(ServiceError):
    """Raised on HTTP 401; the session has already been logged out."""

    def __init__(self, message: str = "Sesión expirada"):
        self.message = message
        super().__init__(message)
