"""
Input validation functions for the ALICI ERP client.

This module provides validation functions for all user inputs including:
- Numeric validation (positive, non-negative, finite)
- String validation (required fields)
- Enumerated choices (roles, cash types, order statuses)
- Whole-form validation for every resource the dashboard mutates

Every validator runs before any network call; a form that fails here is
never submitted.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional, Tuple

from .constants import (
    CASH_TYPES,
    CATEGORY_TYPES,
    ERROR_INVALID_NON_NEGATIVE,
    ERROR_INVALID_NUMBER,
    ERROR_INVALID_POSITIVE,
    ERROR_REQUIRED_FIELD,
    PAYROLL_FORTNIGHTS,
    USER_ROLES,
)


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Parse a user or API supplied number into a finite Decimal.

    Floats go through str() so 0.1 stays 0.1. Booleans, NaN and infinities
    are rejected.

    Args:
        value: int, float, Decimal or numeric string

    Returns:
        Decimal value, or None if the value is not a finite number
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, Decimal):
            number = value
        elif isinstance(value, (int, float)):
            number = Decimal(str(value))
        elif isinstance(value, str):
            if not value.strip():
                return None
            number = Decimal(value.strip())
        else:
            return None
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def validate_required_string(value: Optional[str], field_name: str = "Campo") -> Tuple[bool, str]:
    """
    Validate that a string field is not empty.

    Args:
        value: The string value to validate
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return False, f"{field_name}: {ERROR_REQUIRED_FIELD}"
    return True, ""


def validate_positive_number(value: Any, field_name: str = "Campo") -> Tuple[bool, str]:
    """
    Validate that a value is a positive number (> 0).

    Args:
        value: The value to validate
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    number = to_decimal(value)
    if number is None:
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"
    if number <= 0:
        return False, f"{field_name}: {ERROR_INVALID_POSITIVE}"
    return True, ""


def validate_non_negative_number(value: Any, field_name: str = "Campo") -> Tuple[bool, str]:
    """
    Validate that a value is a non-negative number (>= 0).

    Args:
        value: The value to validate
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    number = to_decimal(value)
    if number is None:
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"
    if number < 0:
        return False, f"{field_name}: {ERROR_INVALID_NON_NEGATIVE}"
    return True, ""


def validate_choice(value: Any, choices: Iterable, field_name: str = "Campo") -> Tuple[bool, str]:
    """
    Validate that a value is one of the allowed choices.

    Args:
        value: The value to validate
        choices: Allowed values
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    choices = list(choices)
    if value in (None, ""):
        return False, f"{field_name}: {ERROR_REQUIRED_FIELD}"
    if value not in choices:
        allowed = ", ".join(str(c) for c in choices)
        return False, f"{field_name}: debe ser uno de {allowed}"
    return True, ""


def _collect(errors: List[str], result: Tuple[bool, str]) -> None:
    is_valid, error = result
    if not is_valid:
        errors.append(error)


def validate_exchange_rate(value: Any) -> Tuple[bool, str]:
    """The exchange rate must be a finite number greater than zero."""
    return validate_positive_number(value, "Tasa de cambio")


def validate_config_data(data: dict) -> Tuple[bool, list]:
    """
    Validate a system configuration update.

    Args:
        data: Dictionary with tasaCambio and optional factorOverhead

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []
    _collect(errors, validate_exchange_rate(data.get("tasaCambio")))
    if data.get("factorOverhead") not in (None, ""):
        _collect(errors, validate_non_negative_number(data.get("factorOverhead"), "Overhead"))
    return len(errors) == 0, errors


def validate_ingredient_data(data: dict) -> Tuple[bool, list]:
    """
    Validate all fields for an ingredient (insumo).

    Args:
        data: Dictionary containing nombre, unidad, stock, costoPromedio

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []
    _collect(errors, validate_required_string(data.get("nombre"), "Nombre"))
    _collect(errors, validate_required_string(data.get("unidad"), "Unidad"))
    _collect(errors, validate_non_negative_number(data.get("stock", 0), "Stock"))
    _collect(errors, validate_non_negative_number(data.get("costoPromedio", 0), "Costo promedio"))
    return len(errors) == 0, errors


def validate_purchase_data(data: dict) -> Tuple[bool, list]:
    """Validate an ingredient purchase registration."""
    errors = []
    _collect(errors, validate_required_string(data.get("insumoId"), "Insumo"))
    _collect(errors, validate_positive_number(data.get("cantidad"), "Cantidad"))
    _collect(errors, validate_positive_number(data.get("costoTotal"), "Costo total"))
    return len(errors) == 0, errors


def validate_product_data(data: dict) -> Tuple[bool, list]:
    """Validate a product create/update payload."""
    errors = []
    _collect(errors, validate_required_string(data.get("nombre"), "Nombre"))
    _collect(errors, validate_non_negative_number(data.get("precioVenta"), "Precio de venta"))
    _collect(errors, validate_non_negative_number(data.get("stockDisponible", 0), "Stock"))
    if data.get("costoUnitario") not in (None, ""):
        _collect(errors, validate_non_negative_number(data.get("costoUnitario"), "Costo unitario"))
    return len(errors) == 0, errors


def validate_provider_data(data: dict) -> Tuple[bool, list]:
    """Validate a provider payload; only the name is mandatory."""
    errors = []
    _collect(errors, validate_required_string(data.get("nombre"), "Nombre"))
    return len(errors) == 0, errors


def validate_category_data(data: dict) -> Tuple[bool, list]:
    """Validate an inventory category payload."""
    errors = []
    _collect(errors, validate_required_string(data.get("nombre"), "Nombre"))
    _collect(errors, validate_choice(data.get("tipo"), CATEGORY_TYPES, "Tipo"))
    return len(errors) == 0, errors


def validate_cash_movement_data(data: dict) -> Tuple[bool, list]:
    """Validate a cash movement (ingreso/egreso)."""
    errors = []
    _collect(errors, validate_choice(data.get("tipo"), CASH_TYPES, "Tipo"))
    _collect(errors, validate_positive_number(data.get("monto"), "Monto"))
    return len(errors) == 0, errors


def validate_payroll_data(data: dict) -> Tuple[bool, list]:
    """
    Validate a payroll entry.

    Args:
        data: Dictionary with nombre, puesto, areaTrabajo, quincena,
              salarioBase, pagoHorasExtra

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []
    for field, label in (("nombre", "Nombre"), ("puesto", "Puesto"), ("areaTrabajo", "Área")):
        _collect(errors, validate_required_string(data.get(field), label))
    quincena = data.get("quincena")
    try:
        quincena = int(quincena) if quincena not in (None, "") else None
    except (TypeError, ValueError):
        quincena = -1
    _collect(errors, validate_choice(quincena, PAYROLL_FORTNIGHTS, "Quincena"))
    _collect(errors, validate_non_negative_number(data.get("salarioBase") or 0, "Salario base"))
    _collect(errors, validate_non_negative_number(data.get("pagoHorasExtra") or 0, "Horas extra"))
    return len(errors) == 0, errors


def validate_waste_data(data: dict) -> Tuple[bool, list]:
    """Validate a waste (descarte) registration."""
    errors = []
    _collect(errors, validate_required_string(data.get("productoId"), "Producto"))
    _collect(errors, validate_positive_number(data.get("cantidad"), "Cantidad"))
    _collect(errors, validate_required_string(data.get("motivo"), "Motivo"))
    return len(errors) == 0, errors


def validate_order_data(data: dict) -> Tuple[bool, list]:
    """Validate a customer order; needs a client, a date and one real item."""
    errors = []
    _collect(errors, validate_required_string(data.get("cliente"), "Cliente"))
    _collect(errors, validate_required_string(data.get("fechaEntrega"), "Fecha de entrega"))
    items = [
        item
        for item in data.get("items") or []
        if item.get("productoId") and (to_decimal(item.get("cantidad")) or 0) > 0
    ]
    if not items:
        errors.append("Items: agrega al menos un producto con cantidad")
    return len(errors) == 0, errors


def validate_deposit_data(data: dict) -> Tuple[bool, list]:
    """Validate an order deposit (abono)."""
    errors = []
    _collect(errors, validate_positive_number(data.get("monto"), "Monto"))
    return len(errors) == 0, errors


def validate_finalize_data(data: dict) -> Tuple[bool, list]:
    """Closing an order needs a payment in at least one currency."""
    errors = []
    nio = to_decimal(data.get("pagoNIO") or 0) or 0
    usd = to_decimal(data.get("pagoUSD") or 0) or 0
    if nio <= 0 and usd <= 0:
        errors.append("Pago: ingresa un pago para cerrar el encargo")
    if usd > 0 and data.get("tasaUSD") not in (None, ""):
        _collect(errors, validate_exchange_rate(data.get("tasaUSD")))
    return len(errors) == 0, errors


def validate_user_data(data: dict) -> Tuple[bool, list]:
    """Validate a user registration payload."""
    errors = []
    _collect(errors, validate_required_string(data.get("username"), "Usuario"))
    _collect(errors, validate_required_string(data.get("password"), "Contraseña"))
    _collect(errors, validate_required_string(data.get("nombre"), "Nombre"))
    _collect(errors, validate_choice(data.get("rol"), USER_ROLES, "Rol"))
    return len(errors) == 0, errors
