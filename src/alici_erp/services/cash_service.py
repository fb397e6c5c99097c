"""Cash Service - cash register movements (/cash).

Filters come from the screen as 'YYYY-MM-DD' dates and a tipo selector
that includes TODOS. They are sanitized once, and the sanitized dict is
both the query parameters and the cache key, so two screens showing the
same filters share one cached list.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional, Union

from ..models.api_record import json_number, str_or_none
from ..models.finance import CashMovement
from ..utils.constants import ALL_FILTER, CASH_INCOME, ZERO
from ..utils.format import to_iso_date
from ..utils.validators import validate_cash_movement_data
from . import query_keys as keys
from .cache_rules import Mutation
from .exceptions import ValidationError
from .mutations import MutationResult, perform_mutation

CASH_PATH = "/cash"
REPORT_PATH = f"{CASH_PATH}/report.csv"

DateLike = Union[str, date, None]


def sanitize_filters(date_from: DateLike = None, date_to: DateLike = None, tipo: Optional[str] = None) -> dict:
    """
    Query parameters for a cash listing.

    Empty values and the TODOS tipo are dropped; dates become ISO
    timestamps at midnight UTC.
    """
    filters = {}
    if date_from:
        filters["from"] = to_iso_date(date_from)
    if date_to:
        filters["to"] = to_iso_date(date_to)
    if tipo and tipo != ALL_FILTER:
        filters["tipo"] = tipo
    return filters


def list_cash(ctx, filters: Optional[dict] = None, force: bool = False) -> List[CashMovement]:
    """Movements matching already sanitized filters."""
    filters = dict(filters or {})
    return ctx.cache.fetch(
        keys.cash(filters),
        lambda: [CashMovement.from_api(row) for row in ctx.client.get(CASH_PATH, params=filters or None) or []],
        force=force,
    )


def cash_balance(movements: List[CashMovement]) -> Decimal:
    """Income minus expenses over the given movements."""
    balance = ZERO
    for movement in movements:
        balance += movement.monto if movement.tipo == CASH_INCOME else -movement.monto
    return balance


def cash_movement_payload(data: dict) -> dict:
    """
    Validate and shape a movement form.

    Raises:
        ValidationError: Missing tipo or monto <= 0
    """
    is_valid, errors = validate_cash_movement_data(data)
    if not is_valid:
        raise ValidationError(errors)
    payload = {"tipo": data["tipo"], "monto": json_number(data["monto"])}
    for field in ("descripcion", "referenciaId", "referenciaTipo"):
        value = str_or_none(data, field)
        if value is not None:
            payload[field] = value.strip()
    if data.get("fecha"):
        payload["fecha"] = to_iso_date(data["fecha"])
    return payload


def register_cash_movement(ctx, data: dict) -> MutationResult:
    payload = cash_movement_payload(data)
    return perform_mutation(
        ctx,
        Mutation.REGISTER_CASH_MOVEMENT,
        lambda: ctx.client.post(CASH_PATH, json=payload),
        success_message="Movimiento registrado",
        failure_message="No se pudo registrar el movimiento",
    )


def download_cash_report(ctx, filters: Optional[dict] = None) -> bytes:
    """CSV export (cash-report.csv) of the movements matching filters."""
    return ctx.client.get_raw(REPORT_PATH, params=dict(filters or {}) or None)
