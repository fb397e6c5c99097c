"""Production Service - daily production lots (/production).

A daily submission carries one or more lots. Each lot names the product
made, how many units came out, an optional labor cost and the
ingredients consumed. The server raises product stock, lowers ingredient
stock and answers with the costed lots plus an optional resumen block.

Example Usage:
    >>> result = submit_daily_production(ctx, [{
    ...     "productoId": "p1",
    ...     "cantidadProducida": 40,
    ...     "insumos": [{"insumoId": "i1", "cantidad": 2}],
    ... }])
    >>> production_totals(result.data)
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Sequence

from ..models.api_record import json_number
from ..models.production import DailyProductionSummary, ProductionRecord
from ..utils.constants import ZERO
from ..utils.validators import to_decimal
from . import query_keys as keys
from .cache_rules import Mutation
from .exceptions import ValidationError
from .mutations import MutationResult, perform_mutation

PRODUCTION_PATH = "/production"
DAILY_PATH = f"{PRODUCTION_PATH}/daily"
HISTORY_PATH = f"{PRODUCTION_PATH}/history"


@dataclass(frozen=True)
class ProductionTotals:
    total_lotes: int
    unidades_totales: Decimal
    costo_total: Decimal


def _lot_payload(lot: dict, prefix: str, errors: List[str]) -> dict:
    if not lot.get("productoId"):
        errors.append(f"{prefix}: seleccione un producto.")

    cantidad = to_decimal(lot.get("cantidadProducida"))
    if cantidad is None or cantidad <= 0:
        errors.append(f"{prefix}: ingrese una cantidad producida válida.")

    labor = None
    raw_labor = lot.get("costoManoObra")
    if raw_labor is not None and str(raw_labor).strip():
        labor = to_decimal(raw_labor)
        if labor is None or labor < 0:
            errors.append(f"{prefix}: el costo de mano de obra debe ser mayor o igual a 0.")
            labor = None

    insumos = []
    for index, row in enumerate(lot.get("insumos") or [], start=1):
        label = f"{prefix} · Insumo {index}"
        if not row.get("insumoId"):
            errors.append(f"{label}: seleccione un insumo.")
            continue
        amount = to_decimal(row.get("cantidad"))
        if amount is None or amount <= 0:
            errors.append(f"{label}: ingrese una cantidad válida.")
            continue
        insumos.append({"insumoId": str(row["insumoId"]), "cantidad": json_number(amount)})
    if not insumos:
        errors.append(f"{prefix}: registre al menos un insumo válido.")

    payload = {
        "productoId": lot.get("productoId"),
        "cantidadProducida": json_number(cantidad),
        "insumos": insumos,
    }
    if labor is not None:
        payload["costoManoObra"] = json_number(labor)
    return payload


def build_daily_production(lots: Sequence[dict]) -> List[dict]:
    """
    Validate every lot and build the request body.

    Errors from all lots are collected (duplicates dropped, order kept)
    so the whole form can be corrected at once.

    Raises:
        ValidationError: No lots, or any lot is invalid
    """
    if not lots:
        raise ValidationError(["Agrega al menos un lote de producción."])
    errors: List[str] = []
    payload = [_lot_payload(lot, f"Lote {index}", errors) for index, lot in enumerate(lots, start=1)]
    if errors:
        raise ValidationError(list(dict.fromkeys(errors)))
    return payload


def submit_daily_production(ctx, lots: Sequence[dict]) -> MutationResult:
    """POST /production/daily. On success result.data is a DailyProductionSummary."""
    payload = build_daily_production(lots)
    count = len(payload)
    success = (
        f"Se registraron {count} lotes exitosamente" if count > 1 else "Producción registrada exitosamente"
    )
    return perform_mutation(
        ctx,
        Mutation.REGISTER_PRODUCTION,
        lambda: DailyProductionSummary.from_api(ctx.client.post(DAILY_PATH, json=payload) or {}),
        success_message=success,
        failure_message="Error al registrar producción",
    )


def production_totals(summary: DailyProductionSummary) -> ProductionTotals:
    """Resumen figures, each falling back to a sum over the lots when omitted."""
    total_lotes = summary.total_lotes if summary.total_lotes is not None else len(summary.lotes)
    unidades = summary.unidades_totales
    if unidades is None:
        unidades = sum((lot.cantidad_producida for lot in summary.lotes), ZERO)
    costo = summary.costo_total
    if costo is None:
        costo = sum((lot.costo_total or ZERO for lot in summary.lotes), ZERO)
    return ProductionTotals(total_lotes=total_lotes, unidades_totales=unidades, costo_total=costo)


def get_production_history(ctx, force: bool = False) -> List[ProductionRecord]:
    return ctx.cache.fetch(
        keys.PRODUCTION_HISTORY,
        lambda: [ProductionRecord.from_api(row) for row in ctx.client.get(HISTORY_PATH) or []],
        force=force,
    )
