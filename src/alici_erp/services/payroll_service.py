"""Payroll Service - fortnightly payments (/payroll)."""

from decimal import Decimal
from typing import List, Optional

from ..models.api_record import json_number
from ..models.finance import PayrollEntry
from ..utils.validators import validate_payroll_data
from . import query_keys as keys
from .cache_rules import Mutation
from .exceptions import ValidationError
from .mutations import MutationResult, perform_mutation

PAYROLL_PATH = "/payroll"


def list_payroll(ctx, force: bool = False) -> List[PayrollEntry]:
    return ctx.cache.fetch(
        keys.PAYROLL,
        lambda: [PayrollEntry.from_api(row) for row in ctx.client.get(PAYROLL_PATH) or []],
        force=force,
    )


def filter_payroll(
    entries: List[PayrollEntry], quincena: Optional[int] = None, area: Optional[str] = None
) -> List[PayrollEntry]:
    """Entries of one fortnight and/or work area (None keeps all)."""
    return [
        entry
        for entry in entries
        if (quincena is None or entry.quincena == int(quincena)) and (not area or entry.area_trabajo == area)
    ]


def entry_total(entry: PayrollEntry) -> Decimal:
    """Server total when sent, else base salary plus overtime."""
    if entry.total_pago is not None:
        return entry.total_pago
    return entry.salario_base + entry.pago_horas_extra


def payroll_payload(data: dict) -> dict:
    """
    Validate and shape a payroll form.

    Raises:
        ValidationError: Missing text fields, quincena not 1 or 2, or a
            negative amount
    """
    is_valid, errors = validate_payroll_data(data)
    if not is_valid:
        raise ValidationError(errors)
    return {
        "nombre": data["nombre"].strip(),
        "puesto": data["puesto"].strip(),
        "areaTrabajo": data["areaTrabajo"].strip(),
        "quincena": int(data["quincena"]),
        "salarioBase": json_number(data.get("salarioBase") or 0),
        "pagoHorasExtra": json_number(data.get("pagoHorasExtra") or 0),
    }


def create_payroll(ctx, data: dict) -> MutationResult:
    payload = payroll_payload(data)
    return perform_mutation(
        ctx,
        Mutation.CREATE_PAYROLL,
        lambda: ctx.client.post(PAYROLL_PATH, json=payload),
        success_message="Pago registrado",
        failure_message="No se pudo registrar el pago",
    )


def update_payroll(ctx, entry_id: str, data: dict) -> MutationResult:
    payload = payroll_payload(data)
    return perform_mutation(
        ctx,
        Mutation.UPDATE_PAYROLL,
        lambda: ctx.client.put(f"{PAYROLL_PATH}/{entry_id}", json=payload),
        success_message="Pago actualizado",
        failure_message="No se pudo actualizar el pago",
    )


def delete_payroll(ctx, entry_id: str) -> MutationResult:
    return perform_mutation(
        ctx,
        Mutation.DELETE_PAYROLL,
        lambda: ctx.client.delete(f"{PAYROLL_PATH}/{entry_id}"),
        success_message="Pago eliminado",
        failure_message="No se pudo eliminar el pago",
    )
