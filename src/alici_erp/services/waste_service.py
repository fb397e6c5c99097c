"""Waste Service - discarded products (/waste).

Registering waste lowers the product's stock on the server.
"""

from typing import List

from ..models.api_record import json_number
from ..models.sale import WasteItem
from ..utils.validators import validate_waste_data
from . import query_keys as keys
from .cache_rules import Mutation
from .exceptions import ValidationError
from .mutations import MutationResult, perform_mutation

WASTE_PATH = "/waste"


def list_waste(ctx, force: bool = False) -> List[WasteItem]:
    return ctx.cache.fetch(
        keys.WASTE,
        lambda: [WasteItem.from_api(row) for row in ctx.client.get(WASTE_PATH) or []],
        force=force,
    )


def register_waste(ctx, data: dict) -> MutationResult:
    """
    POST /waste {productoId, cantidad, motivo}.

    Raises:
        ValidationError: Missing product or reason, or cantidad <= 0
    """
    is_valid, errors = validate_waste_data(data)
    if not is_valid:
        raise ValidationError(errors)
    payload = {
        "productoId": str(data["productoId"]),
        "cantidad": json_number(data["cantidad"]),
        "motivo": data["motivo"].strip(),
    }
    return perform_mutation(
        ctx,
        Mutation.REGISTER_WASTE,
        lambda: ctx.client.post(WASTE_PATH, json=payload),
        success_message="Descarte registrado",
        failure_message="Error al registrar descarte",
    )
