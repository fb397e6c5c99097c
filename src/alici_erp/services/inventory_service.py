"""Inventory Service - ingredients (insumos) and purchases.

Ingredients are the raw materials recipes consume. Their stock and average
cost (costoPromedio) are maintained by the server: a purchase raises the
stock and re-averages the cost, production and waste lower the stock.

Example Usage:
    >>> insumos = list_ingredients(ctx)
    >>> register_purchase(ctx, {"insumoId": "i1", "cantidad": 25, "costoTotal": 1250})
    MutationResult(ok=True, ...)
"""

from typing import Dict, List

from ..models.api_record import json_number, str_or_none
from ..models.ingredient import Ingredient
from ..utils.validators import validate_ingredient_data, validate_purchase_data
from . import query_keys as keys
from .cache_rules import Mutation
from .exceptions import ValidationError
from .mutations import MutationResult, perform_mutation
from .unit_converter import normalize_unit

INVENTORY_PATH = "/inventory"
PURCHASE_PATH = f"{INVENTORY_PATH}/purchase"


def list_ingredients(ctx, force: bool = False) -> List[Ingredient]:
    """All ingredients, served from the cache while fresh."""
    return ctx.cache.fetch(
        keys.INGREDIENTS,
        lambda: [Ingredient.from_api(row) for row in ctx.client.get(INVENTORY_PATH) or []],
        force=force,
    )


def ingredients_by_id(ctx) -> Dict[str, Ingredient]:
    """Ingredient lookup for recipe costing."""
    return {ingredient.id: ingredient for ingredient in list_ingredients(ctx)}


def ingredient_payload(data: dict) -> dict:
    """
    Validate and shape an ingredient form.

    Raises:
        ValidationError: If nombre/unidad are missing or a number is invalid
    """
    is_valid, errors = validate_ingredient_data(data)
    if not is_valid:
        raise ValidationError(errors)
    payload = {
        "nombre": data["nombre"].strip(),
        "unidad": normalize_unit(data["unidad"]),
        "stock": json_number(data.get("stock", 0)),
        "costoPromedio": json_number(data.get("costoPromedio", 0)),
    }
    provider_id = str_or_none(data, "proveedorPrincipalId")
    if provider_id:
        payload["proveedorPrincipalId"] = provider_id
    return payload


def create_ingredient(ctx, data: dict) -> MutationResult:
    payload = ingredient_payload(data)
    return perform_mutation(
        ctx,
        Mutation.CREATE_INGREDIENT,
        lambda: ctx.client.post(INVENTORY_PATH, json=payload),
        success_message="Insumo creado exitosamente",
        failure_message="Error al crear insumo",
    )


def update_ingredient(ctx, ingredient_id: str, data: dict) -> MutationResult:
    payload = ingredient_payload(data)
    return perform_mutation(
        ctx,
        Mutation.UPDATE_INGREDIENT,
        lambda: ctx.client.put(f"{INVENTORY_PATH}/{ingredient_id}", json=payload),
        success_message="Insumo actualizado exitosamente",
        failure_message="Error al actualizar insumo",
    )


def delete_ingredient(ctx, ingredient_id: str) -> MutationResult:
    return perform_mutation(
        ctx,
        Mutation.DELETE_INGREDIENT,
        lambda: ctx.client.delete(f"{INVENTORY_PATH}/{ingredient_id}"),
        success_message="Insumo eliminado exitosamente",
        failure_message="Error al eliminar insumo",
    )


def register_purchase(ctx, data: dict) -> MutationResult:
    """
    Register an ingredient purchase (POST /inventory/purchase).

    Args:
        data: insumoId, cantidad (> 0, in the ingredient's unit) and
              costoTotal (> 0, what was paid for the whole purchase)

    Raises:
        ValidationError: Before any request, if a field is invalid
    """
    is_valid, errors = validate_purchase_data(data)
    if not is_valid:
        raise ValidationError(errors)
    payload = {
        "insumoId": str(data["insumoId"]),
        "cantidad": json_number(data["cantidad"]),
        "costoTotal": json_number(data["costoTotal"]),
    }
    return perform_mutation(
        ctx,
        Mutation.REGISTER_PURCHASE,
        lambda: ctx.client.post(PURCHASE_PATH, json=payload),
        success_message="Compra registrada exitosamente",
        failure_message="Error al registrar compra",
    )
