"""Category Service - inventory categories (/inventory/categories).

A category is either PRODUCCION (made in-house from a recipe) or REVENTA
(bought and resold as is).
"""

from typing import List, Optional

from ..models.product import Category
from ..utils.validators import validate_category_data
from . import query_keys as keys
from .cache_rules import Mutation
from .exceptions import ValidationError
from .mutations import MutationResult, perform_mutation

CATEGORIES_PATH = "/inventory/categories"


def list_categories(ctx, tipo: Optional[str] = None, force: bool = False) -> List[Category]:
    """All categories, or only those of one tipo."""
    categories = ctx.cache.fetch(
        keys.INVENTORY_CATEGORIES,
        lambda: [Category.from_api(row) for row in ctx.client.get(CATEGORIES_PATH) or []],
        force=force,
    )
    if tipo is None:
        return categories
    return [category for category in categories if category.tipo == tipo]


def _payload(data: dict) -> dict:
    is_valid, errors = validate_category_data(data)
    if not is_valid:
        raise ValidationError(errors)
    return {"nombre": data["nombre"].strip(), "tipo": data["tipo"]}


def create_category(ctx, data: dict) -> MutationResult:
    payload = _payload(data)
    return perform_mutation(
        ctx,
        Mutation.CREATE_CATEGORY,
        lambda: ctx.client.post(CATEGORIES_PATH, json=payload),
        success_message="Categoría creada exitosamente",
        failure_message="Error al crear categoría",
    )


def update_category(ctx, category_id: str, data: dict) -> MutationResult:
    payload = _payload(data)
    return perform_mutation(
        ctx,
        Mutation.UPDATE_CATEGORY,
        lambda: ctx.client.put(f"{CATEGORIES_PATH}/{category_id}", json=payload),
        success_message="Categoría actualizada exitosamente",
        failure_message="Error al actualizar categoría",
    )


def delete_category(ctx, category_id: str) -> MutationResult:
    return perform_mutation(
        ctx,
        Mutation.DELETE_CATEGORY,
        lambda: ctx.client.delete(f"{CATEGORIES_PATH}/{category_id}"),
        success_message="Categoría eliminada exitosamente",
        failure_message="Error al eliminar categoría",
    )
