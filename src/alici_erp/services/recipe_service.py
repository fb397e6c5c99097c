"""Recipe Service - recipes per product (/recipes).

Example Usage:
    >>> recipe = build_recipe({
    ...     "productoId": "p1",
    ...     "nombre": "Pan Francés",
    ...     "cantidadBase": 40,
    ...     "costoManoObraEstimado": 120,
    ...     "insumos": [{"insumoId": "i1", "cantidad": 2, "unidad": "lb"}],
    ... }, table)
    >>> create_recipe(ctx, recipe)
    >>> calculate_local_cost(ctx, recipe).costo_unitario

A product has at most one recipe. Asking for the recipe of a product that
has none is a normal state (the API answers 404) and yields None.
"""

from decimal import Decimal
from typing import Optional

from ..models.recipe import Recipe, RecipeLine, ServerRecipeCost
from ..utils.validators import to_decimal
from . import query_keys as keys
from .cache_rules import Mutation
from .conversion_service import get_conversion_table
from .exceptions import RequestFailed, ValidationError
from .inventory_service import ingredients_by_id
from .mutations import MutationResult, perform_mutation
from .recipe_cost_service import RecipeCost, calculate_recipe_cost
from .unit_converter import ConversionTable, normalize_unit

RECIPES_PATH = "/recipes"


def get_recipe_by_product(ctx, product_id: str, force: bool = False) -> Optional[Recipe]:
    """
    Recipe of a product, or None when the product has no recipe yet.

    Raises:
        RequestFailed: Any failure other than 404
    """

    def fetch() -> Optional[Recipe]:
        try:
            data = ctx.client.get(f"{RECIPES_PATH}/product/{product_id}")
        except RequestFailed as e:
            if e.status_code == 404:
                return None
            raise
        return Recipe.from_api(data) if data else None

    return ctx.cache.fetch(keys.recipe_by_product(product_id), fetch, force=force)


def get_server_cost(ctx, recipe_id: str, force: bool = False) -> ServerRecipeCost:
    """Cost breakdown computed by the API (GET /recipes/{id}/cost, unwrapped)."""
    return ctx.cache.fetch(
        keys.recipe_cost(recipe_id),
        lambda: ServerRecipeCost.from_api(ctx.client.get(f"{RECIPES_PATH}/{recipe_id}/cost")),
        force=force,
    )


def _non_negative(value, label: str, errors: list) -> Decimal:
    if value in (None, ""):
        return Decimal("0")
    number = to_decimal(value)
    if number is None or number < 0:
        errors.append(f"{label}: debe ser mayor o igual a cero")
        return Decimal("0")
    return number


def build_recipe(data: dict, table: Optional[ConversionTable] = None) -> Recipe:
    """
    Validate a recipe form and build the Recipe to submit.

    Units are upper-cased. When the conversion table has entries, every
    line's unit must appear in it.

    Raises:
        ValidationError: Listing every problem found
    """
    errors = []
    product_id = data.get("productoId")
    if not product_id:
        errors.append("Producto no encontrado")
    nombre = (data.get("nombre") or "").strip()
    if not nombre:
        errors.append("El nombre de la receta es obligatorio")
    base = to_decimal(data.get("cantidadBase"))
    if base is None or base <= 0:
        errors.append("La cantidad base debe ser mayor a cero")
    labor = _non_negative(data.get("costoManoObraEstimado"), "Mano de obra", errors)
    overhead = _non_negative(data.get("gastosOperativosEstimados"), "Gastos operativos", errors)

    allowed_units = table.units() if table is not None else frozenset()
    lines = []
    for index, row in enumerate(data.get("insumos") or [], start=1):
        insumo_id = str(row.get("insumoId") or "").strip()
        quantity = to_decimal(row.get("cantidad"))
        unit = normalize_unit(row.get("unidad"))
        if not insumo_id:
            errors.append(f"Fila {index}: selecciona un insumo")
            continue
        if quantity is None or quantity <= 0:
            errors.append(f"Fila {index}: la cantidad debe ser mayor a cero")
            continue
        if not unit:
            errors.append(f"Fila {index}: la unidad es obligatoria")
            continue
        if allowed_units and unit not in allowed_units:
            errors.append(f'La unidad "{unit}" no está en la lista de conversiones soportadas.')
            continue
        lines.append(RecipeLine(insumo_id=insumo_id, cantidad=quantity, unidad=unit, id=row.get("id")))

    if errors:
        raise ValidationError(errors)
    return Recipe(
        id=data.get("id"),
        producto_id=str(product_id),
        nombre=nombre,
        cantidad_base=base,
        costo_mano_obra=labor,
        gastos_operativos=overhead,
        lines=tuple(lines),
    )


def create_recipe(ctx, recipe: Recipe) -> MutationResult:
    """POST /recipes."""
    payload = recipe.to_payload()
    payload.pop("id", None)
    return perform_mutation(
        ctx,
        Mutation.CREATE_RECIPE,
        lambda: ctx.client.post(RECIPES_PATH, json=payload),
        success_message="Receta creada",
        failure_message="No se pudo crear la receta",
        product_id=recipe.producto_id,
    )


def upsert_recipe(ctx, recipe: Recipe) -> MutationResult:
    """POST /recipes with the id when there is one: the server creates or replaces."""
    payload = recipe.to_payload()
    return perform_mutation(
        ctx,
        Mutation.UPDATE_RECIPE if recipe.id else Mutation.CREATE_RECIPE,
        lambda: ctx.client.post(RECIPES_PATH, json=payload),
        success_message="Receta guardada",
        failure_message="No se pudo guardar la receta",
        recipe_id=recipe.id,
        product_id=recipe.producto_id,
    )


def update_recipe(ctx, recipe: Recipe) -> MutationResult:
    """PUT /recipes/{id}."""
    if not recipe.id:
        raise ValidationError(["La receta aún no existe"])
    return perform_mutation(
        ctx,
        Mutation.UPDATE_RECIPE,
        lambda: ctx.client.put(f"{RECIPES_PATH}/{recipe.id}", json=recipe.to_payload()),
        success_message="Receta actualizada",
        failure_message="No se pudo actualizar la receta",
        recipe_id=recipe.id,
        product_id=recipe.producto_id,
    )


def delete_recipe(ctx, recipe_id: str, product_id: str) -> MutationResult:
    return perform_mutation(
        ctx,
        Mutation.DELETE_RECIPE,
        lambda: ctx.client.delete(f"{RECIPES_PATH}/{recipe_id}"),
        success_message="Receta eliminada",
        failure_message="No se pudo eliminar la receta",
        recipe_id=recipe_id,
        product_id=product_id,
    )


def calculate_local_cost(ctx, recipe: Recipe) -> RecipeCost:
    """
    Cost a recipe from the current ingredients and conversion table.

    Always recomputed from the cached inputs; the result itself is never
    cached.

    Raises:
        ConversionNotFound: A line's unit cannot be converted
        ValidationError: Unknown ingredient or invalid yield
    """
    return calculate_recipe_cost(recipe, ingredients_by_id(ctx), get_conversion_table(ctx))
