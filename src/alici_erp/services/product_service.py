"""Product Service - finished goods (/production/products).

Products are what the till sells. Besides CRUD this module answers the
catalogue questions the screens ask: which display category a product
falls in, where it comes from (own production or resale), and what
margin its sale price leaves over its unit cost.
"""

from typing import Dict, Iterable, List, Mapping, Optional

from ..models.api_record import json_number, str_or_none
from ..models.product import Category, Product
from ..utils.constants import CATEGORY_PRODUCTION, CATEGORY_RESALE
from ..utils.product_categories import get_available_product_categories, get_product_category
from ..utils.validators import validate_product_data
from . import query_keys as keys
from .cache_rules import Mutation
from .exceptions import ValidationError
from .mutations import MutationResult, perform_mutation
from .recipe_cost_service import Margin, calculate_margin

PRODUCTS_PATH = "/production/products"

ORIGIN_LABELS = {
    CATEGORY_PRODUCTION: "Producción",
    CATEGORY_RESALE: "Reventa",
}
NO_ORIGIN_LABEL = "Sin origen asignado"


def list_products(ctx, force: bool = False) -> List[Product]:
    return ctx.cache.fetch(
        keys.PRODUCTS,
        lambda: [Product.from_api(row) for row in ctx.client.get(PRODUCTS_PATH) or []],
        force=force,
    )


def get_product(ctx, product_id: str) -> Optional[Product]:
    """Product from the cached list, or None."""
    for product in list_products(ctx):
        if product.id == str(product_id):
            return product
    return None


def search_products(products: Iterable[Product], term: str) -> List[Product]:
    """Case-insensitive match on name or category."""
    term = (term or "").strip().lower()
    if not term:
        return list(products)
    return [
        p for p in products
        if term in p.nombre.lower() or term in (p.categoria or "").lower()
    ]


def product_payload(data: dict) -> dict:
    """
    Validate and shape a product form.

    Raises:
        ValidationError: Missing name, or negative price/stock/cost
    """
    is_valid, errors = validate_product_data(data)
    if not is_valid:
        raise ValidationError(errors)
    payload = {
        "nombre": data["nombre"].strip(),
        "precioVenta": json_number(data["precioVenta"]),
        "stockDisponible": json_number(data.get("stockDisponible", 0)),
    }
    for field in ("categoria", "categoriaId"):
        value = str_or_none(data, field)
        if value is not None:
            payload[field] = value
    if data.get("costoUnitario") not in (None, ""):
        payload["costoUnitario"] = json_number(data["costoUnitario"])
    return payload


def create_product(ctx, data: dict) -> MutationResult:
    payload = product_payload(data)
    return perform_mutation(
        ctx,
        Mutation.CREATE_PRODUCT,
        lambda: ctx.client.post(PRODUCTS_PATH, json=payload),
        success_message="Producto creado correctamente",
        failure_message="No se pudo crear el producto",
    )


def update_product(ctx, product_id: str, data: dict) -> MutationResult:
    payload = product_payload(data)
    return perform_mutation(
        ctx,
        Mutation.UPDATE_PRODUCT,
        lambda: ctx.client.put(f"{PRODUCTS_PATH}/{product_id}", json=payload),
        success_message="Producto actualizado correctamente",
        failure_message="No se pudo actualizar el producto",
    )


def delete_product(ctx, product_id: str) -> MutationResult:
    return perform_mutation(
        ctx,
        Mutation.DELETE_PRODUCT,
        lambda: ctx.client.delete(f"{PRODUCTS_PATH}/{product_id}"),
        success_message="Producto eliminado",
        failure_message="No se pudo eliminar el producto",
    )


def product_origin(product: Product, categories_by_id: Mapping[str, Category]) -> str:
    """'Producción', 'Reventa' or 'Sin origen asignado'."""
    category = categories_by_id.get(product.categoria_id) if product.categoria_id else None
    if category is None:
        return NO_ORIGIN_LABEL
    return ORIGIN_LABELS.get(category.tipo, NO_ORIGIN_LABEL)


def group_by_category(products: Iterable[Product]) -> Dict[str, List[Product]]:
    """Products grouped under their display category, categories sorted."""
    products = list(products)
    groups: Dict[str, List[Product]] = {label: [] for label in get_available_product_categories(products)}
    for product in products:
        groups[get_product_category(product)].append(product)
    return groups


def product_margin(product: Product) -> Optional[Margin]:
    """Margin of the sale price over the unit cost; None when no cost is known."""
    if product.unit_cost is None:
        return None
    return calculate_margin(product.precio_venta, product.unit_cost)
