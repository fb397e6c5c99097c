"""
Recipe costing.

Computes the batch and per-unit cost of a recipe from the current
ingredient average costs and the unit conversion table:

    line cost      = convert(cantidad, line unit -> native unit) * costo_promedio
    costo_insumos  = sum(line costs)
    costo_total    = costo_insumos + labor + overhead
    costo_unitario = costo_total / cantidad_base

The result is always derived from the inputs passed in; nothing is cached
or persisted, so it cannot drift from the ingredient costs it was built
from. A line whose unit cannot be converted fails the whole calculation:
no zero cost and no 1:1 factor is ever substituted.
"""

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Mapping, Optional

from ..models.ingredient import Ingredient
from ..models.recipe import Recipe, RecipeLine
from ..utils.constants import CENTS, ZERO
from ..utils.validators import to_decimal
from .exceptions import ConversionNotFound, ValidationError
from .logging_utils import get_service_logger, log_operation
from .unit_converter import ConversionTable, describe_conversion, normalize_unit

logger = get_service_logger(__name__)


@dataclass(frozen=True)
class CostLine:
    """
    Cost of one recipe line, kept for display and audit.

    Attributes:
        insumo_id: Ingredient identifier
        insumo: Ingredient name
        cantidad: Quantity as stated in the recipe
        unidad: Unit as stated in the recipe
        cantidad_convertida: Quantity in the ingredient's native unit
        unidad_nativa: Ingredient native unit
        factor: Conversion factor applied (1 for identical units)
        conversion: Readable description of the conversion
        costo_unitario_insumo: Average cost per native unit used
        costo: Resulting line cost
    """

    insumo_id: str
    insumo: str
    cantidad: Decimal
    unidad: str
    cantidad_convertida: Decimal
    unidad_nativa: str
    factor: Decimal
    conversion: str
    costo_unitario_insumo: Decimal
    costo: Decimal


@dataclass(frozen=True)
class RecipeCost:
    """
    Batch cost breakdown of a recipe.

    Attributes:
        costo_insumos: Sum of ingredient line costs
        costo_mano_obra: Estimated labor per batch
        costo_overhead: Estimated overhead per batch
        costo_total: costo_insumos + costo_mano_obra + costo_overhead
        costo_unitario: costo_total / cantidad_base
        cantidad_base: Batch yield used for the division
        detalles: Per-line breakdown, in recipe order
    """

    costo_insumos: Decimal
    costo_mano_obra: Decimal
    costo_overhead: Decimal
    costo_total: Decimal
    costo_unitario: Decimal
    cantidad_base: Decimal
    detalles: List[CostLine] = field(default_factory=list)

    def rounded(self) -> "RecipeCost":
        """Copy with every money figure rounded to cents for display."""
        return RecipeCost(
            costo_insumos=round_money(self.costo_insumos),
            costo_mano_obra=round_money(self.costo_mano_obra),
            costo_overhead=round_money(self.costo_overhead),
            costo_total=round_money(self.costo_total),
            costo_unitario=round_money(self.costo_unitario),
            cantidad_base=self.cantidad_base,
            detalles=list(self.detalles),
        )


@dataclass(frozen=True)
class Margin:
    """Pricing view of a product: profit per unit, margin on price, markup on cost."""

    precio_venta: Decimal
    costo_unitario: Decimal
    ganancia: Decimal
    margen: Optional[Decimal]
    markup: Optional[Decimal]


def round_money(value: Decimal) -> Decimal:
    """Round a money value to cents, half up."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def _line_label(index: int, line: RecipeLine, ingredient: Optional[Ingredient]) -> str:
    name = ingredient.nombre if ingredient is not None else line.insumo_id
    return f"#{index + 1} {name}"


def _cost_line(
    index: int,
    line: RecipeLine,
    ingredients: Mapping[str, Ingredient],
    table: ConversionTable,
) -> CostLine:
    ingredient = ingredients.get(line.insumo_id)
    if ingredient is None:
        raise ValidationError([f"Línea #{index + 1}: insumo {line.insumo_id} no encontrado"])

    quantity = to_decimal(line.cantidad)
    if quantity is None or quantity <= 0:
        raise ValidationError([f"Línea {_line_label(index, line, ingredient)}: cantidad inválida"])

    stated_unit = normalize_unit(line.unidad)
    native_unit = normalize_unit(ingredient.unidad)
    factor = table.factor(stated_unit, native_unit)
    if factor is None:
        raise ConversionNotFound(stated_unit, native_unit, line=_line_label(index, line, ingredient))

    converted = quantity * factor
    return CostLine(
        insumo_id=ingredient.id,
        insumo=ingredient.nombre,
        cantidad=quantity,
        unidad=stated_unit,
        cantidad_convertida=converted,
        unidad_nativa=native_unit,
        factor=factor,
        conversion=describe_conversion(quantity, stated_unit, native_unit, table),
        costo_unitario_insumo=ingredient.costo_promedio,
        costo=converted * ingredient.costo_promedio,
    )


def calculate_recipe_cost(
    recipe: Recipe,
    ingredients: Mapping[str, Ingredient],
    table: ConversionTable,
) -> RecipeCost:
    """
    Cost a recipe batch from current ingredient costs.

    Args:
        recipe: Recipe with batch yield, labor, overhead and lines
        ingredients: Ingredient id -> Ingredient (native unit and average cost)
        table: Unit conversion table for the session

    Returns:
        RecipeCost with totals and a per-line breakdown

    Raises:
        ValidationError: Batch yield <= 0, negative labor/overhead, unknown
            ingredient or non-positive line quantity
        ConversionNotFound: A line's unit has no entry to its ingredient's
            native unit; names the unit and the line
    """
    batch_yield = to_decimal(recipe.cantidad_base)
    if batch_yield is None or batch_yield <= 0:
        raise ValidationError(["Cantidad base: debe ser mayor a cero"])
    labor = to_decimal(recipe.costo_mano_obra)
    overhead = to_decimal(recipe.gastos_operativos)
    if labor is None or labor < 0 or overhead is None or overhead < 0:
        raise ValidationError(["Mano de obra y gastos operativos: deben ser mayores o iguales a cero"])

    try:
        lines = [_cost_line(i, line, ingredients, table) for i, line in enumerate(recipe.lines)]
    except ConversionNotFound as e:
        log_operation(
            logger,
            operation="calculate_recipe_cost",
            outcome="conversion_not_found",
            level=logging.WARNING,
            recipe_id=recipe.id,
            from_unit=e.from_unit,
            to_unit=e.to_unit,
        )
        raise

    ingredients_cost = sum((line.costo for line in lines), ZERO)
    total = ingredients_cost + labor + overhead
    return RecipeCost(
        costo_insumos=ingredients_cost,
        costo_mano_obra=labor,
        costo_overhead=overhead,
        costo_total=total,
        costo_unitario=total / batch_yield,
        cantidad_base=batch_yield,
        detalles=lines,
    )


def calculate_margin(precio_venta, costo_unitario) -> Margin:
    """
    Profit, margin and markup of selling at precio_venta.

    margen = ganancia / precio_venta and markup = ganancia / costo_unitario,
    both as fractions. Either is None when its denominator is zero.

    Raises:
        ValidationError: If either value is not a non-negative number
    """
    price = to_decimal(precio_venta)
    cost = to_decimal(costo_unitario)
    if price is None or price < 0 or cost is None or cost < 0:
        raise ValidationError(["Precio y costo: deben ser números mayores o iguales a cero"])
    profit = price - cost
    return Margin(
        precio_venta=price,
        costo_unitario=cost,
        ganancia=profit,
        margen=profit / price if price else None,
        markup=profit / cost if cost else None,
    )
