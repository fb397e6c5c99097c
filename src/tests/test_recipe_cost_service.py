"""
Tests for recipe costing.

Tests cover:
- Batch and unit cost from converted ingredient quantities
- Failure on a missing conversion (no zero or 1:1 substitution)
- Input validation (yield, labor, overhead, unknown ingredient)
- Idempotence
- Margin and markup
"""

from decimal import Decimal

import pytest

from alici_erp.models.ingredient import Ingredient
from alici_erp.models.recipe import Recipe, RecipeLine, UnitConversion
from alici_erp.services.exceptions import ConversionNotFound, ValidationError
from alici_erp.services.recipe_cost_service import (
    calculate_margin,
    calculate_recipe_cost,
    round_money,
)
from alici_erp.services.unit_converter import ConversionTable


@pytest.fixture
def harina():
    return Ingredient(id="X", nombre="Harina", unidad="KG", costo_promedio=Decimal("50"))


@pytest.fixture
def table():
    return ConversionTable([UnitConversion("LB", "KG", Decimal("0.4536"))])


def make_recipe(lines, cantidad_base="4", labor="10", overhead="5"):
    return Recipe(
        id="r1",
        producto_id="p1",
        nombre="Pan",
        cantidad_base=Decimal(cantidad_base),
        costo_mano_obra=Decimal(labor),
        gastos_operativos=Decimal(overhead),
        lines=tuple(lines),
    )


class TestCalculateRecipeCost:
    def test_converted_line_cost(self, harina, table):
        recipe = make_recipe([RecipeLine(insumo_id="X", cantidad=Decimal("2"), unidad="LB")])

        cost = calculate_recipe_cost(recipe, {"X": harina}, table)

        assert cost.costo_insumos == Decimal("45.36")
        assert cost.costo_total == Decimal("60.36")
        assert cost.costo_unitario == Decimal("15.09")

    def test_breakdown_per_line(self, harina, table):
        recipe = make_recipe([RecipeLine(insumo_id="X", cantidad=Decimal("2"), unidad="LB")])

        line = calculate_recipe_cost(recipe, {"X": harina}, table).detalles[0]

        assert line.insumo == "Harina"
        assert line.cantidad == Decimal("2")
        assert line.unidad == "LB"
        assert line.unidad_nativa == "KG"
        assert line.factor == Decimal("0.4536")
        assert line.conversion == "2 LB x 0.4536 = 0.9072 KG"
        assert line.costo == Decimal("45.36")

    def test_native_unit_needs_no_entry(self, harina):
        recipe = make_recipe([RecipeLine(insumo_id="X", cantidad=Decimal("1"), unidad="kg")], labor="0", overhead="0", cantidad_base="2")

        cost = calculate_recipe_cost(recipe, {"X": harina}, ConversionTable())

        assert cost.costo_total == Decimal("50")
        assert cost.costo_unitario == Decimal("25")

    def test_missing_conversion_fails_whole_calculation(self, harina, table):
        recipe = make_recipe(
            [
                RecipeLine(insumo_id="X", cantidad=Decimal("2"), unidad="LB"),
                RecipeLine(insumo_id="X", cantidad=Decimal("1"), unidad="TAZA"),
            ]
        )

        with pytest.raises(ConversionNotFound) as exc_info:
            calculate_recipe_cost(recipe, {"X": harina}, table)

        assert exc_info.value.from_unit == "TAZA"
        assert exc_info.value.to_unit == "KG"
        assert exc_info.value.line == "#2 Harina"

    def test_empty_recipe_costs_labor_and_overhead(self, table):
        cost = calculate_recipe_cost(make_recipe([]), {}, table)

        assert cost.costo_insumos == Decimal("0")
        assert cost.costo_total == Decimal("15")
        assert cost.detalles == []

    @pytest.mark.parametrize("cantidad_base", ["0", "-1"])
    def test_non_positive_yield_rejected(self, harina, table, cantidad_base):
        with pytest.raises(ValidationError):
            calculate_recipe_cost(make_recipe([], cantidad_base=cantidad_base), {"X": harina}, table)

    def test_negative_labor_rejected(self, table):
        with pytest.raises(ValidationError):
            calculate_recipe_cost(make_recipe([], labor="-1"), {}, table)

    def test_unknown_ingredient_rejected(self, table):
        recipe = make_recipe([RecipeLine(insumo_id="missing", cantidad=Decimal("1"), unidad="KG")])
        with pytest.raises(ValidationError):
            calculate_recipe_cost(recipe, {}, table)

    def test_non_positive_quantity_rejected(self, harina, table):
        recipe = make_recipe([RecipeLine(insumo_id="X", cantidad=Decimal("0"), unidad="KG")])
        with pytest.raises(ValidationError):
            calculate_recipe_cost(recipe, {"X": harina}, table)

    def test_identical_inputs_give_identical_output(self, harina, table):
        recipe = make_recipe([RecipeLine(insumo_id="X", cantidad=Decimal("2"), unidad="LB")])

        first = calculate_recipe_cost(recipe, {"X": harina}, table)
        second = calculate_recipe_cost(recipe, {"X": harina}, table)

        assert first == second

    def test_rounded(self, harina, table):
        recipe = make_recipe([RecipeLine(insumo_id="X", cantidad=Decimal("1"), unidad="LB")], labor="0", overhead="0", cantidad_base="3")

        cost = calculate_recipe_cost(recipe, {"X": harina}, table).rounded()

        assert cost.costo_total == Decimal("22.68")
        assert cost.costo_unitario == Decimal("7.56")


class TestMargin:
    def test_margin_and_markup(self):
        margin = calculate_margin(20, 15)

        assert margin.ganancia == Decimal("5")
        assert margin.margen == Decimal("0.25")
        assert margin.markup == Decimal("5") / Decimal("15")

    def test_zero_price_has_no_margin(self):
        margin = calculate_margin(0, 10)
        assert margin.margen is None
        assert margin.ganancia == Decimal("-10")

    def test_zero_cost_has_no_markup(self):
        assert calculate_margin(10, 0).markup is None

    def test_negative_values_rejected(self):
        with pytest.raises(ValidationError):
            calculate_margin(-1, 5)


def test_round_money_half_up():
    assert round_money(Decimal("2.345")) == Decimal("2.35")
    assert round_money(Decimal("2.344")) == Decimal("2.34")
