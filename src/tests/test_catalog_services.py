"""
Tests for the catalogue services: ingredients, providers, categories,
products and the conversion table.

Tests cover:
- Cached reads (one request until invalidated)
- Validation before any request
- Request payloads and invalidation after writes
- Product origin, grouping and margin helpers
"""

from decimal import Decimal

import pytest

from alici_erp.models.product import Category, Product
from alici_erp.services import (
    category_service,
    conversion_service,
    inventory_service,
    product_service,
    provider_service,
)
from alici_erp.services.exceptions import ValidationError


class TestInventoryService:
    def test_list_is_cached(self, ctx, api):
        api.add("GET", "/inventory", {"data": [{"id": "i1", "nombre": "Harina", "unidad": "KG", "costoPromedio": 50}]})

        first = inventory_service.list_ingredients(ctx)
        second = inventory_service.list_ingredients(ctx)

        assert first[0].costo_promedio == Decimal("50")
        assert first is second
        assert len(api.calls_to("GET", "/inventory")) == 1

    def test_force_refetches(self, ctx, api):
        api.add("GET", "/inventory", [])
        inventory_service.list_ingredients(ctx)
        inventory_service.list_ingredients(ctx, force=True)
        assert len(api.calls_to("GET", "/inventory")) == 2

    def test_ingredients_by_id(self, ctx, api):
        api.add("GET", "/inventory", [{"id": "i1", "nombre": "Harina", "unidad": "KG"}])
        assert list(inventory_service.ingredients_by_id(ctx)) == ["i1"]

    def test_create_payload(self, ctx, api):
        api.add("POST", "/inventory", {"data": {"id": "i2"}}, status_code=201)

        result = inventory_service.create_ingredient(
            ctx, {"nombre": " Azúcar ", "unidad": "kg", "stock": "10", "costoPromedio": "32.5"}
        )

        assert result.ok
        assert api.calls[0].json == {"nombre": "Azúcar", "unidad": "KG", "stock": 10, "costoPromedio": 32.5}
        assert ctx.notifier.messages() == ["Insumo creado exitosamente"]

    def test_invalid_ingredient_sends_nothing(self, ctx, api):
        with pytest.raises(ValidationError):
            inventory_service.create_ingredient(ctx, {"nombre": "", "unidad": "KG"})
        assert api.calls == []

    def test_purchase_invalidates_ingredients_and_costs(self, ctx, api):
        ctx.cache.set(("insumos",), [])
        ctx.cache.set(("recipe-cost", "r1"), object())
        api.add("POST", "/inventory/purchase", {"message": "ok"})

        result = inventory_service.register_purchase(ctx, {"insumoId": "i1", "cantidad": 25, "costoTotal": "1250.50"})

        assert result.ok
        assert api.calls[0].json == {"insumoId": "i1", "cantidad": 25, "costoTotal": 1250.5}
        assert ctx.cache.is_stale(("insumos",))
        assert ctx.cache.is_stale(("recipe-cost", "r1"))

    def test_purchase_requires_positive_quantity(self, ctx, api):
        with pytest.raises(ValidationError):
            inventory_service.register_purchase(ctx, {"insumoId": "i1", "cantidad": 0, "costoTotal": 10})
        assert api.calls == []

    def test_delete_failure_notifies(self, ctx, api):
        api.add("DELETE", "/inventory/i1", {"error": "Insumo en uso por recetas"}, status_code=409)

        result = inventory_service.delete_ingredient(ctx, "i1")

        assert result.ok is False
        assert ctx.notifier.messages("error") == ["Insumo en uso por recetas"]


class TestProviderService:
    def test_blank_optional_fields_dropped(self, ctx, api):
        api.add("POST", "/inventory/providers", {"id": "pr1"})

        provider_service.create_provider(ctx, {"nombre": "Molinos", "telefono": " ", "email": "ventas@molinos.ni"})

        assert api.calls[0].json == {"nombre": "Molinos", "email": "ventas@molinos.ni"}

    def test_update_invalidates_list(self, ctx, api):
        ctx.cache.set(("providers",), [])
        api.add("PUT", "/inventory/providers/pr1", {})

        provider_service.update_provider(ctx, "pr1", {"nombre": "Molinos"})

        assert ctx.cache.is_stale(("providers",))

    def test_list(self, ctx, api):
        api.add("GET", "/inventory/providers", [{"id": 1, "nombre": "Molinos"}])
        assert provider_service.list_providers(ctx)[0].id == "1"


class TestCategoryService:
    def test_filter_by_tipo(self, ctx, api):
        api.add(
            "GET",
            "/inventory/categories",
            [{"id": "c1", "nombre": "Panes", "tipo": "PRODUCCION"}, {"id": "c2", "nombre": "Bebidas", "tipo": "REVENTA"}],
        )

        resale = category_service.list_categories(ctx, tipo="REVENTA")

        assert [c.nombre for c in resale] == ["Bebidas"]
        assert len(category_service.list_categories(ctx)) == 2
        assert len(api.calls) == 1

    def test_tipo_required(self, ctx, api):
        with pytest.raises(ValidationError):
            category_service.create_category(ctx, {"nombre": "Panes"})

    def test_delete(self, ctx, api):
        api.add("DELETE", "/inventory/categories/c1", status_code=204)
        assert category_service.delete_category(ctx, "c1").ok
        assert ctx.notifier.messages() == ["Categoría eliminada exitosamente"]


class TestProductService:
    def test_get_product_from_cached_list(self, ctx, api):
        api.add("GET", "/production/products", {"data": [{"id": "p1", "nombre": "Pan"}, {"id": "p2", "nombre": "Flan"}]})

        assert product_service.get_product(ctx, "p2").nombre == "Flan"
        assert product_service.get_product(ctx, "p9") is None
        assert len(api.calls) == 1

    def test_search(self):
        products = [Product(id="1", nombre="Pan Francés"), Product(id="2", nombre="Refresco", categoria="Bebidas")]
        assert [p.id for p in product_service.search_products(products, "beb")] == ["2"]
        assert len(product_service.search_products(products, "  ")) == 2

    def test_payload(self, ctx, api):
        api.add("POST", "/production/products", {"id": "p3"})

        product_service.create_product(
            ctx, {"nombre": "Concha", "precioVenta": "15", "categoriaId": "c1", "costoUnitario": ""}
        )

        assert api.calls[0].json == {"nombre": "Concha", "precioVenta": 15, "stockDisponible": 0, "categoriaId": "c1"}

    def test_negative_price_rejected(self, ctx, api):
        with pytest.raises(ValidationError):
            product_service.create_product(ctx, {"nombre": "Concha", "precioVenta": -1})

    def test_origin(self):
        categories = {"c1": Category(id="c1", nombre="Panes", tipo="PRODUCCION")}
        assert product_service.product_origin(Product(id="1", nombre="Pan", categoria_id="c1"), categories) == "Producción"
        assert product_service.product_origin(Product(id="2", nombre="Jugo"), categories) == "Sin origen asignado"

    def test_group_by_category(self):
        groups = product_service.group_by_category(
            [Product(id="1", nombre="Baguette"), Product(id="2", nombre="Flan"), Product(id="3", nombre="Bolillo")]
        )
        assert list(groups) == ["Pan Simple", "Postres"]
        assert [p.id for p in groups["Pan Simple"]] == ["1", "3"]

    def test_margin(self):
        product = Product(id="1", nombre="Pan", precio_venta=Decimal("20"), costo_unitario=Decimal("15"))
        assert product_service.product_margin(product).margen == Decimal("0.25")
        assert product_service.product_margin(Product(id="2", nombre="Pan")) is None


class TestConversionService:
    def test_table_loaded_once(self, ctx, api):
        api.add("GET", "/conversions", [{"unidadOrigen": "LB", "unidadDestino": "KG", "factor": 0.4536}])

        table = conversion_service.get_conversion_table(ctx)
        conversion_service.get_conversion_table(ctx)

        assert table.factor("lb", "kg") == Decimal("0.4536")
        assert len(api.calls) == 1
