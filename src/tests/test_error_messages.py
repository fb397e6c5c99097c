"""Tests for mapping service exceptions to user-facing messages."""

from decimal import Decimal

from alici_erp.services.error_messages import get_user_message, handle_error
from alici_erp.services.exceptions import (
    ConversionNotFound,
    EmptyCart,
    InsufficientPayment,
    InvalidExchangeRate,
    RequestFailed,
    Unauthorized,
    ValidationError,
)
from alici_erp.services.notifications import Notifier


class TestGetUserMessage:
    def test_validation_errors_joined(self):
        title, message = get_user_message(ValidationError(["Nombre: Este campo es obligatorio", "Monto: Debe ser mayor a cero"]))
        assert title == "Datos inválidos"
        assert message == "Nombre: Este campo es obligatorio; Monto: Debe ser mayor a cero"

    def test_specific_validation_subclasses(self):
        assert get_user_message(InvalidExchangeRate(0))[0] == "Tasa inválida"
        assert get_user_message(EmptyCart())[0] == "Carrito vacío"

    def test_conversion_not_found(self):
        _, message = get_user_message(ConversionNotFound("TAZA", "KG", line="#2 Harina"))
        assert message == "No hay conversión de TAZA a KG (insumo #2 Harina)."

    def test_insufficient_payment_shows_missing_amount(self):
        _, message = get_user_message(InsufficientPayment(Decimal("100"), Decimal("73")))
        assert message == "Faltan C$ 27.00 para completar el pago."

    def test_request_failed_uses_message(self):
        assert get_user_message(RequestFailed("Stock insuficiente"))[1] == "Stock insuficiente"

    def test_unexpected_exception(self):
        assert get_user_message(KeyError("x")) == ("Error inesperado", "Ocurrió un error inesperado")


class TestHandleError:
    def test_notifies(self):
        notifier = Notifier()
        handle_error(RequestFailed("Sin conexión"), notifier, operation="Cargar productos")
        assert notifier.messages("error") == ["Sin conexión"]

    def test_unauthorized_not_notified_twice(self):
        notifier = Notifier()
        title, _ = handle_error(Unauthorized(), notifier)
        assert title == "Sesión expirada"
        assert notifier.messages() == []

    def test_without_notifier(self):
        assert handle_error(ValidationError(["x"]))[0] == "Datos inválidos"


def test_notifier_history():
    notifier = Notifier()
    received = []
    notifier.subscribe(received.append)

    notifier.success("ok")
    notifier.info("cargando")

    assert [n.level for n in received] == ["success", "info"]
    assert notifier.messages("success") == ["ok"]
    notifier.clear()
    assert notifier.history == []
