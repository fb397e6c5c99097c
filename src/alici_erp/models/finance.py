"""Cash movement and payroll records."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Mapping, Optional

from ..utils.datetime_utils import parse_api_datetime
from .api_record import decimal_or_none, decimal_or_zero, str_or_none


@dataclass(frozen=True)
class CashMovement:
    """
    Cash register movement.

    Attributes:
        tipo: INGRESO or EGRESO
        monto: Amount (primary currency)
        descripcion: Free text
        referencia_id / referencia_tipo: Link to the originating record
        fecha: When the movement happened
    """

    id: str
    tipo: str
    monto: Decimal
    descripcion: Optional[str] = None
    referencia_id: Optional[str] = None
    referencia_tipo: Optional[str] = None
    fecha: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Mapping) -> "CashMovement":
        return cls(
            id=str(data["id"]),
            tipo=data.get("tipo", ""),
            monto=decimal_or_zero(data, "monto"),
            descripcion=str_or_none(data, "descripcion"),
            referencia_id=str_or_none(data, "referenciaId"),
            referencia_tipo=str_or_none(data, "referenciaTipo"),
            fecha=parse_api_datetime(data.get("fecha")),
        )


@dataclass(frozen=True)
class PayrollEntry:
    """Fortnightly payroll payment for one employee."""

    id: str
    nombre: str
    puesto: str
    area_trabajo: str
    quincena: int
    salario_base: Decimal = Decimal("0")
    pago_horas_extra: Decimal = Decimal("0")
    total_pago: Optional[Decimal] = None

    @classmethod
    def from_api(cls, data: Mapping) -> "PayrollEntry":
        return cls(
            id=str(data["id"]),
            nombre=data.get("nombre", ""),
            puesto=data.get("puesto", ""),
            area_trabajo=data.get("areaTrabajo", ""),
            quincena=int(data.get("quincena") or 0),
            salario_base=decimal_or_zero(data, "salarioBase"),
            pago_horas_extra=decimal_or_zero(data, "pagoHorasExtra"),
            total_pago=decimal_or_none(data, "totalPago"),
        )
