"""Authenticated user and system configuration records."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Optional

from .api_record import decimal_or_none, decimal_or_zero, str_or_none


@dataclass(frozen=True)
class User:
    """
    Dashboard user.

    Attributes:
        id: User identifier
        username: Login name
        role: ADMIN, PANADERO or CAJERO
        nombre: Display name, if known
    """

    id: str
    username: str
    role: str
    nombre: Optional[str] = None

    @classmethod
    def from_api(cls, data: Mapping) -> "User":
        # The users endpoint reports the role as "rol"
        return cls(
            id=str(data["id"]),
            username=data.get("username", ""),
            role=data.get("role") or data.get("rol") or "",
            nombre=str_or_none(data, "nombre"),
        )


@dataclass(frozen=True)
class SystemConfig:
    """
    Global settings held by the server.

    Attributes:
        tasa_cambio: 1 USD = tasa_cambio NIO
        factor_overhead: Overhead factor applied to recipe costs, if set
    """

    tasa_cambio: Decimal
    factor_overhead: Optional[Decimal] = None

    @classmethod
    def from_api(cls, data: Mapping) -> "SystemConfig":
        return cls(
            tasa_cambio=decimal_or_zero(data, "tasaCambio"),
            factor_overhead=decimal_or_none(data, "factorOverhead"),
        )
