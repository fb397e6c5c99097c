"""Dashboard Service - headline figures (GET /dashboard/stats)."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Optional

from ..models.api_record import decimal_or_zero
from . import query_keys as keys

DASHBOARD_PATH = "/dashboard/stats"


@dataclass(frozen=True)
class DashboardStats:
    ventas_hoy: Decimal
    ventas_mes: Decimal
    ventas_mes_anterior: Decimal
    gastos_mes: Decimal
    insumos_stock_bajo: int
    productos_disponibles: int

    @classmethod
    def from_api(cls, data: Mapping) -> "DashboardStats":
        return cls(
            ventas_hoy=decimal_or_zero(data, "ventasHoy"),
            ventas_mes=decimal_or_zero(data, "ventasMes"),
            ventas_mes_anterior=decimal_or_zero(data, "ventasMesAnterior"),
            gastos_mes=decimal_or_zero(data, "gastosMes"),
            insumos_stock_bajo=int(data.get("insumosStockBajo") or 0),
            productos_disponibles=int(data.get("productosDisponibles") or 0),
        )

    @property
    def month_over_month(self) -> Optional[Decimal]:
        """Sales change versus last month as a percentage; None without a baseline."""
        if self.ventas_mes_anterior == 0:
            return None
        return (self.ventas_mes - self.ventas_mes_anterior) / self.ventas_mes_anterior * 100


def get_dashboard_stats(ctx, force: bool = False) -> DashboardStats:
    return ctx.cache.fetch(
        keys.DASHBOARD_STATS,
        lambda: DashboardStats.from_api(ctx.client.get(DASHBOARD_PATH) or {}),
        force=force,
    )
