"""Conversion Service - the unit conversion table (GET /conversions).

The endpoint returns a bare array of {unidadOrigen, unidadDestino, factor}.
The table is loaded once per session and kept read-only; it is only
re-fetched after the cache is cleared (logout) or on force=True.
"""

from . import query_keys as keys
from .unit_converter import ConversionTable

CONVERSIONS_PATH = "/conversions"


def get_conversion_table(ctx, force: bool = False) -> ConversionTable:
    return ctx.cache.fetch(
        keys.CONVERSIONS,
        lambda: ConversionTable.from_api(ctx.client.get(CONVERSIONS_PATH) or []),
        force=force,
    )
