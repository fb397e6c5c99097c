"""Config Service - server-held settings (/config).

The exchange rate and overhead factor live on the server. Fetching or
updating them also refreshes the copies the AppContext hands to checkout
and recipe costing.
"""

from ..models.api_record import json_number
from ..models.user import SystemConfig
from ..utils.validators import validate_config_data
from . import query_keys as keys
from .cache_rules import Mutation
from .exceptions import ValidationError
from .logging_utils import get_service_logger
from .mutations import MutationResult, perform_mutation

logger = get_service_logger(__name__)

CONFIG_PATH = "/config"


def _apply(ctx, config: SystemConfig) -> None:
    if config.tasa_cambio > 0:
        ctx.set_exchange_rate(config.tasa_cambio)
    else:
        logger.warning(f"Server sent an unusable exchange rate: {config.tasa_cambio}")
    if config.factor_overhead is not None:
        ctx.overhead_factor = config.factor_overhead


def fetch_config(ctx, force: bool = False) -> SystemConfig:
    """GET /config (bare or wrapped in data) and load it into the context."""
    config = ctx.cache.fetch(
        keys.CONFIG,
        lambda: SystemConfig.from_api(ctx.client.get(CONFIG_PATH) or {}),
        force=force,
    )
    _apply(ctx, config)
    return config


def config_payload(data: dict) -> dict:
    """
    Raises:
        ValidationError: tasaCambio not > 0, or factorOverhead negative
    """
    is_valid, errors = validate_config_data(data)
    if not is_valid:
        raise ValidationError(errors)
    payload = {"tasaCambio": json_number(data["tasaCambio"])}
    if data.get("factorOverhead") not in (None, ""):
        payload["factorOverhead"] = json_number(data["factorOverhead"])
    return payload


def update_config(ctx, data: dict) -> MutationResult:
    """PUT /config {tasaCambio, factorOverhead?}; the context picks up the new values on success."""
    payload = config_payload(data)
    result = perform_mutation(
        ctx,
        Mutation.UPDATE_CONFIG,
        lambda: ctx.client.put(CONFIG_PATH, json=payload),
        success_message="Configuración actualizada exitosamente",
        failure_message="Error al actualizar configuración",
    )
    if result.ok:
        _apply(ctx, SystemConfig.from_api(payload))
    return result
