"""Provider Service - CRUD for ingredient suppliers (/inventory/providers)."""

from typing import List

from ..models.api_record import str_or_none
from ..models.product import Provider
from ..utils.validators import validate_provider_data
from . import query_keys as keys
from .cache_rules import Mutation
from .exceptions import ValidationError
from .mutations import MutationResult, perform_mutation

PROVIDERS_PATH = "/inventory/providers"
_OPTIONAL_FIELDS = ("contacto", "telefono", "email", "frecuencia", "notas")


def list_providers(ctx, force: bool = False) -> List[Provider]:
    return ctx.cache.fetch(
        keys.PROVIDERS,
        lambda: [Provider.from_api(row) for row in ctx.client.get(PROVIDERS_PATH) or []],
        force=force,
    )


def provider_payload(data: dict) -> dict:
    """Only nombre is required; blank optional fields are left out."""
    is_valid, errors = validate_provider_data(data)
    if not is_valid:
        raise ValidationError(errors)
    payload = {"nombre": data["nombre"].strip()}
    for field in _OPTIONAL_FIELDS:
        value = str_or_none(data, field)
        if value is not None:
            payload[field] = value.strip()
    return payload


def create_provider(ctx, data: dict) -> MutationResult:
    payload = provider_payload(data)
    return perform_mutation(
        ctx,
        Mutation.CREATE_PROVIDER,
        lambda: ctx.client.post(PROVIDERS_PATH, json=payload),
        success_message="Proveedor creado exitosamente",
        failure_message="Error al crear proveedor",
    )


def update_provider(ctx, provider_id: str, data: dict) -> MutationResult:
    payload = provider_payload(data)
    return perform_mutation(
        ctx,
        Mutation.UPDATE_PROVIDER,
        lambda: ctx.client.put(f"{PROVIDERS_PATH}/{provider_id}", json=payload),
        success_message="Proveedor actualizado exitosamente",
        failure_message="Error al actualizar proveedor",
    )


def delete_provider(ctx, provider_id: str) -> MutationResult:
    return perform_mutation(
        ctx,
        Mutation.DELETE_PROVIDER,
        lambda: ctx.client.delete(f"{PROVIDERS_PATH}/{provider_id}"),
        success_message="Proveedor eliminado exitosamente",
        failure_message="Error al eliminar proveedor",
    )
