"""Users Service - dashboard user administration (/auth).

Only ADMIN users reach these screens; the server enforces it.
"""

from typing import List

from ..models.user import User
from ..utils.validators import validate_user_data
from . import query_keys as keys
from .cache_rules import Mutation
from .exceptions import ValidationError
from .mutations import MutationResult, perform_mutation

USERS_PATH = "/auth/users"
REGISTER_PATH = "/auth/register"


def list_users(ctx, force: bool = False) -> List[User]:
    return ctx.cache.fetch(
        keys.USERS,
        lambda: [User.from_api(row) for row in ctx.client.get(USERS_PATH) or []],
        force=force,
    )


def create_user(ctx, data: dict) -> MutationResult:
    """
    POST /auth/register {username, password, rol, nombre}.

    Raises:
        ValidationError: A required field is missing or rol is unknown
    """
    is_valid, errors = validate_user_data(data)
    if not is_valid:
        raise ValidationError(errors)
    payload = {
        "username": data["username"].strip(),
        "password": data["password"],
        "rol": data["rol"],
        "nombre": data["nombre"].strip(),
    }
    return perform_mutation(
        ctx,
        Mutation.CREATE_USER,
        lambda: ctx.client.post(REGISTER_PATH, json=payload),
        success_message="Usuario creado exitosamente",
        failure_message="Error al crear usuario",
    )


def delete_user(ctx, user_id: str) -> MutationResult:
    return perform_mutation(
        ctx,
        Mutation.DELETE_USER,
        lambda: ctx.client.delete(f"{USERS_PATH}/{user_id}"),
        success_message="Usuario eliminado exitosamente",
        failure_message="Error al eliminar usuario",
    )
