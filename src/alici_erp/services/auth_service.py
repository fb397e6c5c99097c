"""
Authentication session.

The API issues a signed JWT at login carrying the user's id, username and
role. The client cannot verify the signature (it does not hold the key);
it only reads the claims to know who is logged in and what they may do,
and discards tokens that have expired. The server re-checks every request.
"""

import logging
from typing import Callable, Iterable, List, Optional

import jwt

from ..models.user import User
from ..utils.constants import TOKEN_STORAGE_KEY
from .exceptions import RequestFailed, Unauthorized, ValidationError
from .logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)


def decode_token(token: Optional[str]) -> Optional[User]:
    """
    Read the user out of a token.

    Returns:
        User, or None when the token is malformed, expired, or lacks an id
        (id, userId or sub), a username or a role
    """
    if not token:
        return None
    try:
        claims = jwt.decode(token, options={"verify_signature": False, "verify_exp": True})
    except jwt.ExpiredSignatureError:
        logger.info("Discarding expired token")
        return None
    except jwt.InvalidTokenError as e:
        logger.warning(f"Discarding undecodable token: {e}")
        return None

    user_id = claims.get("id") or claims.get("userId") or claims.get("sub")
    username = claims.get("username")
    role = claims.get("role")
    if not user_id or not username or not role:
        return None
    return User(id=str(user_id), username=username, role=role, nombre=claims.get("nombre"))


def has_role(user: Optional[User], allowed_roles: Iterable[str]) -> bool:
    """True if user is logged in and holds one of allowed_roles."""
    if user is None:
        return False
    return user.role in set(allowed_roles)


class AuthSession:
    """
    Current login state, persisted to local storage under the "token" key.

    Args:
        storage: Object with get_item / set_item / remove_item
            (LocalStorage in the application)
    """

    def __init__(self, storage):
        self.storage = storage
        self.token: Optional[str] = None
        self.user: Optional[User] = None
        self._listeners: List[Callable[[], None]] = []

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def get_token(self) -> Optional[str]:
        return self.token

    def on_logout(self, listener: Callable[[], None]) -> None:
        """Register a callback run after every logout (e.g. clear the cache)."""
        self._listeners.append(listener)

    def set_auth(self, token: str) -> bool:
        """
        Adopt token if it decodes to a valid user.

        Returns:
            True if the session is now authenticated with this token
        """
        user = decode_token(token)
        if user is None:
            return False
        self.storage.set_item(TOKEN_STORAGE_KEY, token)
        self.token = token
        self.user = user
        return True

    def init_auth(self) -> Optional[User]:
        """Restore the session from storage, dropping a stale token."""
        token = self.storage.get_item(TOKEN_STORAGE_KEY)
        if not token:
            return None
        user = decode_token(token)
        if user is None:
            self.storage.remove_item(TOKEN_STORAGE_KEY)
            return None
        self.token = token
        self.user = user
        return user

    def logout(self) -> None:
        self.storage.remove_item(TOKEN_STORAGE_KEY)
        self.token = None
        self.user = None
        for listener in list(self._listeners):
            listener()
        log_operation(logger, operation="logout", outcome="success")

    def login(self, client, username: str, password: str) -> User:
        """
        Log in against POST /auth/login.

        Raises:
            ValidationError: Missing credentials, or the server returned a
                token that does not decode to a user
            RequestFailed: Bad credentials or network error
        """
        errors = []
        if not username or not username.strip():
            errors.append("Usuario: Este campo es obligatorio")
        if not password:
            errors.append("Contraseña: Este campo es obligatorio")
        if errors:
            raise ValidationError(errors)

        try:
            response = client.post(
                "/auth/login",
                json={"username": username.strip(), "password": password},
                logout_on_401=False,
            )
        except Unauthorized as e:
            # Wrong credentials, not an expired session
            raise RequestFailed(e.message, status_code=401) from e
        token = (response or {}).get("token")
        if not self.set_auth(token):
            log_operation(logger, operation="login", outcome="invalid_token", level=logging.WARNING, username=username)
            raise ValidationError(["El servidor devolvió un token inválido"])
        log_operation(logger, operation="login", outcome="success", username=username, role=self.user.role)
        return self.user
