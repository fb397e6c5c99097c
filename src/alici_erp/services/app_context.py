"""
Per-session application context.

Everything a service needs at runtime travels in one explicit object
instead of module globals: the configuration, the API client, the query
cache, the notifier, the auth session and the current exchange rate and
overhead factor. Tests build their own contexts with whatever rate, token
or fake HTTP session they need.
"""

from decimal import Decimal
from typing import Optional

import requests

from ..utils.config import Config, get_config
from .api_client import ApiClient
from .auth_service import AuthSession
from .currency_converter import validate_rate
from .local_storage import LocalStorage
from .logging_utils import get_service_logger
from .notifications import Notifier
from .query_cache import QueryCache

logger = get_service_logger(__name__)


class AppContext:
    """
    Attributes:
        config: Config in use
        client: ApiClient bound to config.api_base_url
        cache: QueryCache for server collections
        notifier: Notifier receiving user-facing messages
        auth: AuthSession holding the token and user
        exchange_rate: 1 USD = exchange_rate NIO, None until loaded
        overhead_factor: Server overhead factor, None until loaded
    """

    def __init__(
        self,
        config: Config,
        client: ApiClient,
        cache: QueryCache,
        notifier: Notifier,
        auth: AuthSession,
        exchange_rate: Optional[Decimal] = None,
        overhead_factor: Optional[Decimal] = None,
    ):
        self.config = config
        self.client = client
        self.cache = cache
        self.notifier = notifier
        self.auth = auth
        self.exchange_rate = validate_rate(exchange_rate) if exchange_rate is not None else None
        self.overhead_factor = overhead_factor

    def require_exchange_rate(self) -> Decimal:
        """
        Current exchange rate.

        Raises:
            InvalidExchangeRate: If no valid rate has been loaded
        """
        return validate_rate(self.exchange_rate)

    def set_exchange_rate(self, rate) -> Decimal:
        self.exchange_rate = validate_rate(rate)
        return self.exchange_rate

    def handle_unauthorized(self) -> None:
        """Forced logout: drop the token and every cached collection."""
        logger.warning("Session rejected by the server, logging out")
        self.auth.logout()
        self.notifier.error("Tu sesión expiró. Inicia sesión nuevamente.")


def create_app_context(
    config: Optional[Config] = None,
    storage=None,
    session: Optional[requests.Session] = None,
    exchange_rate=None,
    restore_session: bool = True,
) -> AppContext:
    """
    Wire a context with the default collaborators.

    Args:
        config: Config (application default when None)
        storage: Token storage (LocalStorage when None)
        session: HTTP session handed to the ApiClient (tests pass a mock)
        exchange_rate: Initial rate, if already known
        restore_session: Restore a stored token on start-up

    Returns:
        AppContext whose client logs the user out on any 401
    """
    config = config or get_config()
    auth = AuthSession(storage if storage is not None else LocalStorage())
    cache = QueryCache()
    auth.on_logout(cache.clear)

    client = ApiClient(
        config.api_base_url,
        session=session,
        token_provider=auth.get_token,
        timeout=config.request_timeout,
        retries=config.request_retries,
        backoff=config.retry_backoff,
    )
    ctx = AppContext(
        config=config,
        client=client,
        cache=cache,
        notifier=Notifier(),
        auth=auth,
        exchange_rate=exchange_rate,
    )
    client.on_unauthorized = ctx.handle_unauthorized

    if restore_session:
        auth.init_auth()
    return ctx
