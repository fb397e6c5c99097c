"""
Central post-mutation hook.

Every write against the API goes through perform_mutation(), which fixes
the order of what follows a request:

1. the request runs;
2. on success, every key in the mutation's invalidation rule is marked
   stale (cache_rules.keys_for);
3. only then is the success notification emitted.

A failed request invalidates nothing and produces an error notification
carrying the server's message when it sent one.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .cache_rules import Mutation, keys_for
from .exceptions import RequestFailed, Unauthorized
from .logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)


@dataclass(frozen=True)
class MutationResult:
    ok: bool
    data: Any = None
    error: Optional[Exception] = None


def perform_mutation(
    ctx,
    mutation: Mutation,
    action: Callable[[], Any],
    success_message: Optional[str] = None,
    failure_message: str = "No se pudo completar la operación",
    **params,
) -> MutationResult:
    """
    Run a write and apply its cache and notification side effects.

    Args:
        ctx: AppContext (cache and notifier are used)
        mutation: Which mutation this is; selects the invalidation rule
        action: Performs the request, returns the response payload
        success_message: Notification on success (None for no notification)
        failure_message: Notification when the server sends no message
        **params: Rule parameters (recipe_id, product_id, order_id)

    Returns:
        MutationResult. ok is False when the request failed.

    Raises:
        ValueError: The invalidation rule is missing a parameter; raised
            before action runs
    """
    stale_keys = keys_for(mutation, **params)

    try:
        data = action()
    except Unauthorized as e:
        # Forced logout has already run
        log_operation(logger, operation=mutation.value, outcome="unauthorized", level=logging.WARNING)
        return MutationResult(ok=False, error=e)
    except RequestFailed as e:
        log_operation(
            logger,
            operation=mutation.value,
            outcome="request_failed",
            level=logging.WARNING,
            status_code=e.status_code,
            error=e.message,
        )
        ctx.notifier.error(e.message if e.from_server else failure_message)
        return MutationResult(ok=False, error=e)

    invalidated = []
    for key in stale_keys:
        ctx.cache.invalidate(key)
        invalidated.append(key)

    log_operation(logger, operation=mutation.value, outcome="success", invalidated=invalidated)

    if success_message:
        ctx.notifier.success(success_message)
    return MutationResult(ok=True, data=data)
