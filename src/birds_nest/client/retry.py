"""Retry-with-refresh orchestration around one unit of work with the service."""

import logging
import time
from typing import Callable, Optional, Tuple

from birds_nest.client.outcomes import Outcome
from birds_nest.client.session import SessionState
from birds_nest.errors import RefreshExhaustedError

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_INTERVAL = 5.0

Work = Callable[[SessionState], Outcome]
Refresher = Callable[[SessionState], Optional[str]]


def try_with_refresh(
    work: Work,
    state: SessionState,
    refresh: Refresher,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    interval: float = DEFAULT_INTERVAL,
    sleep: Callable[[float], None] = time.sleep,
    stage: str = "request",
) -> Tuple[Outcome, SessionState]:
    """Run ``work`` and, while it answers UNAUTHORIZED, refresh and run it again.

    Every refresh counts as an attempt whether or not it produced a new key,
    and each one is followed by a wait of ``interval`` seconds. Once
    ``max_attempts`` refreshes have been spent and ``work`` still answers
    UNAUTHORIZED, :class:`RefreshExhaustedError` is raised.

    Returns the first non-UNAUTHORIZED outcome together with the session
    state that produced it, so the caller keeps any refreshed credential.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
    if interval < 0:
        raise ValueError(f"interval must be >= 0, got {interval}")

    attempt = 0
    while True:
        outcome = work(state)
        if not outcome.is_unauthorized:
            return outcome, state

        if attempt >= max_attempts:
            logger.error(
                "Unauthorized during %s after %d refresh attempts; no refresh attempts left",
                stage,
                attempt,
            )
            raise RefreshExhaustedError(attempt, stage)

        new_key = refresh(state)
        attempt += 1
        if new_key is not None:
            state = state.with_bearer_key(new_key)
        logger.warning(
            "Unauthorized during %s (refresh %d/%d), retrying in %.1fs",
            stage,
            attempt,
            max_attempts,
            interval,
        )
        sleep(interval)
