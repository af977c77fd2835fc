import logging
from collections.abc import Callable
from typing import Any

import httpx
from tenacity import RetryCallState, retry, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

logger = logging.getLogger(__name__)


def relay_retry(label: str, attempts: int = 1) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Return a tenacity decorator bounding how often one relay is tried.

    The default of a single attempt means a relay is asked exactly once per
    run; failing over to the next relay is the orchestrator's job, not this
    decorator's. *label* is interpolated into the warning emitted before
    each extra attempt.
    """

    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning("Retrying %s (attempt %d): %s", label, retry_state.attempt_number, retry_state.outcome)

    return retry(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential_jitter(initial=1, max=10),
        retry=retry_if_exception_type((httpx.TransportError, httpx.HTTPStatusError)),
        before_sleep=_log_retry,
        reraise=True,
    )
