"""
Optimistic mutation runner.

Runs one mutation in three phases:

1. snapshot the cache keys the mutation touches and write the speculative
   patch into the cache, before anything is sent;
2. send, retrying network failures with capped exponential backoff;
3. on success reconcile the cache with the server's data, on failure put
   the snapshot back exactly as it was.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from gangroster.client.cache import QueryCache
from gangroster.client.transport import TransportError
from gangroster.core.errors import ErrorKind
from gangroster.core.results import MutationResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    retries: int = 2
    base_delay: float = 1.0
    max_delay: float = 10.0

    def delay(self, attempt: int) -> float:
        """Seconds to wait before retry ``attempt`` (0-based)."""
        return min(self.base_delay * 2**attempt, self.max_delay)


class OptimisticMutation:
    """
    A mutation that updates the cache before the server answers.

    Args:
        cache: The query cache to patch
        name: Operation name, for logs
        keys: ``params -> cache keys`` the mutation may change
        patch: ``(current values by key, params) -> new values by key``.
            Only keys in the returned dict are written.
        send: ``params -> MutationResult``; may raise TransportError
        reconcile: ``(cache, params, data)`` run after a success
        retry_policy: Backoff for network failures
        sleep: Called with the delay before each retry
    """

    def __init__(
        self,
        cache: QueryCache,
        *,
        name: str,
        keys: Callable[[Any], Iterable[tuple]],
        patch: Callable[[dict, Any], dict],
        send: Callable[[Any], MutationResult],
        reconcile: Optional[Callable[[QueryCache, Any, dict], None]] = None,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.cache = cache
        self.name = name
        self.keys = keys
        self.patch = patch
        self.send = send
        self.reconcile = reconcile
        self.retry_policy = retry_policy or RetryPolicy()
        self.sleep = sleep

    def execute(self, params) -> MutationResult:
        keys = list(self.keys(params))
        snapshot = self.cache.snapshot(keys)

        try:
            patched = self.patch(self.cache.get_many(keys), params)
        except Exception:
            # The server validates the same params and reports the failure
            logger.exception(f"{self.name} could not be patched; sending unpatched")
            patched = {}
        self.cache.set_many(
            {key: value for key, value in patched.items() if key in keys}
        )

        try:
            result = self._send_with_retry(params)
        except Exception as e:
            self.cache.restore(snapshot)
            logger.exception(f"{self.name} failed unexpectedly; cache rolled back")
            return MutationResult.failure(
                f"Failed to {self.name.replace('_', ' ')}: {e}", ErrorKind.STORE_ERROR
            )

        if not result.success:
            self.cache.restore(snapshot)
            logger.info(
                f"{self.name} failed ({result.error_kind}): {result.error}; "
                "cache rolled back"
            )
            return result

        if self.reconcile is not None:
            try:
                self.reconcile(self.cache, params, result.data or {})
            except Exception as e:
                # The server applied the change; refetch rather than trust the patch
                self.cache.restore(snapshot)
                for key in keys:
                    self.cache.invalidate(key)
                logger.exception(f"{self.name} response could not be applied")
                return MutationResult.failure(
                    f"Could not apply server response: {e}", ErrorKind.STORE_ERROR
                )
        return result

    def _send_with_retry(self, params) -> MutationResult:
        attempt = 0
        while True:
            try:
                return self.send(params)
            except TransportError as e:
                if attempt >= self.retry_policy.retries:
                    logger.warning(
                        f"{self.name} gave up after {attempt + 1} attempt(s): {e}"
                    )
                    return MutationResult.failure(str(e), ErrorKind.NETWORK)
                delay = self.retry_policy.delay(attempt)
                logger.info(f"{self.name} network failure, retrying in {delay}s: {e}")
                self.sleep(delay)
                attempt += 1
