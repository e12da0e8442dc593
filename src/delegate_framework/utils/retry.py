"""
Retry Utilities for the Delegate Framework.

Provides the request executor used by every network client: per-attempt
timeout, exponential backoff between attempts, monotonically increasing
request ids and structured before/after/error logging.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import random
from dataclasses import dataclass, field
from typing import (
    Any,
    Awaitable,
    Callable,
    Optional,
    Tuple,
    Type,
    TypeVar,
)

from delegate_framework.errors import OperationTimeoutError, ValidationError
from delegate_framework.utils.logging import get_logger

T = TypeVar("T")

_logger = get_logger(__name__)


@dataclass
class RetryConfig:
    """
    Configuration for retry behavior.

    The defaults give the upload pipeline's schedule: three attempts of at
    most 60 seconds each, waiting 1s and then 2s between them.

    Example:
        ```python
        config = RetryConfig(
            max_attempts=5,
            base_delay_ms=1000,
            timeout_ms=30000,
            retryable_errors=(httpx.TransportError,),
        )
        ```
    """

    max_attempts: int = 3
    """Maximum number of attempts (including the first one)."""

    base_delay_ms: int = 1000
    """Base delay in milliseconds for exponential backoff."""

    max_delay_ms: Optional[int] = None
    """Optional cap for exponential growth (None = uncapped)."""

    jitter: bool = False
    """Whether to add random jitter to delays."""

    exponential_base: float = 2.0
    """Base for exponential backoff calculation."""

    timeout_ms: Optional[int] = 60000
    """Per-attempt timeout in milliseconds (None = no timeout)."""

    retryable_errors: Tuple[Type[BaseException], ...] = field(
        default_factory=lambda: (Exception,)
    )
    """Tuple of exception types that should trigger a retry."""


def calculate_delay(attempt: int, config: RetryConfig) -> float:
    """
    Calculate delay with exponential backoff and optional jitter.

    Args:
        attempt: Zero-based attempt number (0 = delay after the first failure)
        config: Retry configuration

    Returns:
        Delay in seconds
    """
    delay_ms = config.base_delay_ms * (config.exponential_base ** attempt)

    if config.max_delay_ms is not None:
        delay_ms = min(delay_ms, config.max_delay_ms)

    if config.jitter:
        # Full jitter
        delay_ms = random.uniform(0, delay_ms)

    return delay_ms / 1000


class RequestExecutor:
    """
    Retry-with-timeout-and-backoff wrapper shared by all network calls.

    Each ``execute`` call gets a request id from a per-instance counter
    starting at 1. Attempts are raced against ``timeout_ms``; after the k-th
    failed attempt the executor sleeps ``base_delay_ms * 2 ** (k - 1)`` ms.
    When every attempt fails the last error is re-raised unchanged.

    Example:
        ```python
        executor = RequestExecutor(RetryConfig(max_attempts=3, timeout_ms=60000))

        price = await executor.execute(
            lambda: node.get_price(1024),
            "getPrice",
        )
        ```
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._config = config or RetryConfig()
        self._logger = logger or _logger
        self._request_ids = itertools.count(1)

    @property
    def config(self) -> RetryConfig:
        """Get the retry configuration."""
        return self._config

    @property
    def logger(self) -> logging.Logger:
        """Get the logger used for request logging."""
        return self._logger

    def next_request_id(self) -> int:
        """Reserve the next request id."""
        return next(self._request_ids)

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        name: str,
        *,
        attempts: Optional[int] = None,
    ) -> T:
        """
        Run ``operation`` with retries.

        Args:
            operation: Zero-argument callable returning an awaitable. It is
                called again for every attempt.
            name: Operation name used in log lines
            attempts: Override for ``max_attempts`` (e.g. 1 for calls that
                must never be re-sent)

        Returns:
            Result of the operation

        Raises:
            ValidationError: If the operation or name is invalid (no attempt made)
            OperationTimeoutError: If the last attempt timed out
            Exception: The last error raised by the operation
        """
        if not callable(operation):
            raise ValidationError(
                message="operation must be callable",
                details={"field": "operation", "value": repr(operation)},
            )
        if not name:
            raise ValidationError(
                message="operation name is required",
                details={"field": "name", "value": name},
            )

        max_attempts = attempts if attempts is not None else self._config.max_attempts
        if max_attempts < 1:
            raise ValidationError(
                message="attempts must be at least 1",
                details={"field": "attempts", "value": max_attempts},
            )

        request_id = self.next_request_id()
        self._logger.debug(
            f"Request {request_id} started: {name}",
            extra={"request_id": request_id, "operation": name},
        )

        last_error: Optional[BaseException] = None

        for attempt in range(1, max_attempts + 1):
            try:
                result = await self._run_attempt(operation, name)
            except ValidationError:
                raise
            except self._config.retryable_errors as e:
                last_error = e
                self._logger.warning(
                    f"Request {request_id} attempt {attempt} failed: {name}",
                    extra={
                        "request_id": request_id,
                        "operation": name,
                        "attempt": attempt,
                        "error": str(e),
                    },
                )

                if attempt < max_attempts:
                    await asyncio.sleep(calculate_delay(attempt - 1, self._config))
                continue

            self._logger.debug(
                f"Request {request_id} completed: {name}",
                extra={"request_id": request_id, "operation": name, "result": result},
            )
            return result

        self._logger.error(
            f"Request {request_id} failed after {max_attempts} attempts: {name}",
            extra={
                "request_id": request_id,
                "operation": name,
                "attempts": max_attempts,
                "error": str(last_error),
            },
        )
        if last_error is not None:
            raise last_error

        # Unreachable: the loop runs at least once
        raise RuntimeError("Retry exhausted without error")

    async def _run_attempt(
        self,
        operation: Callable[[], Awaitable[Any]],
        name: str,
    ) -> Any:
        timeout_ms = self._config.timeout_ms
        if timeout_ms is None:
            return await operation()

        # Only the deadline becomes OperationTimeoutError; a TimeoutError
        # raised by the operation itself propagates unchanged.
        task = asyncio.ensure_future(operation())
        try:
            done, _ = await asyncio.wait({task}, timeout=timeout_ms / 1000)
        except asyncio.CancelledError:
            task.cancel()
            raise

        if task not in done:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            raise OperationTimeoutError(timeout_ms, operation=name)

        return task.result()
