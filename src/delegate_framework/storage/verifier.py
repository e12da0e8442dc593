"""
Availability verification for freshly uploaded objects.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx

from delegate_framework.errors import StorageNodeError, get_error_message
from delegate_framework.utils.logging import get_logger
from delegate_framework.utils.retry import RequestExecutor

_logger = get_logger(__name__)

DEFAULT_VERIFICATION_RETRIES = 5
DEFAULT_VERIFICATION_DELAY_MS = 3000


class AvailabilityVerifier:
    """
    Polls a public URI until it resolves.

    ``verify`` never raises. Network errors count as "not yet available",
    and running out of attempts returns False: on an eventually-consistent
    network a missing object is an expected outcome, not an error.
    """

    def __init__(
        self,
        executor: RequestExecutor,
        *,
        verification_retries: int = DEFAULT_VERIFICATION_RETRIES,
        verification_delay_ms: int = DEFAULT_VERIFICATION_DELAY_MS,
        timeout_ms: int = 60000,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._executor = executor
        self._verification_retries = verification_retries
        self._verification_delay_ms = verification_delay_ms
        self._timeout_ms = timeout_ms
        self._logger = logger or _logger

    async def verify(self, uri: str) -> bool:
        """
        Check that ``uri`` is publicly reachable.

        Args:
            uri: Public URI returned by the upload

        Returns:
            True on the first 2xx response, False once attempts run out
        """
        for attempt in range(1, self._verification_retries + 1):
            try:
                await self._executor.execute(
                    lambda: self._fetch(uri),
                    "verifyUpload",
                    attempts=1,
                )
                self._logger.debug(
                    "Upload verified",
                    extra={"uri": uri, "attempt": attempt},
                )
                return True
            except Exception as e:
                self._logger.debug(
                    f"Upload not yet available ({attempt}/{self._verification_retries})",
                    extra={"uri": uri, "attempt": attempt, "error": get_error_message(e)},
                )

            if attempt < self._verification_retries:
                await asyncio.sleep(self._verification_delay_ms / 1000)

        self._logger.warning(
            "Upload not found after verification attempts",
            extra={"uri": uri, "attempts": self._verification_retries},
        )
        return False

    async def _fetch(self, uri: str) -> int:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout_ms / 1000),
            follow_redirects=True,
        ) as client:
            response = await client.get(uri)

        if not 200 <= response.status_code < 300:
            raise StorageNodeError(
                f"Verification failed: HTTP {response.status_code}",
                status_code=response.status_code,
                details={"uri": uri},
            )
        return response.status_code
