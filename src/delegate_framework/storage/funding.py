"""
Funding reconciliation for storage nodes.

Brings a node's prepaid balance up to the price of an upload:

    Check -> Compute -> Submit -> Poll -> (funded | timed out)

The top-up is the deficit times a buffer multiplier (default 1.2), rounded
up, so that price drift between quoting and charging does not make the
upload fail. The balance is read-then-acted-on without locking; the
funding account is assumed to be used by one client only.
"""

from __future__ import annotations

import asyncio
import logging
from decimal import ROUND_CEILING, Decimal
from typing import Optional, Union

from delegate_framework.errors import (
    FundingConfirmationTimeoutError,
    FundingSubmitError,
    ValidationError,
    get_error_message,
)
from delegate_framework.storage.types import FundingState, StorageNode
from delegate_framework.utils.logging import get_logger
from delegate_framework.utils.retry import RequestExecutor
from delegate_framework.utils.validation import validate_amount

_logger = get_logger(__name__)

DEFAULT_FUNDING_RETRIES = 20
DEFAULT_FUNDING_DELAY_MS = 2000
DEFAULT_BUFFER_MULTIPLIER = 1.2


def compute_top_up(
    required: int,
    balance: int,
    multiplier: Union[float, Decimal] = DEFAULT_BUFFER_MULTIPLIER,
) -> int:
    """
    Compute the buffered funding amount.

    Returns ``ceil((required - balance) * multiplier)`` using exact decimal
    arithmetic (``1000 * 1.2`` is 1200, not 1201). The result is zero or
    negative when no funding is needed.

    Example:
        >>> compute_top_up(1000, 0)
        1200
        >>> compute_top_up(1000, 999)
        2
    """
    deficit = Decimal(required - balance)
    buffered = deficit * Decimal(str(multiplier))
    return int(buffered.to_integral_value(rounding=ROUND_CEILING))


class FundingReconciler:
    """
    Ensures a node holds enough prepaid balance for an upload.

    ``ensure_funded`` is idempotent: with a sufficient balance it returns
    without sending anything.

    Example:
        ```python
        reconciler = FundingReconciler(executor)
        await reconciler.ensure_funded(node, quote.cost)
        ```
    """

    def __init__(
        self,
        executor: RequestExecutor,
        *,
        funding_retries: int = DEFAULT_FUNDING_RETRIES,
        funding_delay_ms: int = DEFAULT_FUNDING_DELAY_MS,
        buffer_multiplier: float = DEFAULT_BUFFER_MULTIPLIER,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if buffer_multiplier <= 1:
            raise ValidationError(
                message="buffer_multiplier must be greater than 1",
                details={"field": "buffer_multiplier", "value": buffer_multiplier},
            )
        if funding_retries < 1:
            raise ValidationError(
                message="funding_retries must be at least 1",
                details={"field": "funding_retries", "value": funding_retries},
            )

        self._executor = executor
        self._funding_retries = funding_retries
        self._funding_delay_ms = funding_delay_ms
        self._buffer_multiplier = buffer_multiplier
        self._logger = logger or _logger

    @property
    def buffer_multiplier(self) -> float:
        return self._buffer_multiplier

    async def check(self, node: StorageNode, required_amount: int) -> FundingState:
        """Read the node balance and compare it to ``required_amount``."""
        balance = await self._executor.execute(node.get_balance, "getBalance")
        return FundingState(current_balance=balance, required_amount=required_amount)

    async def ensure_funded(self, node: StorageNode, required_amount: int) -> None:
        """
        Fund ``node`` until its balance covers ``required_amount``.

        Args:
            node: Storage node to fund
            required_amount: Lamports the upload needs

        Raises:
            ValidationError: If required_amount is invalid
            FundingSubmitError: If the funding transfer could not be sent
            FundingConfirmationTimeoutError: If the balance never caught up
        """
        required_amount = validate_amount(required_amount, "required_amount")

        state = await self.check(node, required_amount)
        if state.is_sufficient:
            self._logger.debug(
                "Node balance sufficient",
                extra={
                    "node_url": node.url,
                    "balance": state.current_balance,
                    "required": required_amount,
                },
            )
            return

        top_up = compute_top_up(
            required_amount, state.current_balance, self._buffer_multiplier
        )
        if top_up <= 0:
            return

        self._logger.info(
            "Funding storage node",
            extra={
                "node_url": node.url,
                "balance": state.current_balance,
                "required": required_amount,
                "top_up": top_up,
            },
        )

        try:
            # A transfer is never re-sent
            tx_hash = await self._executor.execute(
                lambda: node.fund(top_up),
                "fund",
                attempts=1,
            )
        except Exception as e:
            raise FundingSubmitError(
                f"Failed to submit funding transaction: {get_error_message(e)}",
                node_url=node.url,
                amount=top_up,
                required=required_amount,
            ) from e

        await self._wait_for_balance(node, required_amount, tx_hash, state.current_balance)

    async def _wait_for_balance(
        self,
        node: StorageNode,
        required_amount: int,
        tx_hash: str,
        last_balance: int,
    ) -> None:
        for poll in range(1, self._funding_retries + 1):
            await asyncio.sleep(self._funding_delay_ms / 1000)

            try:
                last_balance = await self._executor.execute(
                    node.get_balance,
                    "getBalance",
                    attempts=1,
                )
            except Exception as e:
                self._logger.warning(
                    f"Balance check {poll} failed while waiting for funding",
                    extra={"node_url": node.url, "poll": poll, "error": get_error_message(e)},
                )
                continue

            if last_balance >= required_amount:
                self._logger.info(
                    "Funding confirmed",
                    extra={
                        "node_url": node.url,
                        "balance": last_balance,
                        "polls": poll,
                        "tx_hash": tx_hash,
                    },
                )
                return

            self._logger.debug(
                f"Waiting for funding confirmation ({poll}/{self._funding_retries})",
                extra={"node_url": node.url, "balance": last_balance, "required": required_amount},
            )

        raise FundingConfirmationTimeoutError(
            self._funding_retries,
            self._funding_delay_ms,
            balance=last_balance,
            required=required_amount,
            node_url=node.url,
            tx_hash=tx_hash,
        )
