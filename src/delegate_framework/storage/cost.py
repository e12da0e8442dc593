"""
Upload cost estimation.
"""

from __future__ import annotations

import logging
from typing import Optional

from delegate_framework.errors import (
    EstimationFailedError,
    ValidationError,
    get_error_message,
)
from delegate_framework.storage.types import PriceQuote, StorageNode
from delegate_framework.utils.logging import get_logger
from delegate_framework.utils.retry import RequestExecutor
from delegate_framework.utils.validation import validate_data_size

_logger = get_logger(__name__)


class CostEstimator:
    """
    Prices an upload against a storage node.

    A failed estimate is always an ``EstimationFailedError``; it never
    falls back to zero since funding decisions depend on it.
    """

    def __init__(
        self,
        executor: RequestExecutor,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._executor = executor
        self._logger = logger or _logger

    async def price(self, node: StorageNode, data_size: int) -> PriceQuote:
        """
        Get the price of uploading ``data_size`` bytes to ``node``.

        Args:
            node: Storage node to price against
            data_size: Payload size in bytes (0 gives the base price)

        Returns:
            PriceQuote in lamports

        Raises:
            ValidationError: If data_size is not a non-negative integer
            EstimationFailedError: If the node could not be priced
        """
        data_size = validate_data_size(data_size)

        try:
            cost = await self._executor.execute(
                lambda: node.get_price(data_size),
                "getPrice",
            )
            quote = PriceQuote(cost=cost, data_size=data_size)
        except ValidationError:
            raise
        except Exception as e:
            raise EstimationFailedError(
                f"Failed to estimate upload cost: {get_error_message(e)}",
                node_url=node.url,
                data_size=data_size,
            ) from e

        self._logger.debug(
            "Upload cost calculated",
            extra={"node_url": node.url, "data_size": data_size, "cost": quote.cost},
        )
        return quote
