"""
Upload orchestration across storage nodes.

Per node the full sequence runs:

    Priced -> Funded -> Uploaded -> Verified

Any failure moves on to the next configured node and restarts the sequence
from pricing, since price and balance are accounted per node. Each node is
tried at most once.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from delegate_framework.errors import get_error_message
from delegate_framework.storage.cost import CostEstimator
from delegate_framework.storage.funding import FundingReconciler
from delegate_framework.storage.types import (
    ContentTag,
    StorageNode,
    UploadRequest,
    UploadResult,
)
from delegate_framework.storage.uploader import UploadExecutor
from delegate_framework.storage.verifier import AvailabilityVerifier
from delegate_framework.utils.logging import get_logger

_logger = get_logger(__name__)


class UploadOrchestrator:
    """
    Runs the funded-upload sequence against an ordered list of nodes.

    ``perform_upload`` never raises. It returns the first verified success,
    or the failure of the last node tried. Earlier failures are only logged.

    Example:
        ```python
        orchestrator = UploadOrchestrator(
            [primary, fallback],
            estimator=CostEstimator(executor),
            reconciler=FundingReconciler(executor),
            uploader=UploadExecutor(executor),
            verifier=AvailabilityVerifier(executor),
        )
        result = await orchestrator.perform_upload(data, [("Content-Type", "image/png")])
        ```
    """

    def __init__(
        self,
        nodes: Sequence[StorageNode],
        *,
        estimator: CostEstimator,
        reconciler: FundingReconciler,
        uploader: UploadExecutor,
        verifier: AvailabilityVerifier,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._nodes: List[StorageNode] = list(nodes)
        self._estimator = estimator
        self._reconciler = reconciler
        self._uploader = uploader
        self._verifier = verifier
        self._logger = logger or _logger

    @property
    def nodes(self) -> List[StorageNode]:
        """Nodes in the order they are tried."""
        return list(self._nodes)

    async def perform_upload(
        self,
        payload: bytes,
        tags: Sequence[ContentTag],
    ) -> UploadResult:
        """
        Upload ``payload``, falling back through the configured nodes.

        Args:
            payload: Raw bytes to upload
            tags: Ordered (name, value) tags

        Returns:
            UploadResult (``success=True`` only once verified reachable)
        """
        if not self._nodes:
            return UploadResult(success=False, error="No storage nodes configured")

        result = UploadResult(success=False, error="Upload not attempted")

        for index, node in enumerate(self._nodes):
            result = await self._attempt(node, payload, tags)
            if result.success:
                return result

            if index < len(self._nodes) - 1:
                self._logger.warning(
                    f"Upload via {node.url} failed, trying next node: {result.error}",
                    extra={"node_url": node.url, "error": result.error},
                )
            else:
                self._logger.error(
                    f"Upload via {node.url} failed: {result.error}",
                    extra={
                        "node_url": node.url,
                        "error": result.error,
                        "uri": result.uri,
                        "tx_id": result.tx_id,
                    },
                )

        return result

    async def _attempt(
        self,
        node: StorageNode,
        payload: bytes,
        tags: Sequence[ContentTag],
    ) -> UploadResult:
        try:
            request = UploadRequest(
                payload=payload,
                content_tags=tuple(tags),
                target_node_url=node.url,
            )
            quote = await self._estimator.price(node, request.data_size)
            await self._reconciler.ensure_funded(node, quote.cost)
            receipt = await self._uploader.submit(
                node, request.payload, request.content_tags
            )
        except Exception as e:
            return UploadResult(
                success=False,
                error=get_error_message(e),
                node_url=node.url,
            )

        if not await self._verifier.verify(receipt.uri):
            return UploadResult(
                success=False,
                uri=receipt.uri,
                tx_id=receipt.id,
                error=(
                    f"Upload not found after verification attempts: {receipt.uri} "
                    f"(tx: {receipt.id})"
                ),
                node_url=node.url,
            )

        self._logger.info(
            "Upload verified",
            extra={"node_url": node.url, "tx_id": receipt.id, "uri": receipt.uri},
        )
        return UploadResult(
            success=True,
            uri=receipt.uri,
            tx_id=receipt.id,
            node_url=node.url,
        )
