"""
Upload submission.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from delegate_framework.errors import (
    NoReceiptIdError,
    UploadSubmitError,
    ValidationError,
    get_error_message,
)
from delegate_framework.storage.types import (
    ARWEAVE_GATEWAY,
    ContentTag,
    StorageNode,
    UploadReceipt,
)
from delegate_framework.utils.logging import get_logger
from delegate_framework.utils.retry import RequestExecutor

_logger = get_logger(__name__)


class UploadExecutor:
    """
    Submits payload bytes and tags to a storage node.

    The public URI is ``<gateway_url>/<id>``. A node that accepts the
    upload but returns no id is reported as ``NoReceiptIdError`` rather
    than a submit failure.
    """

    def __init__(
        self,
        executor: RequestExecutor,
        *,
        gateway_url: str = ARWEAVE_GATEWAY,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._executor = executor
        self._gateway_url = gateway_url.rstrip("/")
        self._logger = logger or _logger

    @property
    def gateway_url(self) -> str:
        return self._gateway_url

    def build_uri(self, receipt_id: str) -> str:
        """Public URI of an uploaded object."""
        return f"{self._gateway_url}/{receipt_id}"

    async def submit(
        self,
        node: StorageNode,
        payload: bytes,
        tags: Sequence[ContentTag],
    ) -> UploadReceipt:
        """
        Upload ``payload`` to ``node``.

        Returns:
            UploadReceipt with the transaction id and public URI

        Raises:
            UploadSubmitError: If the node rejected the upload or was unreachable
            NoReceiptIdError: If the node answered without an id
        """
        self._logger.debug(
            "Uploading to storage node",
            extra={"node_url": node.url, "size_bytes": len(payload), "tags": len(tags)},
        )

        try:
            response = await self._executor.execute(
                lambda: node.upload(payload, tags),
                "upload",
            )
        except ValidationError:
            raise
        except Exception as e:
            raise UploadSubmitError(
                f"Upload failed: {get_error_message(e)}",
                node_url=node.url,
                size_bytes=len(payload),
            ) from e

        receipt_id = response.get("id") if isinstance(response, dict) else None
        if not receipt_id:
            raise NoReceiptIdError(
                node_url=node.url,
                details={"response": repr(response)[:200]},
            )

        receipt = UploadReceipt(id=str(receipt_id), uri=self.build_uri(str(receipt_id)))
        self._logger.debug(
            "Upload completed",
            extra={"node_url": node.url, "tx_id": receipt.id, "uri": receipt.uri},
        )
        return receipt
