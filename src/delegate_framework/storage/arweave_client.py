"""
Arweave Client - Permanent Storage

Uploads token metadata and images to Arweave through Irys nodes, paying
from a Solana funding account. Each upload is priced, funded, submitted
and verified against the primary node, then the fallback node.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Optional

from solders.keypair import Keypair

from delegate_framework.errors import (
    ConfigurationError,
    ValidationError,
    get_error_message,
)
from delegate_framework.storage.cost import CostEstimator
from delegate_framework.storage.funder import SolanaFunder
from delegate_framework.storage.funding import FundingReconciler
from delegate_framework.storage.node import IrysNode
from delegate_framework.storage.orchestrator import UploadOrchestrator
from delegate_framework.storage.types import (
    ArweaveConfig,
    ContentTag,
    StorageNode,
    UploadCost,
    UploadResult,
)
from delegate_framework.storage.uploader import UploadExecutor
from delegate_framework.storage.verifier import AvailabilityVerifier
from delegate_framework.utils.logging import get_logger
from delegate_framework.utils.retry import RequestExecutor, RetryConfig
from delegate_framework.utils.validation import (
    validate_content_type,
    validate_endpoint_url,
    validate_private_key,
)

_logger = get_logger(__name__)

NodeFactory = Callable[[str], StorageNode]


class ArweaveClient:
    """
    Funded upload client for Arweave via Irys.

    Features:
    - Price, fund, upload and verify in one call
    - Automatic SOL top-up with a 20% buffer
    - Fallback to a second node on any failure
    - Failures returned as results, never raised (except cost queries)

    Example:
        ```python
        from delegate_framework.storage import ArweaveClient, ArweaveConfig

        client = await ArweaveClient.create(ArweaveConfig(
            private_key=os.environ["FUNDING_KEY"],
        ))

        result = await client.upload_metadata({"name": "Token", "symbol": "TKN"})
        if result.success:
            print(f"Metadata at: {result.uri}")
        ```
    """

    def __init__(
        self,
        config: ArweaveConfig,
        *,
        logger: Optional[logging.Logger] = None,
        funder: Optional[SolanaFunder] = None,
        node_factory: Optional[NodeFactory] = None,
    ) -> None:
        """
        Initialize Arweave client.

        Note: Use `ArweaveClient.create()` to also verify node connectivity.

        Args:
            config: Arweave configuration
            logger: Logger for request logging
            funder: Funding transfer sender (built from the config by default)
            node_factory: Builds a storage node from a URL (IrysNode by default)

        Raises:
            ConfigurationError: If the key or any URL is unusable
        """
        if not config.private_key:
            raise ConfigurationError(
                "Private key is required for Arweave client",
                field="private_key",
            )

        try:
            self._keypair: Keypair = validate_private_key(config.private_key)
            node_urls = [
                validate_endpoint_url(url, "node_url")
                for url in config.resolve_node_urls()
            ]
            gateway_url = validate_endpoint_url(config.gateway_url, "gateway_url")
        except ValidationError as e:
            raise ConfigurationError(e.message, details=e.details) from e

        if not node_urls:
            raise ConfigurationError(
                "At least one storage node URL is required",
                field="node_urls",
            )

        self._config = config
        self._logger = logger or _logger
        self._funder = funder or SolanaFunder(
            self._keypair,
            config.resolve_rpc_url(),
            logger=self._logger,
        )

        self._executor = RequestExecutor(
            RetryConfig(max_attempts=config.retries, timeout_ms=config.timeout),
            logger=self._logger,
        )

        factory = node_factory or self._create_node
        self._nodes: List[StorageNode] = [factory(url) for url in node_urls]

        self._estimator = CostEstimator(self._executor, logger=self._logger)
        self._orchestrator = UploadOrchestrator(
            self._nodes,
            estimator=self._estimator,
            reconciler=FundingReconciler(
                self._executor,
                funding_retries=config.funding_retries,
                funding_delay_ms=config.funding_delay_ms,
                buffer_multiplier=config.funding_buffer_multiplier,
                logger=self._logger,
            ),
            uploader=UploadExecutor(
                self._executor,
                gateway_url=gateway_url,
                logger=self._logger,
            ),
            verifier=AvailabilityVerifier(
                self._executor,
                verification_retries=config.verification_retries,
                verification_delay_ms=config.verification_delay_ms,
                timeout_ms=config.timeout,
                logger=self._logger,
            ),
            logger=self._logger,
        )

    @classmethod
    async def create(
        cls,
        config: ArweaveConfig,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> ArweaveClient:
        """
        Factory method for creating ArweaveClient with async initialization.

        Args:
            config: Arweave configuration
            logger: Logger for request logging

        Returns:
            Initialized ArweaveClient
        """
        client = cls(config, logger=logger)
        # Verify connection by checking balance (will throw on error)
        await client.get_balance()
        return client

    def _create_node(self, url: str) -> StorageNode:
        return IrysNode(
            url,
            keypair=self._keypair,
            funder=self._funder,
            timeout_ms=self._config.timeout,
            logger=self._logger,
        )

    @property
    def address(self) -> str:
        """Get the funding account address."""
        return str(self._keypair.pubkey())

    @property
    def node_urls(self) -> List[str]:
        """Get the storage nodes in the order they are tried."""
        return [node.url for node in self._nodes]

    def get_config(self) -> ArweaveConfig:
        """Get the client configuration."""
        return self._config

    async def get_balance(self) -> int:
        """
        Get the prepaid balance on the primary node.

        Returns:
            Balance in lamports
        """
        return await self._executor.execute(self._nodes[0].get_balance, "getBalance")

    async def upload_metadata(self, metadata: Dict[str, Any]) -> UploadResult:
        """
        Upload a JSON metadata document.

        Args:
            metadata: JSON-serializable dictionary

        Returns:
            UploadResult with the public URI on success
        """
        request_id = self._executor.next_request_id()
        self._logger.debug(f"Request {request_id} started: uploadMetadata")

        try:
            data = json.dumps(metadata, indent=2).encode("utf-8")
        except (TypeError, ValueError) as e:
            return self._failed(request_id, "uploadMetadata", e)

        self._logger.debug(
            "Preparing metadata upload",
            extra={"request_id": request_id, "data_size": len(data)},
        )

        return await self._upload(
            request_id,
            "uploadMetadata",
            data,
            self._tags("application/json"),
        )

    async def upload_image(self, image: bytes, content_type: str) -> UploadResult:
        """
        Upload an image.

        Args:
            image: Raw image bytes
            content_type: MIME type (e.g. "image/png")

        Returns:
            UploadResult with the public URI on success
        """
        request_id = self._executor.next_request_id()
        self._logger.debug(
            f"Request {request_id} started: uploadImage",
            extra={"request_id": request_id, "content_type": content_type},
        )

        try:
            content_type = validate_content_type(content_type)
            if not isinstance(image, (bytes, bytearray)) or not image:
                raise ValidationError(
                    message="image must be non-empty bytes",
                    details={"field": "image", "type": type(image).__name__},
                )
        except ValidationError as e:
            return self._failed(request_id, "uploadImage", e)

        return await self._upload(
            request_id,
            "uploadImage",
            bytes(image),
            self._tags(content_type),
        )

    async def get_upload_cost(self, data_size: int) -> UploadCost:
        """
        Get the cost of uploading ``data_size`` bytes on the primary node.

        Raises:
            ValidationError: If data_size is invalid
            EstimationFailedError: If the node could not be priced
        """
        request_id = self._executor.next_request_id()
        self._logger.debug(
            f"Request {request_id} started: getUploadCost",
            extra={"request_id": request_id, "data_size": data_size},
        )

        try:
            quote = await self._estimator.price(self._nodes[0], data_size)
        except Exception as e:
            self._logger.error(
                f"Request {request_id} failed: getUploadCost",
                extra={"request_id": request_id, "error": get_error_message(e)},
            )
            raise

        return UploadCost(cost=quote.cost, data_size=quote.data_size)

    def get_stats(self) -> dict:
        """
        Get client statistics.

        Returns:
            Dictionary with client configuration summary
        """
        return {
            "address": self.address,
            "network": self._config.network,
            "node_urls": self.node_urls,
            "gateway_url": self._config.gateway_url,
            "rpc_url": self._config.resolve_rpc_url(),
            "retries": self._config.retries,
            "timeout": self._config.timeout,
        }

    def _tags(self, content_type: str) -> List[ContentTag]:
        return [
            ("Content-Type", content_type),
            ("App-Name", self._config.app_name),
            ("App-Version", self._config.app_version),
        ]

    async def _upload(
        self,
        request_id: int,
        name: str,
        data: bytes,
        tags: List[ContentTag],
    ) -> UploadResult:
        result = await self._orchestrator.perform_upload(data, tags)

        if result.success:
            self._logger.debug(
                f"Request {request_id} completed: {name}",
                extra={"request_id": request_id, "uri": result.uri, "tx_id": result.tx_id},
            )
        else:
            self._logger.error(
                f"Request {request_id} failed: {name}",
                extra={"request_id": request_id, "error": result.error},
            )
        return result

    def _failed(self, request_id: int, name: str, error: Exception) -> UploadResult:
        message = get_error_message(error)
        self._logger.error(
            f"Request {request_id} failed: {name}",
            extra={"request_id": request_id, "error": message},
        )
        return UploadResult(success=False, error=message)
