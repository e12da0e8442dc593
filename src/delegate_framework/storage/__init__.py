"""
Storage Module - Funded Uploads to Arweave

Pipeline, per storage node:
- CostEstimator: price the payload
- FundingReconciler: top up the prepaid node balance when short
- UploadExecutor: submit bytes and tags
- AvailabilityVerifier: wait until the object is publicly reachable

UploadOrchestrator runs the pipeline against the primary node and then the
fallback node; ArweaveClient wires everything from an ArweaveConfig.

Example:
    ```python
    import os
    from delegate_framework.storage import ArweaveClient, ArweaveConfig

    client = await ArweaveClient.create(ArweaveConfig(
        private_key=os.environ["FUNDING_KEY"],
        network="devnet",
    ))

    cost = await client.get_upload_cost(1024)
    result = await client.upload_image(png_bytes, "image/png")
    ```
"""

from __future__ import annotations

# ============================================================================
# Clients
# ============================================================================

from delegate_framework.storage.arweave_client import ArweaveClient
from delegate_framework.storage.funder import SolanaFunder
from delegate_framework.storage.node import IrysNode

# ============================================================================
# Pipeline
# ============================================================================

from delegate_framework.storage.cost import CostEstimator
from delegate_framework.storage.funding import FundingReconciler, compute_top_up
from delegate_framework.storage.orchestrator import UploadOrchestrator
from delegate_framework.storage.uploader import UploadExecutor
from delegate_framework.storage.verifier import AvailabilityVerifier

# ============================================================================
# Types
# ============================================================================

from delegate_framework.storage.types import (
    ARWEAVE_GATEWAY,
    IRYS_NODES,
    SOLANA_RPC_URLS,
    ArweaveConfig,
    ContentTag,
    FundingState,
    MetadataClient,
    PriceQuote,
    SolanaNetwork,
    StorageNode,
    UploadCost,
    UploadReceipt,
    UploadRequest,
    UploadResult,
)

__all__ = [
    # Clients
    "ArweaveClient",
    "IrysNode",
    "SolanaFunder",
    # Pipeline
    "CostEstimator",
    "FundingReconciler",
    "compute_top_up",
    "UploadExecutor",
    "AvailabilityVerifier",
    "UploadOrchestrator",
    # Types - Configuration
    "ArweaveConfig",
    "SolanaNetwork",
    "ARWEAVE_GATEWAY",
    "IRYS_NODES",
    "SOLANA_RPC_URLS",
    # Types - Values
    "ContentTag",
    "UploadRequest",
    "PriceQuote",
    "FundingState",
    "UploadReceipt",
    "UploadResult",
    "UploadCost",
    # Types - Protocols
    "StorageNode",
    "MetadataClient",
]
