"""
Storage Types

Type definitions for the funded-upload pipeline: client configuration,
per-attempt values (request, quote, funding state, receipt) and the single
result value handed back to callers.
"""

from __future__ import annotations

from typing import (
    Any,
    Dict,
    List,
    Literal,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    runtime_checkable,
)

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Network Types
# ============================================================================

SolanaNetwork = Literal["mainnet-beta", "devnet", "testnet"]
"""Solana cluster the funding account lives on."""

ContentTag = Tuple[str, str]
"""A (name, value) tag attached to an upload."""

SOLANA_RPC_URLS: Dict[str, str] = {
    "mainnet-beta": "https://api.mainnet-beta.solana.com",
    "devnet": "https://api.devnet.solana.com",
    "testnet": "https://api.testnet.solana.com",
}

# Ordered: the first entry is the primary node, the rest are fallbacks
IRYS_NODES: Dict[str, Tuple[str, ...]] = {
    "mainnet-beta": ("https://node1.irys.xyz", "https://node2.irys.xyz"),
    "devnet": ("https://devnet.irys.xyz",),
    "testnet": ("https://devnet.irys.xyz",),
}

ARWEAVE_GATEWAY = "https://arweave.net"
DEFAULT_APP_NAME = "Delegate-Framework"
DEFAULT_APP_VERSION = "1.0.0"


# ============================================================================
# Configuration
# ============================================================================


class ArweaveConfig(BaseModel):
    """
    Configuration for the Arweave client (Irys nodes paid in SOL).

    Example:
        ```python
        config = ArweaveConfig(
            private_key=os.environ["FUNDING_KEY"],
            network="devnet",
        )
        ```
    """

    model_config = ConfigDict(frozen=True)

    private_key: str = Field(
        ...,
        repr=False,
        description="Base58 encoded Solana secret key. SECURITY: Store in env var",
    )
    network: SolanaNetwork = Field(
        default="mainnet-beta",
        description="Solana cluster (mainnet-beta, devnet or testnet)",
    )
    rpc_url: Optional[str] = Field(
        default=None,
        description="Solana RPC URL (defaults to the public endpoint of the network)",
    )
    primary_node_url: Optional[str] = Field(
        default=None,
        description="Primary storage node (defaults per network)",
    )
    fallback_node_url: Optional[str] = Field(
        default=None,
        description="Fallback storage node (defaults per network)",
    )
    node_urls: Optional[Tuple[str, ...]] = Field(
        default=None,
        description="Explicit ordered node list; overrides primary/fallback",
    )
    gateway_url: str = Field(
        default=ARWEAVE_GATEWAY,
        description="Gateway used to build and verify public URIs",
    )
    timeout: int = Field(
        default=60000,
        ge=1,
        description="Per-attempt request timeout in milliseconds",
    )
    retries: int = Field(
        default=3,
        ge=1,
        description="Attempts per network call",
    )
    verification_retries: int = Field(
        default=5,
        ge=1,
        description="Availability checks after an upload",
    )
    verification_delay_ms: int = Field(
        default=3000,
        ge=0,
        description="Delay between availability checks in milliseconds",
    )
    funding_retries: int = Field(
        default=20,
        ge=1,
        description="Balance checks after a funding transfer",
    )
    funding_delay_ms: int = Field(
        default=2000,
        ge=0,
        description="Delay between balance checks in milliseconds",
    )
    funding_buffer_multiplier: float = Field(
        default=1.2,
        gt=1,
        description="Multiplier applied to the funding deficit",
    )
    app_name: str = Field(
        default=DEFAULT_APP_NAME,
        description="Value of the App-Name tag",
    )
    app_version: str = Field(
        default=DEFAULT_APP_VERSION,
        description="Value of the App-Version tag",
    )

    def resolve_rpc_url(self) -> str:
        """Get the Solana RPC URL, falling back to the network default."""
        return self.rpc_url or SOLANA_RPC_URLS[self.network]

    def resolve_node_urls(self) -> List[str]:
        """
        Get the ordered list of storage nodes to try.

        An explicit ``node_urls`` wins. Otherwise the primary and fallback
        URLs are used, each defaulting to the network's known nodes.
        Duplicates are dropped, keeping the first occurrence.
        """
        if self.node_urls:
            candidates: List[Optional[str]] = list(self.node_urls)
        else:
            defaults = IRYS_NODES[self.network]
            candidates = [
                self.primary_node_url or defaults[0],
                self.fallback_node_url or (defaults[1] if len(defaults) > 1 else None),
            ]

        urls: List[str] = []
        for url in candidates:
            if url and url.rstrip("/") not in urls:
                urls.append(url.rstrip("/"))
        return urls


# ============================================================================
# Pipeline Values
# ============================================================================


class UploadRequest(BaseModel):
    """Payload and tags bound for one storage node."""

    model_config = ConfigDict(frozen=True)

    payload: bytes = Field(
        ...,
        description="Raw bytes to upload",
    )
    content_tags: Tuple[ContentTag, ...] = Field(
        default=(),
        description="Ordered (name, value) tags",
    )
    target_node_url: str = Field(
        ...,
        description="Node the request is sent to",
    )

    @property
    def data_size(self) -> int:
        """Size of the payload in bytes."""
        return len(self.payload)


class PriceQuote(BaseModel):
    """Price of an upload on one node, in lamports."""

    model_config = ConfigDict(frozen=True)

    cost: int = Field(
        ...,
        ge=0,
        description="Price in lamports",
    )
    data_size: int = Field(
        ...,
        ge=0,
        description="Priced payload size in bytes",
    )


class FundingState(BaseModel):
    """Snapshot of a node balance against the amount an upload needs."""

    model_config = ConfigDict(frozen=True)

    current_balance: int = Field(
        ...,
        ge=0,
        description="Prepaid node balance in lamports",
    )
    required_amount: int = Field(
        ...,
        ge=0,
        description="Amount the upload needs in lamports",
    )

    @property
    def deficit(self) -> int:
        """Lamports missing (0 when sufficiently funded)."""
        return max(self.required_amount - self.current_balance, 0)

    @property
    def is_sufficient(self) -> bool:
        """Whether the balance covers the required amount."""
        return self.current_balance >= self.required_amount


class UploadReceipt(BaseModel):
    """Receipt returned by a node for an accepted upload."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Transaction id on the storage network",
    )
    uri: str = Field(
        ...,
        description="Public URI (<gateway>/<id>)",
    )


class UploadResult(BaseModel):
    """
    Outcome of an upload.

    ``success=True`` means the URI was verified reachable. A failed result
    may still carry ``uri`` and ``tx_id`` when the node accepted the upload
    but it never became visible.
    """

    model_config = ConfigDict(frozen=True)

    success: bool = Field(
        ...,
        description="Whether the upload was accepted and verified",
    )
    uri: Optional[str] = Field(
        default=None,
        description="Public URI of the uploaded object",
    )
    tx_id: Optional[str] = Field(
        default=None,
        description="Transaction id on the storage network",
    )
    error: Optional[str] = Field(
        default=None,
        description="Human-readable failure reason",
    )
    node_url: Optional[str] = Field(
        default=None,
        description="Node that produced this result",
    )


class UploadCost(BaseModel):
    """Result of an upload cost query."""

    model_config = ConfigDict(frozen=True)

    cost: int = Field(
        ...,
        ge=0,
        description="Price in lamports",
    )
    data_size: int = Field(
        ...,
        ge=0,
        description="Priced payload size in bytes",
    )


# ============================================================================
# Protocols
# ============================================================================


@runtime_checkable
class StorageNode(Protocol):
    """One storage ingress endpoint with its own price and balance."""

    @property
    def url(self) -> str: ...

    async def get_price(self, data_size: int) -> int: ...

    async def get_balance(self) -> int: ...

    async def fund(self, amount: int) -> str: ...

    async def upload(
        self,
        payload: bytes,
        tags: Sequence[ContentTag],
    ) -> Dict[str, Any]: ...


@runtime_checkable
class MetadataClient(Protocol):
    """Upload surface consumed by token operations."""

    async def upload_metadata(self, metadata: Dict[str, Any]) -> UploadResult: ...

    async def upload_image(self, image: bytes, content_type: str) -> UploadResult: ...
