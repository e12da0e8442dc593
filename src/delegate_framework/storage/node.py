"""
Irys node HTTP client.

One ``IrysNode`` talks to one storage ingress endpoint using the Solana
currency routes of the Irys (Bundlr) HTTP API. Every method performs a
single request; retries and timeouts are applied by the caller through
the request executor.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Any, Dict, Optional, Sequence

import httpx
from solders.keypair import Keypair

from delegate_framework.errors import StorageNodeError
from delegate_framework.storage.funder import SolanaFunder
from delegate_framework.storage.types import ContentTag
from delegate_framework.utils.logging import get_logger

_logger = get_logger(__name__)

IRYS_CURRENCY = "solana"


class IrysNode:
    """
    HTTP client for a single Irys node paid in SOL.

    Example:
        ```python
        node = IrysNode("https://node1.irys.xyz", keypair=keypair, funder=funder)

        price = await node.get_price(1024)
        balance = await node.get_balance()
        ```
    """

    def __init__(
        self,
        url: str,
        *,
        keypair: Keypair,
        funder: SolanaFunder,
        timeout_ms: int = 60000,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._url = url.rstrip("/")
        self._keypair = keypair
        self._funder = funder
        self._timeout_ms = timeout_ms
        self._logger = logger or _logger

    @property
    def url(self) -> str:
        """Get the node URL."""
        return self._url

    @property
    def address(self) -> str:
        """Base58 public key the node accounts the balance under."""
        return str(self._keypair.pubkey())

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=httpx.Timeout(self._timeout_ms / 1000))

    async def get_price(self, data_size: int) -> int:
        """
        Get the upload price for ``data_size`` bytes.

        Returns:
            Price in lamports
        """
        url = f"{self._url}/price/{IRYS_CURRENCY}/{data_size}"

        async with self._client() as client:
            response = await client.get(url)

            if response.status_code != 200:
                raise StorageNodeError(
                    f"Failed to get price: HTTP {response.status_code}",
                    node_url=self._url,
                    status_code=response.status_code,
                )

            # Response is just the price as a string
            return self._parse_int(response.text, "price")

    async def get_balance(self) -> int:
        """
        Get the prepaid balance of the funding account on this node.

        Returns:
            Balance in lamports (0 when the node has no record)
        """
        url = f"{self._url}/account/balance/{IRYS_CURRENCY}"

        async with self._client() as client:
            response = await client.get(url, params={"address": self.address})

            if response.status_code == 404:
                # No balance found = 0
                return 0

            if response.status_code != 200:
                raise StorageNodeError(
                    f"Failed to get balance: HTTP {response.status_code}",
                    node_url=self._url,
                    status_code=response.status_code,
                )

            data = response.json()
            return self._parse_int(data.get("balance", 0), "balance")

    async def get_deposit_address(self) -> str:
        """Get the address that funding transfers must be sent to."""
        async with self._client() as client:
            response = await client.get(f"{self._url}/info")

            if response.status_code != 200:
                raise StorageNodeError(
                    f"Failed to get node info: HTTP {response.status_code}",
                    node_url=self._url,
                    status_code=response.status_code,
                )

            address = response.json().get("addresses", {}).get(IRYS_CURRENCY)
            if not address:
                raise StorageNodeError(
                    f"Node has no {IRYS_CURRENCY} deposit address",
                    node_url=self._url,
                )
            return address

    async def fund(self, amount: int) -> str:
        """
        Send ``amount`` lamports to the node and register the transfer.

        Registration failures are only logged: the transfer is already on
        the ledger and the node also picks it up on its own.

        Returns:
            Funding transaction signature
        """
        deposit_address = await self.get_deposit_address()
        signature = await self._funder.transfer(deposit_address, amount)

        async with self._client() as client:
            response = await client.post(
                f"{self._url}/account/balance/{IRYS_CURRENCY}",
                json={"tx_id": signature},
            )

        if not 200 <= response.status_code < 300:
            self._logger.warning(
                "Node did not acknowledge funding transfer",
                extra={
                    "node_url": self._url,
                    "status_code": response.status_code,
                    "signature": signature,
                },
            )

        return signature

    async def upload(
        self,
        payload: bytes,
        tags: Sequence[ContentTag],
    ) -> Dict[str, Any]:
        """
        Submit ``payload`` with ``tags``.

        Returns:
            The node's JSON response (``{"id": ...}`` on success)
        """
        # Sign the content hash
        content_hash = hashlib.sha256(payload).hexdigest()
        signature = self._keypair.sign_message(content_hash.encode())

        headers = {
            "Content-Type": "application/octet-stream",
            "x-address": self.address,
            "x-signature": str(signature),
        }

        # Add tags as headers (Irys format)
        for i, (name, value) in enumerate(tags):
            headers[f"x-tag-{i}-name"] = name
            headers[f"x-tag-{i}-value"] = value

        async with self._client() as client:
            response = await client.post(
                f"{self._url}/tx/{IRYS_CURRENCY}",
                content=payload,
                headers=headers,
            )

            if response.status_code not in (200, 201):
                raise StorageNodeError(
                    f"Upload failed: HTTP {response.status_code} {response.text}".rstrip(),
                    node_url=self._url,
                    status_code=response.status_code,
                )

            data = response.json()
            if not isinstance(data, dict):
                raise StorageNodeError(
                    "Upload failed: unexpected response body",
                    node_url=self._url,
                    status_code=response.status_code,
                )
            return data

    def _parse_int(self, raw: Any, field: str) -> int:
        try:
            value = int(str(raw).strip())
        except ValueError:
            raise StorageNodeError(
                f"Malformed {field} in node response: {raw!r}",
                node_url=self._url,
            )
        if value < 0:
            raise StorageNodeError(
                f"Negative {field} in node response: {value}",
                node_url=self._url,
            )
        return value

    def __repr__(self) -> str:
        return f"IrysNode(url={self._url!r})"
