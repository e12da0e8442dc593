"""
Solana funding transfers.

Sends the SOL transfer that tops up a storage node's prepaid balance.
"""

from __future__ import annotations

import logging
from typing import Optional

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed
from solana.rpc.types import TxOpts
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction

from delegate_framework.utils.logging import get_logger
from delegate_framework.utils.validation import validate_amount

_logger = get_logger(__name__)


class SolanaFunder:
    """
    Signs and sends system-program transfers from the funding account.

    A fresh RPC client is opened per transfer.

    Example:
        ```python
        funder = SolanaFunder(keypair, "https://api.devnet.solana.com")
        signature = await funder.transfer(deposit_address, 1200)
        ```
    """

    def __init__(
        self,
        keypair: Keypair,
        rpc_url: str,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._keypair = keypair
        self._rpc_url = rpc_url
        self._logger = logger or _logger

    @property
    def address(self) -> str:
        """Base58 public key of the funding account."""
        return str(self._keypair.pubkey())

    @property
    def rpc_url(self) -> str:
        """Get the Solana RPC URL."""
        return self._rpc_url

    async def transfer(self, to_address: str, lamports: int) -> str:
        """
        Transfer lamports to ``to_address``.

        Args:
            to_address: Base58 recipient public key
            lamports: Amount to send

        Returns:
            Transaction signature (base58)
        """
        lamports = validate_amount(lamports, "lamports")
        recipient = Pubkey.from_string(to_address)

        instruction = transfer(
            TransferParams(
                from_pubkey=self._keypair.pubkey(),
                to_pubkey=recipient,
                lamports=lamports,
            )
        )

        async with AsyncClient(self._rpc_url, commitment=Confirmed) as client:
            blockhash_resp = await client.get_latest_blockhash()
            blockhash = blockhash_resp.value.blockhash

            message = Message.new_with_blockhash(
                [instruction], self._keypair.pubkey(), blockhash
            )
            tx = Transaction([self._keypair], message, blockhash)

            resp = await client.send_raw_transaction(
                bytes(tx),
                opts=TxOpts(preflight_commitment=Confirmed),
            )

        signature = str(resp.value)
        self._logger.debug(
            "Funding transfer sent",
            extra={
                "from": self.address,
                "to": to_address,
                "lamports": lamports,
                "signature": signature,
            },
        )
        return signature
