"""
Tests for the Irys node HTTP client.
"""

import hashlib
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from solders.keypair import Keypair
from solders.signature import Signature

from delegate_framework.errors import StorageNodeError
from delegate_framework.storage.funder import SolanaFunder
from delegate_framework.storage.node import IrysNode

from .conftest import (
    FUND_SIGNATURE,
    PRIMARY_URL,
    create_mock_httpx_client,
    create_mock_response,
)

DEPOSIT_ADDRESS = "11111111111111111111111111111112"


@pytest.fixture
def funder() -> MagicMock:
    mock = MagicMock(spec=SolanaFunder)
    mock.transfer = AsyncMock(return_value=FUND_SIGNATURE)
    return mock


@pytest.fixture
def node(keypair: Keypair, funder: MagicMock) -> IrysNode:
    return IrysNode(PRIMARY_URL + "/", keypair=keypair, funder=funder, timeout_ms=30000)


class TestInit:
    """Tests for IrysNode construction."""

    def test_url_strips_trailing_slash(self, node: IrysNode) -> None:
        assert node.url == PRIMARY_URL

    def test_address_is_funding_pubkey(self, node: IrysNode, keypair: Keypair) -> None:
        assert node.address == str(keypair.pubkey())


class TestGetPrice:
    """Tests for IrysNode.get_price."""

    @pytest.mark.asyncio
    async def test_parses_plain_text_price(self, node: IrysNode) -> None:
        client_class, http = create_mock_httpx_client(
            get=create_mock_response(200, text="123456\n")
        )

        with patch("httpx.AsyncClient", client_class):
            assert await node.get_price(1024) == 123456

        http.get.assert_awaited_once_with(f"{PRIMARY_URL}/price/solana/1024")

    @pytest.mark.asyncio
    async def test_http_error(self, node: IrysNode) -> None:
        client_class, _ = create_mock_httpx_client(get=create_mock_response(503))

        with patch("httpx.AsyncClient", client_class):
            with pytest.raises(StorageNodeError) as exc_info:
                await node.get_price(1024)

        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_malformed_body(self, node: IrysNode) -> None:
        client_class, _ = create_mock_httpx_client(
            get=create_mock_response(200, text="<html>oops</html>")
        )

        with patch("httpx.AsyncClient", client_class):
            with pytest.raises(StorageNodeError, match="Malformed price"):
                await node.get_price(1024)


class TestGetBalance:
    """Tests for IrysNode.get_balance."""

    @pytest.mark.asyncio
    async def test_success(self, node: IrysNode) -> None:
        client_class, http = create_mock_httpx_client(
            get=create_mock_response(200, json_data={"balance": "1200"})
        )

        with patch("httpx.AsyncClient", client_class):
            assert await node.get_balance() == 1200

        http.get.assert_awaited_once_with(
            f"{PRIMARY_URL}/account/balance/solana",
            params={"address": node.address},
        )

    @pytest.mark.asyncio
    async def test_not_found_returns_zero(self, node: IrysNode) -> None:
        client_class, _ = create_mock_httpx_client(get=create_mock_response(404))

        with patch("httpx.AsyncClient", client_class):
            assert await node.get_balance() == 0

    @pytest.mark.asyncio
    async def test_error(self, node: IrysNode) -> None:
        client_class, _ = create_mock_httpx_client(get=create_mock_response(500))

        with patch("httpx.AsyncClient", client_class):
            with pytest.raises(StorageNodeError, match="Failed to get balance"):
                await node.get_balance()


class TestFund:
    """Tests for IrysNode.fund."""

    @pytest.mark.asyncio
    async def test_transfers_to_deposit_address_and_registers(
        self, node: IrysNode, funder: MagicMock
    ) -> None:
        client_class, http = create_mock_httpx_client(
            get=create_mock_response(200, json_data={"addresses": {"solana": DEPOSIT_ADDRESS}}),
            post=create_mock_response(200),
        )

        with patch("httpx.AsyncClient", client_class):
            signature = await node.fund(1200)

        assert signature == FUND_SIGNATURE
        funder.transfer.assert_awaited_once_with(DEPOSIT_ADDRESS, 1200)
        http.post.assert_awaited_once_with(
            f"{PRIMARY_URL}/account/balance/solana",
            json={"tx_id": FUND_SIGNATURE},
        )

    @pytest.mark.asyncio
    async def test_registration_failure_still_returns_signature(
        self, node: IrysNode, funder: MagicMock
    ) -> None:
        client_class, _ = create_mock_httpx_client(
            get=create_mock_response(200, json_data={"addresses": {"solana": DEPOSIT_ADDRESS}}),
            post=create_mock_response(400),
        )

        with patch("httpx.AsyncClient", client_class):
            assert await node.fund(1200) == FUND_SIGNATURE

    @pytest.mark.asyncio
    async def test_missing_deposit_address(self, node: IrysNode, funder: MagicMock) -> None:
        client_class, _ = create_mock_httpx_client(
            get=create_mock_response(200, json_data={"addresses": {"ethereum": "0xabc"}})
        )

        with patch("httpx.AsyncClient", client_class):
            with pytest.raises(StorageNodeError, match="deposit address"):
                await node.fund(1200)

        funder.transfer.assert_not_called()


class TestUpload:
    """Tests for IrysNode.upload."""

    @pytest.mark.asyncio
    async def test_sends_signed_payload_with_tags(
        self, node: IrysNode, keypair: Keypair
    ) -> None:
        payload = b'{"name": "Token"}'
        client_class, http = create_mock_httpx_client(
            post=create_mock_response(200, json_data={"id": "abc"})
        )

        with patch("httpx.AsyncClient", client_class):
            result = await node.upload(
                payload,
                [("Content-Type", "application/json"), ("App-Name", "Delegate-Framework")],
            )

        assert result == {"id": "abc"}
        call = http.post.await_args
        assert call.args[0] == f"{PRIMARY_URL}/tx/solana"
        assert call.kwargs["content"] == payload

        headers = call.kwargs["headers"]
        assert headers["x-address"] == str(keypair.pubkey())
        assert headers["x-tag-0-name"] == "Content-Type"
        assert headers["x-tag-0-value"] == "application/json"
        assert headers["x-tag-1-name"] == "App-Name"
        assert headers["x-tag-1-value"] == "Delegate-Framework"

        signature = Signature.from_string(headers["x-signature"])
        digest = hashlib.sha256(payload).hexdigest().encode()
        assert signature.verify(keypair.pubkey(), digest)

    @pytest.mark.asyncio
    async def test_rejected_upload(self, node: IrysNode) -> None:
        client_class, _ = create_mock_httpx_client(
            post=create_mock_response(402, text="Not enough balance")
        )

        with patch("httpx.AsyncClient", client_class):
            with pytest.raises(StorageNodeError) as exc_info:
                await node.upload(b"data", [])

        assert exc_info.value.status_code == 402
        assert "Not enough balance" in exc_info.value.message
