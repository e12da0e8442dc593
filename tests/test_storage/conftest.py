"""
Shared fixtures for storage module tests.
"""

from typing import Any, Dict, Iterable, List, Tuple
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from solders.keypair import Keypair

from delegate_framework.storage.types import ArweaveConfig
from delegate_framework.utils.retry import RequestExecutor, RetryConfig


# =============================================================================
# Test Constants
# =============================================================================

PRIMARY_URL = "https://node1.irys.xyz"
FALLBACK_URL = "https://node2.irys.xyz"
FUND_SIGNATURE = "5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnb"


# =============================================================================
# Helpers
# =============================================================================


class FakeNode:
    """In-memory storage node with AsyncMock endpoints."""

    def __init__(
        self,
        url: str = PRIMARY_URL,
        *,
        price: Any = 1000,
        balances: Iterable[Any] = (0,),
        fund_result: Any = FUND_SIGNATURE,
        upload_result: Any = None,
    ) -> None:
        self.url = url
        self.get_price = AsyncMock(side_effect=self._side_effect(price))
        self.get_balance = AsyncMock(side_effect=self._sequence(list(balances)))
        self.fund = AsyncMock(side_effect=self._side_effect(fund_result))
        self.upload = AsyncMock(
            side_effect=self._side_effect(
                upload_result if upload_result is not None else {"id": "abc"}
            )
        )

    @staticmethod
    def _side_effect(value: Any):
        if isinstance(value, BaseException) or (
            isinstance(value, type) and issubclass(value, BaseException)
        ):
            return value
        return lambda *args, **kwargs: value

    @staticmethod
    def _sequence(values: List[Any]):
        """Return values in order, repeating the last one forever."""
        state = {"index": 0}

        def next_value(*args, **kwargs):
            value = values[min(state["index"], len(values) - 1)]
            state["index"] += 1
            if isinstance(value, BaseException):
                raise value
            return value

        return next_value


class MockAsyncContextManager:
    """Mock async context manager for httpx.AsyncClient."""

    def __init__(self, mock_client: AsyncMock):
        self.mock_client = mock_client

    async def __aenter__(self):
        return self.mock_client

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None


def create_mock_response(
    status_code: int = 200,
    json_data: Any = None,
    text: str = "",
    content: bytes = b"",
) -> MagicMock:
    """Create a mock httpx Response."""
    response = MagicMock(spec=httpx.Response)
    response.status_code = status_code
    response.text = text
    response.content = content
    if json_data is not None:
        response.json.return_value = json_data
    return response


def create_mock_httpx_client(
    get: Any = None,
    post: Any = None,
) -> Tuple[MagicMock, AsyncMock]:
    """
    Create a mock httpx.AsyncClient class.

    ``get``/``post`` are used as side effects: a response, an exception or a
    list of either.

    Returns:
        (client class mock, client instance mock)
    """
    mock_http = AsyncMock()
    for method, behavior in (("get", get), ("post", post)):
        if behavior is None:
            continue
        if isinstance(behavior, list) or isinstance(behavior, BaseException):
            setattr(mock_http, method, AsyncMock(side_effect=behavior))
        else:
            setattr(mock_http, method, AsyncMock(return_value=behavior))

    def factory(*args, **kwargs):
        return MockAsyncContextManager(mock_http)

    return MagicMock(side_effect=factory), mock_http


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def keypair() -> Keypair:
    """Funding keypair."""
    return Keypair()


@pytest.fixture
def arweave_config(keypair: Keypair) -> ArweaveConfig:
    """Create a test ArweaveConfig."""
    return ArweaveConfig(
        private_key=str(keypair),
        network="mainnet-beta",
        primary_node_url=PRIMARY_URL,
        fallback_node_url=FALLBACK_URL,
        timeout=60000,
    )


@pytest.fixture
def executor() -> RequestExecutor:
    """Request executor with the default schedule."""
    return RequestExecutor(RetryConfig(max_attempts=3, timeout_ms=60000))


@pytest.fixture
def mock_sleep():
    """Patch asyncio.sleep so backoff and poll delays are instant."""
    with patch("asyncio.sleep", new_callable=AsyncMock) as mock:
        yield mock


@pytest.fixture
def sample_metadata() -> Dict[str, Any]:
    """Sample token metadata."""
    return {
        "name": "Delegate Token",
        "symbol": "DLGT",
        "description": "Test token",
        "image": "https://arweave.net/image-id",
    }


@pytest.fixture
def sample_image() -> bytes:
    """Sample PNG bytes."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 1016
