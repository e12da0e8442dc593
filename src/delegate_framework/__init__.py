"""
Delegate Framework - Solana asset operations with permanent metadata storage.

Quick Start:
    >>> import asyncio
    >>> from delegate_framework import ArweaveClient, ArweaveConfig
    >>>
    >>> async def main():
    ...     client = await ArweaveClient.create(ArweaveConfig(
    ...         private_key="<base58 secret key>",
    ...         network="devnet",
    ...     ))
    ...     result = await client.upload_metadata({"name": "Token", "symbol": "TKN"})
    ...     print(result.uri if result.success else result.error)
    ...
    >>> asyncio.run(main())

Modules:
- `storage`: funded upload pipeline (price, fund, upload, verify, fallback)
- `errors`: Exception hierarchy
- `utils`: Logging, retry and validation helpers
"""

from delegate_framework.version import __version__, __version_info__

# Storage
from delegate_framework.storage import (
    ArweaveClient,
    ArweaveConfig,
    MetadataClient,
    UploadCost,
    UploadResult,
)

# Errors
from delegate_framework.errors import (
    ConfigurationError,
    DelegateError,
    EstimationFailedError,
    FundingConfirmationTimeoutError,
    FundingSubmitError,
    NoReceiptIdError,
    OperationTimeoutError,
    StorageError,
    UploadSubmitError,
    ValidationError,
)

# Utils
from delegate_framework.utils import (
    RequestExecutor,
    RetryConfig,
    configure_logging,
    get_logger,
)

__all__ = [
    "__version__",
    "__version_info__",
    # Storage
    "ArweaveClient",
    "ArweaveConfig",
    "MetadataClient",
    "UploadCost",
    "UploadResult",
    # Errors
    "DelegateError",
    "ConfigurationError",
    "ValidationError",
    "StorageError",
    "EstimationFailedError",
    "FundingSubmitError",
    "FundingConfirmationTimeoutError",
    "UploadSubmitError",
    "NoReceiptIdError",
    "OperationTimeoutError",
    # Utils
    "RequestExecutor",
    "RetryConfig",
    "configure_logging",
    "get_logger",
]
