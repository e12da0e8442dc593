"""
Exception hierarchy for the Delegate Framework.

    DelegateError
    ├── ConfigurationError
    ├── ValidationError
    └── StorageError
        ├── StorageNodeError
        ├── OperationTimeoutError
        ├── EstimationFailedError
        ├── FundingError
        │   ├── FundingSubmitError
        │   └── FundingConfirmationTimeoutError
        ├── UploadSubmitError
        └── NoReceiptIdError
"""

from delegate_framework.errors.base import (
    ConfigurationError,
    DelegateError,
    get_error_message,
)
from delegate_framework.errors.storage import (
    EstimationFailedError,
    FundingConfirmationTimeoutError,
    FundingError,
    FundingSubmitError,
    NoReceiptIdError,
    OperationTimeoutError,
    StorageError,
    StorageNodeError,
    UploadSubmitError,
)
from delegate_framework.errors.validation import ValidationError

__all__ = [
    "DelegateError",
    "ConfigurationError",
    "ValidationError",
    "get_error_message",
    # Storage
    "StorageError",
    "StorageNodeError",
    "OperationTimeoutError",
    "EstimationFailedError",
    "FundingError",
    "FundingSubmitError",
    "FundingConfirmationTimeoutError",
    "UploadSubmitError",
    "NoReceiptIdError",
]
