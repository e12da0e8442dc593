"""
Storage-related exceptions for the funded-upload pipeline.

These exceptions are raised while pricing, funding, submitting and
retrying uploads against pay-per-byte storage nodes (Irys / Bundlr).
Verification exhaustion is not an exception: the verifier returns False.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from delegate_framework.errors.base import DelegateError


class StorageError(DelegateError):
    """
    Base exception for storage operations.

    Example:
        >>> raise StorageError("Failed to reach storage node")
    """

    def __init__(
        self,
        message: str,
        *,
        node_url: Optional[str] = None,
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = dict(details or {})
        if node_url:
            details["node_url"] = node_url

        super().__init__(
            message,
            code="STORAGE_ERROR",
            tx_hash=tx_hash,
            details=details,
        )
        self.node_url = node_url


class StorageNodeError(StorageError):
    """
    Raised when a storage node answers with an unexpected status or body.

    Example:
        >>> raise StorageNodeError("Failed to get price: HTTP 503", status_code=503)
    """

    def __init__(
        self,
        message: str,
        *,
        node_url: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = dict(details or {})
        if status_code is not None:
            details["status_code"] = status_code

        super().__init__(message, node_url=node_url, details=details)
        self.code = "STORAGE_NODE_ERROR"
        self.status_code = status_code


class OperationTimeoutError(StorageError):
    """
    Raised by the request executor when a single attempt exceeds its timeout.

    Example:
        >>> raise OperationTimeoutError(60000, operation="getPrice")
    """

    def __init__(
        self,
        timeout_ms: int,
        *,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = dict(details or {})
        details["timeout_ms"] = timeout_ms
        if operation:
            details["operation"] = operation

        super().__init__(
            f"Operation timed out after {timeout_ms}ms",
            details=details,
        )
        self.code = "OPERATION_TIMEOUT"
        self.timeout_ms = timeout_ms
        self.operation = operation


class EstimationFailedError(StorageError):
    """
    Raised when a node's upload price cannot be determined.

    A failed estimate never defaults to zero, since funding depends on it.

    Example:
        >>> raise EstimationFailedError(
        ...     "Failed to get upload price: HTTP 500",
        ...     data_size=1024,
        ... )
    """

    def __init__(
        self,
        message: str,
        *,
        node_url: Optional[str] = None,
        data_size: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = dict(details or {})
        if data_size is not None:
            details["data_size"] = data_size

        super().__init__(message, node_url=node_url, details=details)
        self.code = "ESTIMATION_FAILED"
        self.data_size = data_size


# ============================================================================
# Funding Errors
# ============================================================================


class FundingError(StorageError):
    """Base exception for node funding failures."""

    def __init__(
        self,
        message: str,
        *,
        node_url: Optional[str] = None,
        required: Optional[int] = None,
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = dict(details or {})
        if required is not None:
            details["required"] = required

        super().__init__(message, node_url=node_url, tx_hash=tx_hash, details=details)
        self.code = "FUNDING_ERROR"
        self.required = required


class FundingSubmitError(FundingError):
    """
    Raised when the funding transfer could not be submitted.

    Example:
        >>> raise FundingSubmitError("Funding transfer failed", amount=1200)
    """

    def __init__(
        self,
        message: str = "Funding transfer failed",
        *,
        node_url: Optional[str] = None,
        amount: Optional[int] = None,
        required: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = dict(details or {})
        if amount is not None:
            details["amount"] = amount

        super().__init__(message, node_url=node_url, required=required, details=details)
        self.code = "FUNDING_SUBMIT_FAILED"
        self.amount = amount


class FundingConfirmationTimeoutError(FundingError):
    """
    Raised when a submitted funding transfer is not reflected in the node
    balance within the poll budget.

    The transfer may still land later; the upload must not proceed.

    Example:
        >>> raise FundingConfirmationTimeoutError(20, 2000, balance=0, required=1000)
    """

    def __init__(
        self,
        polls: int,
        delay_ms: int,
        *,
        balance: Optional[int] = None,
        required: Optional[int] = None,
        node_url: Optional[str] = None,
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = dict(details or {})
        details["polls"] = polls
        details["delay_ms"] = delay_ms
        if balance is not None:
            details["balance"] = balance

        seconds = polls * delay_ms / 1000
        super().__init__(
            f"Funding confirmation timed out after {seconds:g} seconds "
            f"({polls} balance checks)",
            node_url=node_url,
            required=required,
            tx_hash=tx_hash,
            details=details,
        )
        self.code = "FUNDING_CONFIRMATION_TIMEOUT"
        self.polls = polls
        self.balance = balance


# ============================================================================
# Upload Errors
# ============================================================================


class UploadSubmitError(StorageError):
    """
    Raised when submitting bytes to a storage node fails.

    Example:
        >>> raise UploadSubmitError("Upload failed: HTTP 402", size_bytes=1024)
    """

    def __init__(
        self,
        message: str = "Upload submit failed",
        *,
        node_url: Optional[str] = None,
        size_bytes: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = dict(details or {})
        if size_bytes is not None:
            details["size_bytes"] = size_bytes

        super().__init__(message, node_url=node_url, details=details)
        self.code = "UPLOAD_SUBMIT_FAILED"
        self.size_bytes = size_bytes


class NoReceiptIdError(StorageError):
    """
    Raised when a node accepts an upload but returns no receipt id.

    This signals node misbehavior, not transient unavailability.

    Example:
        >>> raise NoReceiptIdError(node_url="https://node1.irys.xyz")
    """

    def __init__(
        self,
        message: str = "No ID returned from storage node upload",
        *,
        node_url: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, node_url=node_url, details=details)
        self.code = "NO_RECEIPT_ID"
