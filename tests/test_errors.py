"""
Tests for the exception hierarchy.
"""

import pytest

from delegate_framework.errors import (
    ConfigurationError,
    DelegateError,
    EstimationFailedError,
    FundingConfirmationTimeoutError,
    FundingError,
    FundingSubmitError,
    NoReceiptIdError,
    OperationTimeoutError,
    StorageError,
    StorageNodeError,
    UploadSubmitError,
    ValidationError,
    get_error_message,
)


class TestDelegateError:
    """Tests for the base error."""

    def test_str_includes_code_and_short_tx(self) -> None:
        error = DelegateError("boom", code="X", tx_hash="5VERv8NMvzbJMEkV8xnr")

        assert str(error) == "[X] boom (tx: 5VERv8NMvz...)"

    def test_to_dict(self) -> None:
        error = ConfigurationError("Private key is required", field="private_key")

        assert error.to_dict() == {
            "error": "ConfigurationError",
            "code": "CONFIGURATION_ERROR",
            "message": "Private key is required",
            "tx_hash": None,
            "details": {"field": "private_key"},
        }


class TestStorageErrors:
    """Tests for storage error codes and hierarchy."""

    @pytest.mark.parametrize(
        "error, code",
        [
            (StorageNodeError("x", status_code=500), "STORAGE_NODE_ERROR"),
            (OperationTimeoutError(60000), "OPERATION_TIMEOUT"),
            (EstimationFailedError("x"), "ESTIMATION_FAILED"),
            (FundingSubmitError(), "FUNDING_SUBMIT_FAILED"),
            (FundingConfirmationTimeoutError(20, 2000), "FUNDING_CONFIRMATION_TIMEOUT"),
            (UploadSubmitError(), "UPLOAD_SUBMIT_FAILED"),
            (NoReceiptIdError(), "NO_RECEIPT_ID"),
        ],
    )
    def test_codes(self, error: StorageError, code: str) -> None:
        assert error.code == code
        assert isinstance(error, StorageError)
        assert isinstance(error, DelegateError)

    def test_funding_errors_share_base(self) -> None:
        assert issubclass(FundingSubmitError, FundingError)
        assert issubclass(FundingConfirmationTimeoutError, FundingError)

    def test_funding_timeout_message(self) -> None:
        error = FundingConfirmationTimeoutError(
            20, 2000, balance=0, required=1000, tx_hash="sig"
        )

        assert error.message.startswith("Funding confirmation timed out")
        assert "40 seconds" in error.message
        assert error.details == {"polls": 20, "delay_ms": 2000, "balance": 0, "required": 1000}
        assert error.tx_hash == "sig"

    def test_node_url_recorded_in_details(self) -> None:
        error = UploadSubmitError("Upload failed", node_url="https://node1.irys.xyz", size_bytes=10)

        assert error.details == {"node_url": "https://node1.irys.xyz", "size_bytes": 10}

    def test_caller_details_not_mutated(self) -> None:
        context = {"attempt": 2}

        error = StorageNodeError(
            "Failed to get price: HTTP 503",
            node_url="https://node1.irys.xyz",
            status_code=503,
            details=context,
        )
        ConfigurationError("bad url", field="node_urls", details=context)

        assert context == {"attempt": 2}
        assert error.details == {
            "attempt": 2,
            "status_code": 503,
            "node_url": "https://node1.irys.xyz",
        }


class TestGetErrorMessage:
    """Tests for get_error_message."""

    def test_framework_error_returns_bare_message(self) -> None:
        assert get_error_message(ValidationError("bad")) == "bad"

    def test_other_exceptions_use_str(self) -> None:
        assert get_error_message(ValueError("oops")) == "oops"

    def test_empty_exception_uses_class_name(self) -> None:
        assert get_error_message(TimeoutError()) == "TimeoutError"
