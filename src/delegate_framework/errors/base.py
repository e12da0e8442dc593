"""
Base exception class for the Delegate Framework.

All framework exceptions inherit from DelegateError, which carries a
machine-readable error code, an optional ledger transaction signature,
and a dictionary of additional context.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class DelegateError(Exception):
    """
    Base exception for all Delegate Framework errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code (e.g., "UPLOAD_SUBMIT_FAILED").
        tx_hash: Optional transaction signature related to the error.
        details: Optional dictionary with additional error context.

    Example:
        >>> raise DelegateError(
        ...     "Funding transfer rejected",
        ...     code="FUNDING_SUBMIT_FAILED",
        ...     tx_hash="5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnb...",
        ...     details={"lamports": 1200}
        ... )
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "DELEGATE_ERROR",
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.tx_hash = tx_hash
        self.details = dict(details or {})

    def __str__(self) -> str:
        """Return formatted error message."""
        parts = [f"[{self.code}] {self.message}"]
        if self.tx_hash:
            parts.append(f"(tx: {self.tx_hash[:10]}...)")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"tx_hash={self.tx_hash!r}, "
            f"details={self.details!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to a dictionary for JSON serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "tx_hash": self.tx_hash,
            "details": self.details,
        }


class ConfigurationError(DelegateError):
    """
    Raised when a client is constructed with unusable configuration.

    Example:
        >>> raise ConfigurationError("Private key is required for Arweave client")
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = dict(details or {})
        if field:
            details["field"] = field

        super().__init__(message, code="CONFIGURATION_ERROR", details=details)
        self.field = field


def get_error_message(error: BaseException) -> str:
    """
    Extract the human-readable message from an exception.

    DelegateError subclasses expose their bare message (without the code
    prefix used by ``__str__``); anything else falls back to ``str()``,
    and finally to the class name when the exception has no text.
    """
    if isinstance(error, DelegateError):
        return error.message
    return str(error) or error.__class__.__name__
