"""
Validation exceptions.

Raised before any network call is made, so they are never retried.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from delegate_framework.errors.base import DelegateError


class ValidationError(DelegateError):
    """
    Raised when caller-supplied input is invalid.

    Example:
        >>> raise ValidationError(
        ...     message="data_size cannot be negative",
        ...     details={"field": "data_size", "value": -1},
        ... )
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code="VALIDATION_ERROR", details=details)
