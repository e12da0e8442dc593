"""
Delegate Framework Utilities.

This module provides logging, retry and validation helpers.
"""

from delegate_framework.utils.logging import (
    configure_logging,
    disable_logging,
    enable_debug,
    get_logger,
    set_level,
)
from delegate_framework.utils.retry import (
    RequestExecutor,
    RetryConfig,
    calculate_delay,
)
from delegate_framework.utils.validation import (
    validate_amount,
    validate_content_type,
    validate_data_size,
    validate_endpoint_url,
    validate_private_key,
)

__all__ = [
    # Structured logging
    "get_logger",
    "configure_logging",
    "set_level",
    "disable_logging",
    "enable_debug",
    # Retry
    "RetryConfig",
    "RequestExecutor",
    "calculate_delay",
    # Validation
    "validate_endpoint_url",
    "validate_amount",
    "validate_data_size",
    "validate_private_key",
    "validate_content_type",
]
