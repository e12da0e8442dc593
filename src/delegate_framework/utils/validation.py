"""
Validation utilities for the Delegate Framework.

Provides input validation functions for:
- Storage node and gateway URLs (SSRF protection)
- Lamport amounts and payload sizes
- Base58 Solana private keys
- MIME content types

All validation functions raise ValidationError on failure.
"""

from __future__ import annotations

import ipaddress
import re
from typing import Optional, Union
from urllib.parse import urlparse

import base58
from solders.keypair import Keypair

from delegate_framework.errors import ValidationError


# Constants
MAX_LAMPORTS = 2**64 - 1
# Storage nodes, gateways and RPC endpoints must be public hosts
BLOCKED_NETWORKS = tuple(
    ipaddress.ip_network(cidr)
    for cidr in (
        "10.0.0.0/8",
        "172.16.0.0/12",
        "192.168.0.0/16",
        "127.0.0.0/8",
        "169.254.0.0/16",
        "::1/128",
        "fc00::/7",
        "fe80::/10",
    )
)
BLOCKED_HOSTNAMES = frozenset(
    {"localhost", "0.0.0.0", "::", "metadata", "metadata.google.internal"}
)
CONTENT_TYPE_PATTERN = re.compile(r"^[\w.+-]+/[\w.+-]+(\s*;.*)?$")


def _blocked_host_reason(hostname: str) -> Optional[str]:
    if hostname in BLOCKED_HOSTNAMES:
        return f"host {hostname} blocked"
    try:
        ip = ipaddress.ip_address(hostname)
    except ValueError:
        return None
    if any(ip in network for network in BLOCKED_NETWORKS):
        return f"private IP {ip} blocked"
    return None


def validate_endpoint_url(url: str, field_name: str = "url") -> str:
    """
    Validate an Irys node, gateway or Solana RPC URL.

    The pipeline signs uploads and reports balances to these hosts, so
    only public http(s) endpoints are accepted.

    Returns:
        The URL without a trailing slash

    Raises:
        ValidationError: If the URL is malformed or targets a private host
    """
    if not url:
        raise ValidationError(
            message=f"{field_name} is required",
            details={"field": field_name, "value": None},
        )

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise ValidationError(
            message=f"Invalid {field_name}: expected an http(s) URL with a host",
            details={"field": field_name, "value": url, "scheme": parsed.scheme},
        )

    reason = _blocked_host_reason(parsed.hostname.lower())
    if reason:
        raise ValidationError(
            message=f"Invalid {field_name}: {reason}",
            details={"field": field_name, "value": url, "reason": reason},
        )

    return url.rstrip("/")


def validate_amount(
    amount: Union[int, str],
    field_name: str = "amount",
    max_amount: int = MAX_LAMPORTS,
) -> int:
    """
    Validate a lamport amount.

    Args:
        amount: Amount in lamports (integer or decimal string)
        field_name: Field name for error messages
        max_amount: Maximum allowed amount

    Returns:
        Validated amount as integer

    Raises:
        ValidationError: If amount is not a non-negative integer in range
    """
    if isinstance(amount, bool):
        raise ValidationError(
            message=f"{field_name} must be an integer",
            details={"field": field_name, "value": amount},
        )

    try:
        amount_int = int(amount) if isinstance(amount, str) else amount
    except ValueError:
        raise ValidationError(
            message=f"{field_name} must be a valid number",
            details={"field": field_name, "value": amount},
        )

    if not isinstance(amount_int, int):
        raise ValidationError(
            message=f"{field_name} must be an integer",
            details={"field": field_name, "value": repr(amount)},
        )

    if amount_int < 0:
        raise ValidationError(
            message=f"{field_name} cannot be negative",
            details={"field": field_name, "value": amount_int},
        )

    if amount_int > max_amount:
        raise ValidationError(
            message=f"{field_name} exceeds maximum allowed ({max_amount})",
            details={"field": field_name, "value": amount_int},
        )

    return amount_int


def validate_data_size(data_size: int, field_name: str = "data_size") -> int:
    """Validate a payload size in bytes (zero is allowed)."""
    if isinstance(data_size, bool) or not isinstance(data_size, int):
        raise ValidationError(
            message=f"{field_name} must be an integer",
            details={"field": field_name, "value": repr(data_size)},
        )
    if data_size < 0:
        raise ValidationError(
            message=f"{field_name} cannot be negative",
            details={"field": field_name, "value": data_size},
        )
    return data_size


def validate_private_key(private_key: str, field_name: str = "private_key") -> Keypair:
    """
    Validate a base58-encoded Solana secret key.

    Args:
        private_key: 64-byte secret key, base58 encoded
        field_name: Field name for error messages

    Returns:
        The decoded Keypair

    Raises:
        ValidationError: If the key is missing or cannot be decoded
    """
    if not private_key:
        raise ValidationError(
            message=f"{field_name} is required",
            details={"field": field_name, "value": None},
        )

    try:
        return Keypair.from_bytes(base58.b58decode(private_key.strip()))
    except (ValueError, TypeError) as e:
        # Never echo the key itself
        raise ValidationError(
            message=f"Invalid {field_name}: not a base58 encoded Solana secret key",
            details={"field": field_name, "reason": str(e)},
        )


def validate_content_type(content_type: str, field_name: str = "content_type") -> str:
    """Validate a MIME type such as ``image/png``."""
    if not content_type or not isinstance(content_type, str):
        raise ValidationError(
            message=f"{field_name} is required",
            details={"field": field_name, "value": content_type},
        )
    if not CONTENT_TYPE_PATTERN.match(content_type.strip()):
        raise ValidationError(
            message=f"Invalid {field_name}: expected type/subtype",
            details={"field": field_name, "value": content_type},
        )
    return content_type.strip()
