"""
Structured logging for the Delegate Framework.

Thin layer over the standard library ``logging`` module. Every framework
logger lives under the ``delegate_framework`` namespace and structured
context is passed through ``extra``:

    _logger = get_logger(__name__)
    _logger.debug("Upload cost calculated", extra={"data_size": 1024, "cost": 1000})

Libraries stay silent by default (a NullHandler is installed); applications
call ``configure_logging()`` to get output.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

ROOT_LOGGER_NAME = "delegate_framework"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a framework logger.

    Names outside the framework namespace are nested under it so that a
    single ``set_level`` call controls every logger.

    Args:
        name: Logger name, usually ``__name__``

    Returns:
        Logger instance
    """
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(
    level: Union[int, str] = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """
    Attach a handler to the framework root logger.

    Calling this more than once replaces the previously configured handler.

    Args:
        level: Log level (name or number)
        fmt: Format string for the default stream handler
        handler: Custom handler (defaults to a StreamHandler)

    Returns:
        The framework root logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for existing in list(root.handlers):
        if getattr(existing, "_delegate_configured", False):
            root.removeHandler(existing)

    handler = handler or logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))
    handler._delegate_configured = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level)
    return root


def set_level(level: Union[int, str]) -> None:
    """Set the level of the framework root logger."""
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)


def enable_debug() -> None:
    """Shortcut for ``set_level(logging.DEBUG)``."""
    set_level(logging.DEBUG)


def disable_logging() -> None:
    """Silence every framework logger."""
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(logging.CRITICAL + 1)
