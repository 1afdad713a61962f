"""
log.py

Logging helpers. Modules get a child of the "addongen" logger via
`get_logger(__name__)`; only the CLI calls `configure_logging`.
"""

from __future__ import annotations

import logging
import sys

_LOGGER_NAME = "addongen"


def get_logger(name: str | None = None) -> logging.Logger:
    if name is None or name == _LOGGER_NAME:
        return logging.getLogger(_LOGGER_NAME)
    if name.startswith(f"{_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")


def configure_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure the addongen logger hierarchy.

    --verbose -> DEBUG, default -> INFO, --quiet -> WARNING.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    root = logging.getLogger(_LOGGER_NAME)
    root.setLevel(level)
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)
    root.propagate = False
