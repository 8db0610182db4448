"""Logging helpers for the modelgen engine.

Usage in engine modules:
    from modelgen.logs import get_logger
    logger = get_logger(__name__)

Engine modules only emit records; handlers are installed by the CLI through
``configure_logging``. A library caller that never configures logging gets
no output.
"""

import logging
import sys

_LOGGER_NAME = "modelgen"

logging.getLogger(_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a child logger under the ``modelgen`` hierarchy.

    Args:
        name: Module ``__name__``, or None for the root ``modelgen`` logger.

    Returns:
        logging.Logger instance.
    """
    if name is None or name == _LOGGER_NAME:
        return logging.getLogger(_LOGGER_NAME)
    # "modelgen.regions.merge" -> "modelgen.merge"
    short = name.rsplit(".", 1)[-1]
    return logging.getLogger(f"{_LOGGER_NAME}.{short}")


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure the ``modelgen`` logger hierarchy.

    Levels:
        --verbose / -v  -> DEBUG
        (default)       -> INFO
        --quiet / -q    -> WARNING

    Args:
        verbose: Enable DEBUG-level output.
        quiet: Suppress INFO output (WARNING+ only).
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    root_logger = logging.getLogger(_LOGGER_NAME)
    root_logger.setLevel(level)

    # Replace the handler of a previous call; stderr may have been swapped since
    for old in [h for h in root_logger.handlers if isinstance(h, logging.StreamHandler)]:
        root_logger.removeHandler(old)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root_logger.addHandler(handler)
    root_logger.propagate = False
