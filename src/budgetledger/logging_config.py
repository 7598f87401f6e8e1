"""Logging setup for budgetledger."""

import logging

_LOGGER_PREFIX = "budgetledger"
_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the budgetledger namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def configure_logging(level: int = logging.WARNING) -> logging.Logger:
    """Install a single stream handler on the budgetledger root logger.

    Calling this more than once replaces the previous handler rather than
    stacking duplicates.

    Args:
        level: Logging level for the budgetledger namespace

    Returns:
        The configured namespace root logger
    """
    root = logging.getLogger(_LOGGER_PREFIX)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False
    return root


def reset_logging() -> None:
    """Remove handlers installed by configure_logging."""
    root = logging.getLogger(_LOGGER_PREFIX)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.NOTSET)
    root.propagate = True
