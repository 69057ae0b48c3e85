"""
Logging Configuration
=====================

Library modules of ``tlfdtd`` only create module loggers (``tlfdtd.simulation``,
``tlfdtd.driver``). A host application that wants to see run status calls
:func:`setup_logging` once to attach handlers to the package logger.

JAX logs compilation details on its own ``jax`` logger. Those are kept at
WARNING unless the package itself is configured for DEBUG, so animation status
lines are not buried under tracing output.
"""
import logging
import sys

PACKAGE_LOGGER = "tlfdtd"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"


def _resolve_level(level: int | str) -> int:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown logging level '{level}'")
        return resolved
    return level


def setup_logging(level: int | str = logging.INFO, log_file: str | None = None) -> logging.Logger:
    """
    Attaches console (and optionally file) handlers to the ``tlfdtd`` logger.

    Calling it again replaces the handlers instead of adding more.

    Args:
        level: Level as a number (``logging.DEBUG``) or name (``"debug"``).
        log_file: Optional path of a log file, truncated on setup.

    Returns:
        The package logger.
    """
    level = _resolve_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logging.getLogger("jax").setLevel(logging.DEBUG if level <= logging.DEBUG else logging.WARNING)

    logger.debug(f"Logging initialized at level {logging.getLevelName(level)}")
    return logger
