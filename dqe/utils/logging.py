"""
Logging for DQE.

DQE is a library: importing it only attaches a ``NullHandler`` to the
``dqe`` logger, so nothing is printed unless the host application
configures logging. ``setup_logging`` is the opt-in for scripts and
notebooks that want the engine's messages on the console, and in a log
file when ``LoggingConfig.file`` is set.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

from dqe.utils.config import get_config, DQEConfig

PACKAGE_LOGGER = "dqe"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def setup_logging(
    config: DQEConfig | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Attach console and optional file handlers to the ``dqe`` logger.

    Calling it again replaces the handlers installed by the previous call.

    Parameters
    ----------
    config : DQEConfig | None
        Configuration object. Uses global config if None.
    stream : TextIO | None
        Console stream. Defaults to stderr.

    Returns
    -------
    logging.Logger
        The configured ``dqe`` logger.
    """
    if config is None:
        config = get_config()

    log_config = config.logging
    level = getattr(logging, str(log_config.level).upper(), logging.INFO)
    formatter = logging.Formatter(log_config.format)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if log_config.file:
        log_file = Path(log_config.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Logger for an engine component, named ``dqe.<name>``."""
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
