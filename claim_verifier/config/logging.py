"""Loguru setup for the model, configuration and CLI layers.

Pipeline components log through structlog (see utils/logging.py); this module
covers the rest. All output goes to stderr so that `claim-verifier verify
--json` keeps stdout clean for the result document.
"""

import sys
from typing import Optional

from loguru import logger

from claim_verifier.config.settings import settings

DEFAULT_COMPONENT = "claim_verifier"

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> | <level>{message}</level>"
)


def configure_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure the loguru sink.

    Args:
        level: Minimum level (defaults to settings.log_level)
        log_format: "console" or "json" (defaults to settings.log_format)

    Console format is only honoured on a TTY; anything else gets JSON lines.
    """
    level = (level or settings.log_level).upper()
    log_format = (log_format or settings.log_format).lower()

    logger.remove()
    logger.configure(extra={"component": DEFAULT_COMPONENT})

    if sys.stderr.isatty() and log_format == "console":
        logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)
    else:
        logger.add(
            sys.stderr,
            format="{message}",
            level=level,
            serialize=True,
            diagnose=False,  # prompts and headers may carry API keys
        )


def get_logger(component: str):
    """
    Logger bound to a component name under the claim_verifier namespace.

    Example:
        >>> log = get_logger("llm.gemini")
        >>> log.info("Generating verdict")
    """
    return logger.bind(component=f"{DEFAULT_COMPONENT}.{component}")


configure_logging()

__all__ = ["logger", "get_logger", "configure_logging"]
