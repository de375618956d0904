"""
SDK 日志配置。

Configures the ``llmfunc_sdk`` logger tree from a :class:`ProviderConfig`
(``DEBUG`` / ``LOG_FILE``) or from explicit arguments. The application's
root logger is left alone; records still propagate to it.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from llmfunc_sdk.core.config import ProviderConfig

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
PACKAGE_LOGGER = "llmfunc_sdk"

# Attribute set on handlers installed here; repeated calls replace them.
_OWNED = "_llmfunc_sdk_handler"


def _install(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    setattr(handler, _OWNED, True)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(level)
    logger.addHandler(handler)


def reset_logging() -> None:
    """Remove handlers installed by :func:`setup_logging` and clear the level."""
    pkg = logging.getLogger(PACKAGE_LOGGER)
    for h in [h for h in pkg.handlers if getattr(h, _OWNED, False)]:
        pkg.removeHandler(h)
        h.close()
    pkg.setLevel(logging.NOTSET)


def setup_logging(
    config: Optional[ProviderConfig] = None,
    level: int = logging.INFO,
    log_file: str = "",
    debug: bool = False,
) -> logging.Logger:
    """
    初始化 llmfunc_sdk 日志。

    Args:
        config: Supplies ``debug`` and ``log_file`` when given; explicit
            arguments win.
        level: Level used when debug is off.
        log_file: Rotating log file path (empty: no file output).
        debug: Log at DEBUG, including capture results.

    Returns:
        The ``llmfunc_sdk`` logger.
    """
    if config is not None:
        debug = debug or config.debug
        log_file = log_file or config.log_file
    if debug:
        level = logging.DEBUG

    reset_logging()
    pkg = logging.getLogger(PACKAGE_LOGGER)
    pkg.setLevel(level)

    # Console output only when the application has not configured logging.
    if not logging.getLogger().handlers:
        _install(pkg, logging.StreamHandler(), level)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        _install(
            pkg,
            RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"),
            level,
        )

    return pkg
