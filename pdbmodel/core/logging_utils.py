from __future__ import annotations

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Module logger under the ``pdbmodel`` hierarchy.

    The root handler is installed once. ``level`` (or PDBMODEL_LOG_LEVEL)
    applies to the named logger only, so ``get_logger("pdbmodel", "DEBUG")``
    turns on per-line parse messages for the whole package.
    """
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    logger = logging.getLogger(name)
    level = level or (os.environ.get("PDBMODEL_LOG_LEVEL") if name == "pdbmodel" else None)
    if level:
        logger.setLevel(level.upper())
    return logger
