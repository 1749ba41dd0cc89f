"""Process-wide logging setup.

Loggers are named after their modules (``jokedrop.*`` and ``web.*``); this
installs a single stderr handler on the ``jokedrop`` and ``web`` roots.
"""

from __future__ import annotations

import logging
import sys

_FORMAT = "[%(name)s] %(levelname)s: %(message)s"
_ROOTS = ("jokedrop", "web")


def configure_logging(debug: bool = False) -> None:
    """Attach a stderr handler once; later calls only adjust the level."""
    level = logging.DEBUG if debug else logging.INFO
    for name in _ROOTS:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        if not logger.handlers:
            stream = logging.StreamHandler(sys.stderr)
            stream.setFormatter(logging.Formatter(_FORMAT))
            logger.addHandler(stream)
        for handler in logger.handlers:
            handler.setLevel(level)
