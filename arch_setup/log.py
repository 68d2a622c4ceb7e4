"""
log.py – logging setup.

User-facing messages go through a rich Console; the logging tree under
"arch_setup" carries diagnostics (commands run, sources that failed) and
is rendered by rich as well.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_configured = False


def setup_logging(debug: bool = False, console: Optional[Console] = None) -> logging.Logger:
    """
    Attach a RichHandler to the package logger.

    WARNING and above by default; everything with debug=True. Calling it
    again only adjusts the level.
    """
    global _configured

    logger = logging.getLogger("arch_setup")
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)

    if not _configured:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
        _configured = True

    return logger
