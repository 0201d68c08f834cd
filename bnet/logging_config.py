"""Logging setup for scripts that use bnet.

Library modules only create module loggers. Call ``configure_logging()`` once
from a script entry point to see their output. The call does nothing if the
root logger already has handlers.
"""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: int = logging.INFO) -> None:
    """Attach a console handler to the root logger and set its level.

    Only configures if the root logger has no handlers (idempotent).
    """
    root = logging.getLogger()
    if root.handlers:
        return

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(console)
    root.setLevel(level)
