from __future__ import annotations

import logging
import sys


def configure_logging(level: str | int = logging.INFO) -> None:
    """
    Send all records at ``level`` and above to stderr.

    Replaces handlers already installed on the root logger, so calling it
    again (e.g. per test app) does not duplicate output.
    """
    root = logging.getLogger()
    root.setLevel(level.upper() if isinstance(level, str) else level)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
    logging.captureWarnings(True)
