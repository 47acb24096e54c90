from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
_HANDLER_NAME = "zoneworld-stream"


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stream handler to the ``zoneworld`` logger tree.

    Safe to call more than once (app factory + tests); later calls only adjust the level.
    """
    root = logging.getLogger("zoneworld")
    root.setLevel(level.upper())

    if any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(handler)
