from __future__ import annotations

import logging
import sys
from typing import Dict, Optional

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
_DATEFMT = "%H:%M:%S"

# Third-party loggers that drown out sfclient's own request lines at -vv.
QUIET_LOGGERS: Dict[str, int] = {
    "urllib3.connectionpool": logging.WARNING,
}


def configure_logging(level: Optional[int]) -> None:
    """Set up CLI logging on stderr. Calling it again only changes the level.

    Library modules never call this; they log to ``logging.getLogger(__name__)``.
    """
    root = logging.getLogger()
    root.setLevel(logging.WARNING if level is None else level)

    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT, _DATEFMT))
        root.addHandler(handler)

    for name, floor in QUIET_LOGGERS.items():
        noisy = logging.getLogger(name)
        if noisy.level < floor:
            noisy.setLevel(floor)
