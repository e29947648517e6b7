from __future__ import annotations

import logging

from labofap.app.config import log_level

_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"


def configure_logging() -> None:
    logging.basicConfig(level=log_level(), format=_FORMAT)
    logging.getLogger("labofap").setLevel(log_level())
