from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    from trail_graph.settings import settings

    level = (level or settings.log_level or "INFO").upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
