"""Root logger setup for the CLI."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger for scheduled runs.

    A no-op when handlers are already installed, unless ``force`` is set.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        force=force,
    )
    # httpx logs one INFO line per request.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
