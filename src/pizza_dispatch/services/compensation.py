"""Best-effort undo of completed steps when a multi-step write fails halfway."""

from __future__ import annotations

import logging
from typing import Callable

logger = logging.getLogger(__name__)


def compensate(description: str, undo: Callable[[], object]) -> bool:
    """Run `undo` and report whether it succeeded.

    A failing undo is logged with the name of the leftover record and is not
    raised.
    """
    try:
        undo()
    except Exception as exc:
        logger.error(f"Could not undo {description}; record left orphaned: {exc}")
        return False
    logger.warning(f"Undid {description} after a later step failed")
    return True
