"""
Monetization mode
=================

Source preference biases ranking toward listings that pay us.  Two modes:

* **affiliate** (default) - commission-based programs and local sponsors
  both count; local sponsors still edge out affiliates.
* **sponsor** - local sponsors paid for placement and get the top rank.

The mode is held on a ``MonetizationSettings`` object that the app
creates once and injects.  It only changes through an explicit
``set_mode`` call; the recommendation engine reads it once at the start
of a call and threads the value through scoring, so a change takes
effect on the next call.
"""
from __future__ import annotations

import logging

from ..config import DEFAULT_APP_CONFIG
from .models import MonetizationMode

logger = logging.getLogger(__name__)

LOCAL_SPONSOR = "local-sponsor"

# Preference rank per source program; the local sponsor rank depends on mode.
SOURCE_PREFERENCES: dict[str, int] = {
    "fever": 1,
    "viator": 1,
    "getyourguide": 1,
    "groupon": 1,
    "ticketmaster": 0,
    "stubhub": 0,
}


def source_preference(source: str | None, mode: MonetizationMode) -> int:
    """Return the 0-3 preference rank of *source* under *mode*."""
    if source == LOCAL_SPONSOR:
        return 3 if mode == MonetizationMode.sponsor else 2
    return SOURCE_PREFERENCES.get(source or "", 0)


class MonetizationSettings:
    def __init__(self, mode: MonetizationMode | str = MonetizationMode.affiliate) -> None:
        self._mode = MonetizationMode(mode)

    @property
    def mode(self) -> MonetizationMode:
        return self._mode

    def set_mode(self, mode: MonetizationMode | str) -> MonetizationMode:
        """Switch mode; raises ValueError for anything but affiliate/sponsor."""
        new_mode = MonetizationMode(mode)
        if new_mode != self._mode:
            logger.info("Monetization mode changed: %s -> %s", self._mode.value, new_mode.value)
        self._mode = new_mode
        return new_mode


def _initial_mode() -> MonetizationMode:
    try:
        return MonetizationMode(DEFAULT_APP_CONFIG.monetization_mode)
    except ValueError:
        logger.warning(
            "Unknown MONETIZATION_MODE %r, falling back to affiliate",
            DEFAULT_APP_CONFIG.monetization_mode,
        )
        return MonetizationMode.affiliate


DEFAULT_MONETIZATION = MonetizationSettings(_initial_mode())
