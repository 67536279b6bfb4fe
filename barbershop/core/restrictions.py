# barbershop/core/restrictions.py

import logging
from datetime import date, datetime
from typing import Optional

from .clock import TimeLabel

logger = logging.getLogger(__name__)


def is_restricted(day: date, label: TimeLabel, settings, now: Optional[datetime] = None) -> bool:
    """True when ``label`` is a restricted hour booked inside the lead time.

    This is the only place the wall clock enters availability. Callers pass
    ``now`` so the rest of the pipeline stays deterministic.
    """
    if not settings.early_booking_restriction:
        return False
    if label not in settings.restricted_labels:
        return False

    if now is None:
        now = datetime.now()
    diff_hours = (label.on(day) - now).total_seconds() / 3600
    restricted = diff_hours < settings.early_booking_hours
    if restricted:
        logger.debug(
            "%s %s is %.2fh away, lead time is %sh",
            day, label, diff_hours, settings.early_booking_hours,
        )
    return restricted
