"""Best-effort year/month extraction from free-text billing periods.

The period string comes straight from the vision model (or a human), so it
can be anything: ``"2024-03"``, ``"03/15/2024"``, ``"January 2024"``,
``"Jan 3 - Feb 2, 2024"``. Patterns are tried in a fixed order and the first
match wins. Nothing here raises; when no pattern applies the current year is
used and the month is left unset.

Known limitations:

* Slash dates are always read month-first (``03/04/2024`` is March), with no
  locale awareness and no check that the month is <= 12.
* Strings with several 4-digit numbers use the first one each pattern finds,
  which is not necessarily the billing year (``"Invoice #2022-Q4-9981"``
  gives 2022).
"""

from __future__ import annotations

import logging
import re
from typing import NamedTuple

from billtrack.constants import MONTHS_EN, current_year

logger = logging.getLogger(__name__)

_ISO_RE = re.compile(r"(\d{4})-(\d{1,2})")
_SLASH_RE = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})")
_MONTH_NAME_RE = re.compile(
    r"(January|February|March|April|May|June|July|August|September|October|November|December)\s+(\d{4})",
    re.IGNORECASE,
)
_YEAR_RE = re.compile(r"(\d{4})")


class Period(NamedTuple):
    year: int
    month: int | None = None


def _month_number(value: str) -> int:
    if value.isdigit():
        return int(value)
    return MONTHS_EN[value.lower()]


# (pattern, year group, month group)
_PATTERNS: list[tuple[re.Pattern[str], int, int]] = [
    (_ISO_RE, 1, 2),
    (_SLASH_RE, 3, 1),
    (_MONTH_NAME_RE, 2, 1),
]


def extract_year_and_month(period: str) -> Period:
    for pattern, year_group, month_group in _PATTERNS:
        match = pattern.search(period)
        if match:
            result = Period(int(match.group(year_group)), _month_number(match.group(month_group)))
            logger.debug("Period %r matched %s -> %s", period, pattern.pattern, result)
            return result

    match = _YEAR_RE.search(period)
    if match:
        logger.debug("Period %r: no date pattern, using first 4-digit number", period)
        return Period(int(match.group(1)))

    year = current_year()
    logger.info("Period %r has no recognizable year, defaulting to %d", period, year)
    return Period(year)
