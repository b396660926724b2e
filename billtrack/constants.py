from datetime import datetime
from zoneinfo import ZoneInfo

from billtrack.settings import settings

LOCAL_TZ = ZoneInfo(settings.timezone)

MONTHS_EN = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
}


def now() -> datetime:
    return datetime.now(LOCAL_TZ)


def current_year() -> int:
    return now().year
