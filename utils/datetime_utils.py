from datetime import date, datetime
from typing import Optional

import pytz

DATE_KEY_FORMAT = "%Y-%m-%d"

WEEKDAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def get_timezone(name: Optional[str]):
    return pytz.timezone(name) if name else None


def local_today(tz_name: Optional[str] = None) -> date:
    """Текущая календарная дата: в заданной зоне или по локальному времени"""
    tz = get_timezone(tz_name)
    if tz is None:
        return date.today()
    return datetime.now(tz).date()


def now_iso() -> str:
    return datetime.now(pytz.utc).isoformat()


def date_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def parse_date_key(key: str) -> date:
    return datetime.strptime(key, DATE_KEY_FORMAT).date()


def format_display_date(d: date) -> str:
    # "Mon, Jan 5, 2026" без зависимости от локали
    return f"{WEEKDAY_NAMES[d.weekday()]}, {MONTH_NAMES[d.month - 1]} {d.day}, {d.year}"
