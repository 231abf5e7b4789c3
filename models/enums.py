# models/enums.py

from enum import Enum


class DayStatus(str, Enum):
    COMPLETED = "completed"
    MISSED = "missed"


class CellFlag(str, Enum):
    """Флаги клетки календаря, складываются как CSS-классы"""
    COMPLETED = "completed"
    MISSED = "missed"
    TODAY = "today"
    FUTURE = "future"
    OTHER_YEAR = "other-year"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class NoticeKind(str, Enum):
    LOAD = "load"
    SAVE = "save"
    DELETE = "delete"
    SIGN_OUT = "sign_out"
