#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PixelStreak - Calendar Grid
Построение сетки дат по неделям (воскресенье - суббота) для выбранного года

Сетка начинается с воскресенья не позже 1 января и заканчивается
субботой не раньше 31 декабря, поэтому каждая неделя полная.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional

from utils.datetime_utils import MONTH_NAMES

Week = List[date]

DAYS_IN_WEEK = 7
DEFAULT_CELL_SIZE_PX = 15

_SATURDAY = 5  # date.weekday()


@dataclass(frozen=True)
class MonthLabel:
    name: str
    week_index: int


@dataclass(frozen=True)
class MonthSegment:
    """Подпись месяца над сеткой с шириной в колонках-неделях"""
    name: str
    week_index: int
    span: int
    width_px: int

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "week_index": self.week_index,
            "span": self.span,
            "width_px": self.width_px,
        }


def get_year_dates(year: int) -> List[date]:
    """Все даты от воскресенья перед 1 января до субботы после 31 декабря"""
    start = date(year, 1, 1)
    end = date(year, 12, 31)

    # weekday(): понедельник = 0, воскресенье = 6
    first_day = start - timedelta(days=(start.weekday() + 1) % DAYS_IN_WEEK)
    last_day = end + timedelta(days=(_SATURDAY - end.weekday()) % DAYS_IN_WEEK)

    total = (last_day - first_day).days + 1
    return [first_day + timedelta(days=offset) for offset in range(total)]


def get_weeks(dates: List[date]) -> List[Week]:
    return [dates[i:i + DAYS_IN_WEEK] for i in range(0, len(dates), DAYS_IN_WEEK)]


def get_year_weeks(year: int) -> List[Week]:
    return get_weeks(get_year_dates(year))


def get_month_labels(weeks: List[Week], year: int) -> List[MonthLabel]:
    """
    Позиции подписей месяцев.

    Для каждой недели ищется первая дата целевого года, месяц которой
    отличается от последнего увиденного; первая такая смена месяца
    фиксируется как подпись (месяц, индекс недели).
    """
    labels: List[MonthLabel] = []
    last_month: Optional[int] = None

    for week_index, week in enumerate(weeks):
        first = next(
            (d for d in week if d.year == year and d.month != last_month),
            None
        )
        if first is not None:
            last_month = first.month
            labels.append(MonthLabel(MONTH_NAMES[first.month - 1], week_index))

    return labels


def get_month_segments(labels: List[MonthLabel], total_weeks: int,
                       cell_size_px: int = DEFAULT_CELL_SIZE_PX) -> List[MonthSegment]:
    """Ширина подписи = число недель до следующей подписи (или до конца сетки)"""
    segments = []
    for index, label in enumerate(labels):
        if index + 1 < len(labels):
            span = labels[index + 1].week_index - label.week_index
        else:
            span = total_weeks - label.week_index
        segments.append(MonthSegment(label.name, label.week_index, span, span * cell_size_px))
    return segments


def available_years(today: date, min_year: int, ahead: int = 1) -> List[int]:
    years = [year for year in range(today.year, today.year + ahead + 1) if year >= min_year]
    return years or [today.year]
