#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PixelStreak - Grid Renderer
Проекция сетки дат и статусов цели в матрицу клеток для отображения

Рендеринг не имеет побочных эффектов: его можно вызывать сколько угодно
раз по текущему состоянию в памяти.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from core.calendar_grid import (
    DEFAULT_CELL_SIZE_PX,
    MonthSegment,
    Week,
    available_years,
    get_month_labels,
    get_month_segments,
    get_year_weeks,
)
from core.stats import StatsSnapshot, calculate_stats
from models.enums import CellFlag, DayStatus
from models.goal import Goal, StatusStore
from utils.datetime_utils import date_key, format_display_date

DAY_LABELS = ["", "M", "", "W", "", "F", ""]

_STATUS_TOOLTIPS = {
    DayStatus.COMPLETED: " - Completed",
    DayStatus.MISSED: " - Missed",
}


@dataclass(frozen=True)
class CalendarCell:
    date: date
    key: str
    status: Optional[DayStatus]
    in_year: bool
    is_today: bool
    is_future: bool

    @property
    def flags(self) -> Tuple[CellFlag, ...]:
        flags = []
        if self.status == DayStatus.COMPLETED:
            flags.append(CellFlag.COMPLETED)
        if self.status == DayStatus.MISSED:
            flags.append(CellFlag.MISSED)
        if self.is_today:
            flags.append(CellFlag.TODAY)
        if self.is_future:
            flags.append(CellFlag.FUTURE)
        if not self.in_year:
            flags.append(CellFlag.OTHER_YEAR)
        return tuple(flags)

    @property
    def interactive(self) -> bool:
        # будущие дни не кликаются независимо от статуса
        return not self.is_future

    @property
    def css_classes(self) -> str:
        return " ".join(["cell"] + [flag.value for flag in self.flags])

    @property
    def display_date(self) -> str:
        return format_display_date(self.date)

    @property
    def tooltip(self) -> str:
        return self.display_date + _STATUS_TOOLTIPS.get(self.status, "")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.key,
            "status": self.status.value if self.status else None,
            "flags": [flag.value for flag in self.flags],
            "interactive": self.interactive,
            "tooltip": self.tooltip,
        }


def classify_cell(day: date, days: StatusStore, year: int, today: date) -> CalendarCell:
    key = date_key(day)
    return CalendarCell(
        date=day,
        key=key,
        status=days.get(key),
        in_year=day.year == year,
        is_today=day == today,
        is_future=day > today,
    )


def render_cells(weeks: Sequence[Week], days: StatusStore, year: int,
                 today: date) -> List[List[CalendarCell]]:
    return [[classify_cell(day, days, year, today) for day in week] for week in weeks]


@dataclass
class RenderedGoal:
    goal_id: str
    name: str
    stats: StatsSnapshot
    weeks: List[List[CalendarCell]]
    month_segments: List[MonthSegment]
    sync_error: Optional[str] = None

    @property
    def rows(self) -> List[Tuple[str, List[CalendarCell]]]:
        """Транспонирование: строка на день недели, колонка на неделю"""
        return [
            (label, [week[day_index] for week in self.weeks if day_index < len(week)])
            for day_index, label in enumerate(DAY_LABELS)
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.goal_id,
            "name": self.name,
            "stats": self.stats.to_dict(),
            "month_labels": [segment.to_dict() for segment in self.month_segments],
            "weeks": [[cell.to_dict() for cell in week] for week in self.weeks],
            "sync_error": self.sync_error,
        }


@dataclass
class BoardView:
    year: int
    years: List[int]
    goals: List[RenderedGoal]
    day_labels: List[str]

    @property
    def is_empty(self) -> bool:
        return not self.goals

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "years": self.years,
            "day_labels": self.day_labels,
            "goals": [goal.to_dict() for goal in self.goals],
        }


def render_goal(goal: Goal, year: int, today: date,
                cell_size_px: int = DEFAULT_CELL_SIZE_PX,
                weeks: Optional[List[Week]] = None,
                sync_error: Optional[str] = None) -> RenderedGoal:
    if weeks is None:
        weeks = get_year_weeks(year)
    segments = get_month_segments(get_month_labels(weeks, year), len(weeks), cell_size_px)
    return RenderedGoal(
        goal_id=goal.client_id,
        name=goal.name,
        stats=calculate_stats(goal.days, today),
        weeks=render_cells(weeks, goal.days, year, today),
        month_segments=segments,
        sync_error=sync_error,
    )


def render_board(goals: Sequence[Goal], year: int, today: date, min_year: int,
                 cell_size_px: int = DEFAULT_CELL_SIZE_PX,
                 sync_errors: Optional[Dict[str, str]] = None) -> BoardView:
    weeks = get_year_weeks(year)
    sync_errors = sync_errors or {}
    rendered = [
        render_goal(goal, year, today, cell_size_px, weeks, sync_errors.get(goal.client_id))
        for goal in goals
    ]
    return BoardView(
        year=year,
        years=available_years(today, min_year),
        goals=rendered,
        day_labels=list(DAY_LABELS),
    )
