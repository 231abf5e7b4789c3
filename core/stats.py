# core/stats.py

from dataclasses import dataclass
from datetime import date, timedelta

from models.enums import DayStatus
from models.goal import StatusStore
from utils.datetime_utils import date_key


@dataclass(frozen=True)
class StatsSnapshot:
    completed: int = 0
    missed: int = 0
    total: int = 0
    streak: int = 0

    def to_dict(self) -> dict:
        return {
            "completed": self.completed,
            "missed": self.missed,
            "total": self.total,
            "streak": self.streak,
        }


def calculate_streak(days: StatusStore, today: date) -> int:
    """Подряд выполненные дни, считая назад от сегодняшнего"""
    streak = 0
    current = today
    while days.get(date_key(current)) == DayStatus.COMPLETED:
        streak += 1
        current -= timedelta(days=1)
    return streak


def calculate_stats(days: StatusStore, today: date) -> StatsSnapshot:
    completed = days.count(DayStatus.COMPLETED)
    missed = days.count(DayStatus.MISSED)
    return StatsSnapshot(
        completed=completed,
        missed=missed,
        total=completed + missed,
        streak=calculate_streak(days, today),
    )
