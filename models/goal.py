# models/goal.py

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple

from models.enums import DayStatus

logger = logging.getLogger(__name__)

# absent -> completed -> missed -> absent
_NEXT_STATUS = {
    None: DayStatus.COMPLETED,
    DayStatus.COMPLETED: DayStatus.MISSED,
    DayStatus.MISSED: None,
}


class StatusStore:
    """
    Разреженное отображение дата -> статус дня для одной цели.

    Ключ присутствует только со статусом completed или missed,
    отсутствие ключа означает "день не отмечен". О датах хранилище
    ничего не знает: будущие дни отсекает слой взаимодействия.
    """

    def __init__(self, days: Optional[Dict[str, Any]] = None):
        self._days: Dict[str, DayStatus] = {}
        for key, value in (days or {}).items():
            try:
                self._days[key] = DayStatus(value)
            except ValueError:
                logger.warning(f"⚠️ Пропущен неизвестный статус {value!r} для {key}")

    def get(self, key: str) -> Optional[DayStatus]:
        return self._days.get(key)

    def toggle(self, key: str) -> Optional[DayStatus]:
        """Переключить день по циклу и вернуть новый статус (None = пусто)"""
        new_status = _NEXT_STATUS[self._days.get(key)]
        if new_status is None:
            del self._days[key]
        else:
            self._days[key] = new_status
        return new_status

    def count(self, status: DayStatus) -> int:
        return sum(1 for value in self._days.values() if value == status)

    def items(self) -> Iterator[Tuple[str, DayStatus]]:
        return iter(self._days.items())

    def copy(self) -> "StatusStore":
        return StatusStore(self.to_dict())

    def to_dict(self) -> Dict[str, str]:
        return {key: status.value for key, status in sorted(self._days.items())}

    def __contains__(self, key) -> bool:
        return key in self._days

    def __iter__(self):
        return iter(self._days)

    def __len__(self) -> int:
        return len(self._days)

    def __eq__(self, other) -> bool:
        if not isinstance(other, StatusStore):
            return NotImplemented
        return self._days == other._days

    def __repr__(self) -> str:
        return f"StatusStore({self.to_dict()!r})"


def _new_client_id() -> str:
    return uuid.uuid4().hex


@dataclass(eq=False)
class Goal:
    name: str
    days: StatusStore = field(default_factory=StatusStore)
    id: Optional[Any] = None  # идентификатор в удалённом хранилище
    user_id: Optional[str] = None
    client_id: str = field(default_factory=_new_client_id)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    def to_record(self, updated_at: str) -> Dict[str, Any]:
        """Полный снимок цели для записи в удалённое хранилище"""
        return {
            "user_id": self.user_id,
            "name": self.name,
            "days": self.days.to_dict(),
            "updated_at": updated_at,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Goal":
        record_id = record.get("id")
        return cls(
            name=record.get("name", ""),
            days=StatusStore(record.get("days") or {}),
            id=record_id,
            user_id=record.get("user_id"),
            client_id=str(record_id) if record_id is not None else _new_client_id(),
            created_at=record.get("created_at"),
            updated_at=record.get("updated_at"),
        )
