"""
Сервис пользовательских уведомлений об ошибках
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Deque, List, Optional

from models.enums import NoticeKind
from ui.messages import notice_message

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notice:
    kind: NoticeKind
    message: str
    goal_id: Optional[str] = None
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "goal_id": self.goal_id,
            "created_at": self.created_at,
        }


class NoticeBoard:
    """Очередь уведомлений, которые должен увидеть пользователь"""

    def __init__(self, max_notices: int = 50):
        self._notices: Deque[Notice] = deque(maxlen=max_notices)

    def report(self, kind: NoticeKind, goal_id: Optional[str] = None,
               error: Optional[BaseException] = None) -> Notice:
        notice = Notice(kind=kind, message=notice_message(kind), goal_id=goal_id)
        self._notices.append(notice)
        if error is not None:
            logger.info(f"📣 Уведомление [{kind.value}]: {error}")
        return notice

    def pending(self) -> List[Notice]:
        return list(self._notices)

    def drain(self) -> List[Notice]:
        notices = list(self._notices)
        self._notices.clear()
        return notices

    def __len__(self) -> int:
        return len(self._notices)
