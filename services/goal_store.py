#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PixelStreak - Goal Store
Упорядоченная коллекция целей пользователя с оптимистичными локальными
изменениями и асинхронным сохранением

Возможности:
- Загрузка целей владельца (по времени создания)
- Создание, переименование, удаление целей
- Переключение статуса дня с записью полного снимка цели
- Ошибки удалённого хранилища логируются и превращаются в уведомления
"""

import logging
from datetime import date
from typing import Dict, List, Optional, Set, Tuple

from core.exceptions import GoalNotFound, SaveFailure, ValidationFailure
from core.stats import StatsSnapshot, calculate_stats
from database.remote_store import RecordStore
from models.enums import DayStatus, NoticeKind
from models.goal import Goal
from services.notifications import NoticeBoard
from services.persistence import PersistenceQueue
from utils.datetime_utils import now_iso
from utils.validators import MAX_GOAL_NAME_LENGTH, is_valid_goal_name, normalize_goal_name

logger = logging.getLogger(__name__)


class GoalStore:
    """Единственный источник правды о целях текущего пользователя"""

    def __init__(self, record_store: RecordStore, owner_id: str,
                 notices: Optional[NoticeBoard] = None):
        self.record_store = record_store
        self.owner_id = owner_id
        self.notices = notices or NoticeBoard()
        self._goals: List[Goal] = []
        # цели, удаление которых уже началось
        self._deleting: Set[str] = set()
        self._queue = PersistenceQueue(self._persist, self._on_save_failure)
        self.loaded = False

    # === ЧТЕНИЕ ===

    @property
    def goals(self) -> Tuple[Goal, ...]:
        return tuple(self._goals)

    def get(self, goal_id: str) -> Goal:
        if goal_id not in self._deleting:
            for goal in self._goals:
                if goal.client_id == goal_id:
                    return goal
        raise GoalNotFound(goal_id)

    def stats(self, goal_id: str, today: date) -> StatsSnapshot:
        return calculate_stats(self.get(goal_id).days, today)

    def sync_error(self, goal_id: str) -> Optional[Exception]:
        return self._queue.failure(self.get(goal_id))

    def sync_errors(self) -> Dict[str, str]:
        errors = {}
        for goal in self._goals:
            error = self._queue.failure(goal)
            if error is not None:
                errors[goal.client_id] = str(error)
        return errors

    def __len__(self) -> int:
        return len(self._goals)

    # === ОПЕРАЦИИ ===

    async def load(self) -> bool:
        """Загрузить цели владельца; при ошибке продолжаем с пустым списком"""
        try:
            records = await self.record_store.list(self.owner_id)
        except Exception as e:
            logger.error(f"❌ Ошибка загрузки целей: {e}")
            self._goals = []
            self.notices.report(NoticeKind.LOAD, error=e)
            return False

        self._goals = [Goal.from_record(record) for record in records]
        self.loaded = True
        logger.info(f"📂 Загружено целей: {len(self._goals)}")
        return True

    def create(self, name: str) -> Goal:
        name = normalize_goal_name(name)
        if not name:
            raise ValidationFailure("Goal name must not be empty")
        if not is_valid_goal_name(name):
            raise ValidationFailure(f"Goal name must be at most {MAX_GOAL_NAME_LENGTH} characters")

        goal = Goal(name=name, user_id=self.owner_id)
        self._goals.append(goal)
        self._queue.schedule(goal)
        logger.info(f"➕ Создана цель '{name}'")
        return goal

    def rename(self, goal_id: str, new_name: str) -> bool:
        """
        Переименовать цель.

        Пустое имя откатывается к прежнему, неизменное имя ничего не делает;
        в обоих случаях запись в хранилище не выполняется.
        """
        goal = self.get(goal_id)
        name = normalize_goal_name(new_name)
        if not is_valid_goal_name(name):
            logger.debug(f"Переименование цели {goal_id} отклонено, имя остаётся '{goal.name}'")
            return False
        if name == goal.name:
            return False

        goal.name = name
        self._queue.schedule(goal)
        return True

    def toggle_day(self, goal_id: str, key: str) -> Optional[DayStatus]:
        goal = self.get(goal_id)
        status = goal.days.toggle(key)
        self._queue.schedule(goal)
        return status

    async def delete(self, goal_id: str) -> bool:
        """
        Удалить цель: сначала в хранилище, затем локально.

        Пока удаление идёт, цель недоступна через get(): повторное
        удаление и изменения получают GoalNotFound. Если удаление в
        хранилище не удалось, цель снова доступна.
        """
        goal = self.get(goal_id)
        self._deleting.add(goal.client_id)
        try:
            # вставка могла ещё не завершиться, без неё нет идентификатора
            await self._queue.flush(goal)

            if goal.is_persisted:
                try:
                    await self.record_store.delete(goal.id)
                except Exception as e:
                    logger.error(f"❌ Ошибка удаления цели '{goal.name}': {e}")
                    self.notices.report(NoticeKind.DELETE, goal_id=goal_id, error=e)
                    return False

            self._queue.discard(goal)
            if goal in self._goals:
                self._goals.remove(goal)
        finally:
            self._deleting.discard(goal.client_id)

        logger.info(f"🗑 Удалена цель '{goal.name}'")
        return True

    def retry(self, goal_id: str) -> bool:
        return self._queue.retry(self.get(goal_id)) is not None

    async def flush(self) -> None:
        await self._queue.flush()

    @property
    def write_count(self) -> int:
        return self._queue.writes

    # === СОХРАНЕНИЕ ===

    async def _persist(self, goal: Goal) -> None:
        timestamp = now_iso()
        record = goal.to_record(updated_at=timestamp)
        if goal.id is None:
            goal.id = await self.record_store.insert(record)
            logger.debug(f"Цель '{goal.name}' получила идентификатор {goal.id}")
        else:
            await self.record_store.update(goal.id, record)
        goal.updated_at = timestamp

    def _on_save_failure(self, goal: Goal, error: Exception) -> None:
        if goal in self._goals:
            self.notices.report(NoticeKind.SAVE, goal_id=goal.client_id,
                                error=SaveFailure(str(error)))
