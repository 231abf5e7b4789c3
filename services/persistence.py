#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PixelStreak - Persistence Queue
Очередь сохранения целей: не больше одной записи в полёте на цель

Повторные изменения во время записи схлопываются: после завершения
текущей записи выполняется ещё одна с последним полным снимком цели.
Ошибка записи сохраняется как состояние цели и не повторяется
автоматически; следующее изменение или retry() пробуют снова.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional, Set

from models.goal import Goal

logger = logging.getLogger(__name__)

SaveFunc = Callable[[Goal], Awaitable[None]]
FailureCallback = Callable[[Goal, Exception], None]


class PersistenceQueue:
    """Сериализует запись каждой цели в удалённое хранилище"""

    def __init__(self, save: SaveFunc, on_failure: Optional[FailureCallback] = None):
        self._save = save
        self._on_failure = on_failure
        self._dirty: Set[str] = set()
        self._inflight: Dict[str, asyncio.Task] = {}
        self._failures: Dict[str, Exception] = {}
        self.writes = 0

    def schedule(self, goal: Goal) -> asyncio.Task:
        """Пометить цель для записи; вернуть задачу, которая её выполнит"""
        key = goal.client_id
        self._failures.pop(key, None)
        self._dirty.add(key)

        task = self._inflight.get(key)
        if task is None or task.done():
            task = asyncio.get_running_loop().create_task(self._drain(goal))
            self._inflight[key] = task
        else:
            logger.debug(f"Запись цели {key} уже выполняется, изменения будут объединены")
        return task

    async def _drain(self, goal: Goal) -> None:
        key = goal.client_id
        try:
            while key in self._dirty:
                self._dirty.discard(key)
                self.writes += 1
                try:
                    await self._save(goal)
                except Exception as e:
                    self._failures[key] = e
                    logger.error(f"❌ Ошибка сохранения цели '{goal.name}' ({key}): {e}")
                    if self._on_failure:
                        self._on_failure(goal, e)
                else:
                    self._failures.pop(key, None)
        finally:
            if self._inflight.get(key) is asyncio.current_task():
                del self._inflight[key]

    def discard(self, goal: Goal) -> None:
        """Отменить ожидающую (ещё не начатую) запись и забыть ошибку"""
        self._dirty.discard(goal.client_id)
        self._failures.pop(goal.client_id, None)

    async def flush(self, goal: Optional[Goal] = None) -> None:
        """Дождаться завершения записей (одной цели или всех)"""
        while True:
            if goal is not None:
                task = self._inflight.get(goal.client_id)
                tasks = [task] if task is not None else []
            else:
                tasks = list(self._inflight.values())
            if not tasks:
                return
            await asyncio.gather(*tasks)

    def is_syncing(self, goal: Goal) -> bool:
        return goal.client_id in self._inflight

    def failure(self, goal: Goal) -> Optional[Exception]:
        return self._failures.get(goal.client_id)

    def retry(self, goal: Goal) -> Optional[asyncio.Task]:
        if goal.client_id not in self._failures:
            return None
        logger.info(f"🔄 Повторное сохранение цели '{goal.name}'")
        return self.schedule(goal)
