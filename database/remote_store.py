#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PixelStreak - Remote Record Store
Хранилище записей целей: Supabase (таблица goals) и память процесса

Контракт: list(owner_id) -> записи по возрастанию created_at,
insert(record) -> идентификатор, update(identity, record), delete(identity).
Ошибки не перехватываются здесь: их обрабатывает вызывающая сторона.

Запросы к Supabase выполняются от имени пользователя: у каждого
пользователя свой клиент с его access token (row level security).
"""

import asyncio
import copy
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from supabase import Client, create_client

from utils.datetime_utils import now_iso

logger = logging.getLogger(__name__)

GoalRecord = Dict[str, Any]
ClientFactory = Callable[[], Client]


def _check_credentials(url: str, anon_key: str) -> None:
    if not (url and url.startswith("https://")):
        raise ValueError("SUPABASE_URL не задан или имеет неверный формат")
    if not anon_key:
        raise ValueError("SUPABASE_ANON_KEY не задан")


def supabase_client_factory(url: str, anon_key: str) -> ClientFactory:
    """Фабрика новых клиентов; параметры проверяются сразу"""
    _check_credentials(url, anon_key)
    return lambda: create_client(url, anon_key)


class RecordStore(ABC):
    """Абстрактное удалённое хранилище записей целей"""

    def authorize(self, access_token: Optional[str]) -> None:
        """Выполнять дальнейшие запросы от имени владельца токена"""

    @abstractmethod
    async def list(self, owner_id: str) -> List[GoalRecord]:
        ...

    @abstractmethod
    async def insert(self, record: GoalRecord) -> Any:
        ...

    @abstractmethod
    async def update(self, identity: Any, record: GoalRecord) -> None:
        ...

    @abstractmethod
    async def delete(self, identity: Any) -> None:
        ...


class SupabaseRecordStore(RecordStore):
    """
    Таблица Supabase одного пользователя.

    Клиент не должен разделяться между пользователями: токен
    устанавливается в заголовок PostgREST этого клиента. Синхронные
    вызовы клиента выполняются в executor.
    """

    def __init__(self, client: Client, table: str = "goals",
                 access_token: Optional[str] = None, executor=None):
        self.client = client
        self.table = table
        self.executor = executor
        self.access_token: Optional[str] = None
        self.authorize(access_token)

    def authorize(self, access_token: Optional[str]) -> None:
        if not access_token or access_token == self.access_token:
            return
        self.client.postgrest.auth(access_token)
        self.access_token = access_token
        logger.debug("🔑 Токен доступа к таблице обновлён")

    async def _run(self, func):
        return await asyncio.get_running_loop().run_in_executor(self.executor, func)

    async def list(self, owner_id: str) -> List[GoalRecord]:
        response = await self._run(
            lambda: self.client.table(self.table)
            .select("*")
            .eq("user_id", owner_id)
            .order("created_at", desc=False)
            .execute()
        )
        return response.data or []

    async def insert(self, record: GoalRecord) -> Any:
        response = await self._run(
            lambda: self.client.table(self.table).insert(record).execute()
        )
        if not response.data:
            raise RuntimeError("Supabase insert returned no rows")
        return response.data[0]["id"]

    async def update(self, identity: Any, record: GoalRecord) -> None:
        await self._run(
            lambda: self.client.table(self.table).update(record).eq("id", identity).execute()
        )

    async def delete(self, identity: Any) -> None:
        await self._run(
            lambda: self.client.table(self.table).delete().eq("id", identity).execute()
        )


class InMemoryRecordStore(RecordStore):
    """Хранилище в памяти процесса (локальный режим и тесты)"""

    def __init__(self, records: Optional[List[GoalRecord]] = None):
        self._records: Dict[int, GoalRecord] = {}
        self._ids = itertools.count(1)
        for record in records or []:
            identity = record.get("id") or next(self._ids)
            self._records[identity] = dict(record, id=identity)

    async def list(self, owner_id: str) -> List[GoalRecord]:
        rows = [r for r in self._records.values() if r.get("user_id") == owner_id]
        rows.sort(key=lambda r: (r.get("created_at") or "", r["id"]))
        return copy.deepcopy(rows)

    async def insert(self, record: GoalRecord) -> Any:
        identity = next(self._ids)
        while identity in self._records:
            identity = next(self._ids)
        self._records[identity] = dict(copy.deepcopy(record), id=identity, created_at=now_iso())
        logger.debug(f"Inserted goal record {identity}")
        return identity

    async def update(self, identity: Any, record: GoalRecord) -> None:
        if identity not in self._records:
            raise KeyError(f"Goal record {identity} does not exist")
        self._records[identity].update(copy.deepcopy(record))

    async def delete(self, identity: Any) -> None:
        self._records.pop(identity, None)

    def __len__(self) -> int:
        return len(self._records)
