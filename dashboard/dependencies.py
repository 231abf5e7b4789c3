#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PixelStreak - Dashboard Dependencies
Зависимости и провайдеры компонентов для FastAPI приложения
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Optional

from fastapi import Depends, HTTPException, Request, status

from config import StoreBackend, settings
from database.preferences import PreferenceStore
from database.remote_store import (
    InMemoryRecordStore,
    RecordStore,
    SupabaseRecordStore,
    supabase_client_factory,
)
from handlers.router import CommandRouter
from services.auth import AuthProvider, AuthUser, LocalAuthProvider, SupabaseAuthProvider
from services.goal_store import GoalStore
from services.notifications import NoticeBoard
from utils.datetime_utils import local_today

logger = logging.getLogger(__name__)

# access token -> хранилище записей, работающее от имени владельца токена
RecordStoreFactory = Callable[[Optional[str]], RecordStore]


@dataclass
class Workspace:
    """Состояние одного пользователя: цели, диспетчер жестов, уведомления"""
    user: AuthUser
    store: GoalStore
    router: CommandRouter
    notices: NoticeBoard


# ===== ГЛОБАЛЬНЫЕ ПЕРЕМЕННЫЕ =====

_record_store_factory: Optional[RecordStoreFactory] = None
_auth_provider: Optional[AuthProvider] = None
_preferences: Optional[PreferenceStore] = None
_clock: Callable[[], date] = lambda: local_today(settings.TIMEZONE)
_workspaces: Dict[str, Workspace] = {}
_workspace_locks: Dict[str, asyncio.Lock] = {}

# ===== ИНИЦИАЛИЗАЦИЯ КОМПОНЕНТОВ =====

def init_components(record_store: Optional[RecordStore] = None,
                    auth_provider: Optional[AuthProvider] = None,
                    preferences: Optional[PreferenceStore] = None,
                    clock: Optional[Callable[[], date]] = None,
                    record_store_factory: Optional[RecordStoreFactory] = None) -> None:
    """Создать фабрику хранилищ, провайдер авторизации и настройки"""
    global _record_store_factory, _auth_provider, _preferences, _clock

    if record_store is not None:
        record_store_factory = lambda access_token: record_store

    if record_store_factory is None or auth_provider is None:
        backend = settings.store_backend
        if backend == StoreBackend.SUPABASE:
            logger.info("🔄 Подключение к Supabase...")
            new_client = supabase_client_factory(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
            # у каждого пользователя свой клиент с его токеном
            record_store_factory = record_store_factory or (
                lambda access_token: SupabaseRecordStore(
                    new_client(), settings.GOALS_TABLE, access_token
                )
            )
            auth_provider = auth_provider or SupabaseAuthProvider(new_client)
        else:
            logger.info("💾 Локальный режим: цели хранятся в памяти процесса")
            shared_store = InMemoryRecordStore()
            record_store_factory = record_store_factory or (lambda access_token: shared_store)
            auth_provider = auth_provider or LocalAuthProvider()

    _record_store_factory = record_store_factory
    _auth_provider = auth_provider
    _preferences = preferences or PreferenceStore(settings.preferences_path)
    if clock is not None:
        _clock = clock
    _workspaces.clear()
    _workspace_locks.clear()
    logger.info("✅ Компоненты инициализированы")


def ensure_components() -> None:
    if _record_store_factory is None or _auth_provider is None:
        init_components()


def reset_state() -> None:
    """Сбросить все синглтоны (используется в тестах)"""
    global _record_store_factory, _auth_provider, _preferences, _clock
    _record_store_factory = None
    _auth_provider = None
    _preferences = None
    _clock = lambda: local_today(settings.TIMEZONE)
    _workspaces.clear()
    _workspace_locks.clear()


async def close_workspaces() -> None:
    """Дождаться незавершенных записей перед остановкой"""
    for workspace in list(_workspaces.values()):
        await workspace.store.flush()

# ===== ПРОВАЙДЕРЫ ЗАВИСИМОСТЕЙ =====

def get_today() -> date:
    return _clock()


def get_record_store(access_token: Optional[str] = None) -> RecordStore:
    ensure_components()
    return _record_store_factory(access_token)


def get_auth_provider() -> AuthProvider:
    ensure_components()
    return _auth_provider


def get_preferences() -> PreferenceStore:
    ensure_components()
    return _preferences


def extract_token(request: Request) -> Optional[str]:
    """Токен из заголовка Authorization: Bearer или из cookie сессии"""
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return request.cookies.get(settings.SESSION_COOKIE)


def extract_refresh_token(request: Request) -> Optional[str]:
    return request.headers.get("X-Refresh-Token") or request.cookies.get(settings.REFRESH_COOKIE)


async def get_optional_user(
    request: Request,
    auth: AuthProvider = Depends(get_auth_provider)
) -> Optional[AuthUser]:
    return await auth.get_current_user(extract_token(request))


async def get_current_user(
    user: Optional[AuthUser] = Depends(get_optional_user)
) -> AuthUser:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def load_workspace(user: AuthUser, access_token: Optional[str] = None) -> Workspace:
    """
    Рабочее пространство пользователя, создаётся при первом обращении.

    Параллельные запросы одного пользователя ждут одну и ту же загрузку.
    """
    lock = _workspace_locks.setdefault(user.id, asyncio.Lock())
    async with lock:
        workspace = _workspaces.get(user.id)
        if workspace is None:
            notices = NoticeBoard()
            store = GoalStore(get_record_store(access_token), user.id, notices)
            await store.load()
            router = CommandRouter(
                store,
                preferences=get_preferences(),
                today_provider=get_today,
                min_year=settings.MIN_YEAR,
                cell_size_px=settings.CELL_SIZE_PX,
            )
            workspace = Workspace(user=user, store=store, router=router, notices=notices)
            _workspaces[user.id] = workspace
            logger.info(f"👤 Рабочее пространство пользователя {user.id} готово")
        else:
            workspace.store.record_store.authorize(access_token)
            if not workspace.store.loaded and not workspace.store.goals:
                # предыдущая загрузка не удалась, пробуем снова
                await workspace.store.load()
    return workspace


async def get_workspace(
    request: Request,
    user: AuthUser = Depends(get_current_user)
) -> Workspace:
    return await load_workspace(user, extract_token(request))


def drop_workspace(user_id: str) -> None:
    _workspaces.pop(user_id, None)
    _workspace_locks.pop(user_id, None)
