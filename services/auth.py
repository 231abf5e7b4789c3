#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PixelStreak - Auth Providers
Провайдеры авторизации: Supabase Auth и локальный однопользовательский режим

Supabase: сессия пользователя никогда не хранится в общем клиенте.
Вход и смена пароля выполняются на отдельном клиенте для каждого
вызова, выход отзывает именно переданный токен.
"""

import asyncio
import logging
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional, Set

from supabase import Client

from core.exceptions import AuthError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: Optional[str] = None


@dataclass(frozen=True)
class AuthSession:
    user: AuthUser
    access_token: str
    refresh_token: Optional[str] = None


class AuthProvider(ABC):
    """Контракт провайдера авторизации"""

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> AuthSession:
        ...

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> AuthSession:
        ...

    @abstractmethod
    async def sign_out(self, access_token: str) -> None:
        ...

    @abstractmethod
    async def get_current_user(self, access_token: Optional[str]) -> Optional[AuthUser]:
        ...

    @abstractmethod
    async def send_password_reset(self, email: str, redirect_to: Optional[str] = None) -> None:
        ...

    @abstractmethod
    async def update_password(self, access_token: str, new_password: str,
                              refresh_token: Optional[str] = None) -> None:
        ...


class LocalAuthProvider(AuthProvider):
    """Один локальный пользователь, любые непустые учётные данные"""

    def __init__(self, user_id: str = "local", email: str = "local@localhost"):
        self.user = AuthUser(id=user_id, email=email)
        self._tokens: Set[str] = set()

    def _issue(self) -> AuthSession:
        token = secrets.token_urlsafe(32)
        self._tokens.add(token)
        return AuthSession(user=self.user, access_token=token)

    async def sign_up(self, email: str, password: str) -> AuthSession:
        return await self.sign_in(email, password)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        if not email or not password:
            raise AuthError("Email and password are required")
        return self._issue()

    async def sign_out(self, access_token: str) -> None:
        self._tokens.discard(access_token)

    async def get_current_user(self, access_token: Optional[str]) -> Optional[AuthUser]:
        if access_token and access_token in self._tokens:
            return self.user
        return None

    async def send_password_reset(self, email: str, redirect_to: Optional[str] = None) -> None:
        logger.info(f"🔑 Локальный режим: сброс пароля для {email} не требуется")

    async def update_password(self, access_token: str, new_password: str,
                              refresh_token: Optional[str] = None) -> None:
        if await self.get_current_user(access_token) is None:
            raise AuthError("Not signed in")


class SupabaseAuthProvider(AuthProvider):
    """
    Supabase Auth; синхронный клиент вызывается в executor.

    client_factory создаёт новый клиент: он нужен для операций,
    которые сохраняют сессию внутри клиента. Общий клиент
    используется только для запросов без состояния.
    """

    def __init__(self, client_factory: Callable[[], Client], executor=None):
        self.client_factory = client_factory
        self.client = client_factory()
        self.executor = executor

    async def _run(self, func):
        try:
            return await asyncio.get_running_loop().run_in_executor(self.executor, func)
        except AuthError:
            raise
        except Exception as e:
            raise AuthError(str(e)) from e

    @staticmethod
    def _session(response) -> AuthSession:
        if response.session is None or response.user is None:
            raise AuthError("Check your email to confirm your account")
        return AuthSession(
            user=AuthUser(id=str(response.user.id), email=response.user.email),
            access_token=response.session.access_token,
            refresh_token=response.session.refresh_token,
        )

    async def sign_up(self, email: str, password: str) -> AuthSession:
        client = self.client_factory()
        response = await self._run(
            lambda: client.auth.sign_up({"email": email, "password": password})
        )
        return self._session(response)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        client = self.client_factory()
        response = await self._run(
            lambda: client.auth.sign_in_with_password({"email": email, "password": password})
        )
        return self._session(response)

    async def sign_out(self, access_token: str) -> None:
        if not access_token:
            return
        await self._run(lambda: self.client.auth.admin.sign_out(access_token))

    async def get_current_user(self, access_token: Optional[str]) -> Optional[AuthUser]:
        if not access_token:
            return None
        try:
            response = await self._run(lambda: self.client.auth.get_user(access_token))
        except AuthError as e:
            logger.warning(f"⚠️ Токен доступа отклонён: {e}")
            return None
        if response is None or response.user is None:
            return None
        return AuthUser(id=str(response.user.id), email=response.user.email)

    async def send_password_reset(self, email: str, redirect_to: Optional[str] = None) -> None:
        options = {"redirect_to": redirect_to} if redirect_to else {}
        await self._run(lambda: self.client.auth.reset_password_for_email(email, options))

    async def update_password(self, access_token: str, new_password: str,
                              refresh_token: Optional[str] = None) -> None:
        if not access_token or not refresh_token:
            raise AuthError("Session expired, please sign in again")
        client = self.client_factory()

        def change():
            client.auth.set_session(access_token, refresh_token)
            return client.auth.update_user({"password": new_password})

        await self._run(change)
