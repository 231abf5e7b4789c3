# services/__init__.py

"""
Модуль сервисов PixelStreak

Хранилище целей, очередь сохранения, авторизация и уведомления.
"""

from .goal_store import GoalStore
from .persistence import PersistenceQueue
from .notifications import Notice, NoticeBoard
from .auth import AuthProvider, AuthSession, AuthUser, LocalAuthProvider, SupabaseAuthProvider

__all__ = [
    'GoalStore',
    'PersistenceQueue',
    'Notice',
    'NoticeBoard',
    'AuthProvider',
    'AuthSession',
    'AuthUser',
    'LocalAuthProvider',
    'SupabaseAuthProvider'
]
