#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PixelStreak - Configuration
Централизованная конфигурация с валидацией (переменные окружения и .env)

Версия: 1.0.0
"""

import sys
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytz
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Среды выполнения"""
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Уровни логирования"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StoreBackend(str, Enum):
    AUTO = "auto"
    SUPABASE = "supabase"
    MEMORY = "memory"


class Settings(BaseSettings):
    """Настройки приложения PixelStreak"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===== ОСНОВНЫЕ НАСТРОЙКИ =====

    APP_NAME: str = Field(
        default="PixelStreak",
        description="Название приложения"
    )

    VERSION: str = Field(
        default="1.0.0",
        description="Версия приложения"
    )

    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Среда выполнения (development/testing/production)"
    )

    DEBUG: bool = Field(
        default=False,
        description="Режим отладки"
    )

    # ===== СЕТЕВЫЕ НАСТРОЙКИ =====

    HOST: str = Field(
        default="0.0.0.0",
        description="Хост веб-сервера"
    )

    PORT: int = Field(
        default=8000,
        description="Порт веб-сервера"
    )

    ALLOWED_ORIGINS: List[str] = Field(
        default=["*"],
        description="Разрешенные источники для CORS"
    )

    # ===== ХРАНИЛИЩЕ =====

    STORE_BACKEND: StoreBackend = Field(
        default=StoreBackend.AUTO,
        description="Хранилище целей: supabase, memory или auto (supabase при наличии URL)"
    )

    SUPABASE_URL: Optional[str] = Field(
        default=None,
        description="URL проекта Supabase"
    )

    SUPABASE_ANON_KEY: Optional[str] = Field(
        default=None,
        description="Публичный (anon) ключ Supabase"
    )

    GOALS_TABLE: str = Field(
        default="goals",
        description="Таблица целей в Supabase"
    )

    DATA_DIR: Path = Field(
        default=Path("data"),
        description="Директория локальных данных"
    )

    PREFERENCES_FILE: str = Field(
        default="preferences.json",
        description="Файл пользовательских настроек (тема)"
    )

    # ===== КАЛЕНДАРЬ =====

    TIMEZONE: Optional[str] = Field(
        default=None,
        description="Часовой пояс для 'сегодня' (по умолчанию локальное время)"
    )

    MIN_YEAR: int = Field(
        default=2026,
        description="Минимальный год в переключателе годов"
    )

    CELL_SIZE_PX: int = Field(
        default=15,
        description="Ширина колонки-недели в пикселях"
    )

    # ===== СЕССИИ =====

    SESSION_COOKIE: str = Field(
        default="pixelstreak_session",
        description="Имя cookie с токеном доступа"
    )

    REFRESH_COOKIE: str = Field(
        default="pixelstreak_refresh",
        description="Имя cookie с refresh token (нужен для смены пароля)"
    )

    SESSION_TIMEOUT: int = Field(
        default=7 * 24 * 3600,
        description="Время жизни cookie сессии в секундах"
    )

    # ===== ЛОГИРОВАНИЕ =====

    LOG_LEVEL: LogLevel = Field(
        default=LogLevel.INFO,
        description="Уровень логирования (DEBUG/INFO/WARNING/ERROR/CRITICAL)"
    )

    LOG_FORMAT: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        description="Формат логов"
    )

    LOG_DATE_FORMAT: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Формат даты в логах"
    )

    LOG_TO_FILE: bool = Field(
        default=False,
        description="Писать логи в файл"
    )

    LOG_DIR: Path = Field(
        default=Path("logs"),
        description="Директория логов"
    )

    # ===== ВАЛИДАТОРЫ =====

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def validate_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator("TIMEZONE")
    @classmethod
    def validate_timezone(cls, v):
        if v:
            try:
                pytz.timezone(v)
            except pytz.UnknownTimeZoneError:
                raise ValueError(f"Неизвестный часовой пояс: {v}")
        return v or None

    @field_validator("PORT")
    @classmethod
    def validate_port(cls, v):
        if not 1 <= v <= 65535:
            raise ValueError(f"Порт {v} вне допустимого диапазона (1-65535)")
        return v

    @field_validator("CELL_SIZE_PX")
    @classmethod
    def validate_cell_size(cls, v):
        if v <= 0:
            raise ValueError("CELL_SIZE_PX должен быть положительным")
        return v

    # ===== ВЫЧИСЛЯЕМЫЕ ЗНАЧЕНИЯ =====

    @property
    def store_backend(self) -> StoreBackend:
        """Фактическое хранилище с учетом режима auto"""
        if self.STORE_BACKEND != StoreBackend.AUTO:
            return self.STORE_BACKEND
        if self.SUPABASE_URL and self.SUPABASE_ANON_KEY:
            return StoreBackend.SUPABASE
        return StoreBackend.MEMORY

    @property
    def preferences_path(self) -> Path:
        return self.DATA_DIR / self.PREFERENCES_FILE

    def is_development(self) -> bool:
        return self.ENVIRONMENT == Environment.DEVELOPMENT

    def is_production(self) -> bool:
        return self.ENVIRONMENT == Environment.PRODUCTION

    def get_logging_config(self) -> Dict[str, Any]:
        """Конфигурация для logging.config.dictConfig"""
        handlers = ['console']
        if self.LOG_TO_FILE:
            handlers.append('file')

        config = {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'default': {
                    'format': self.LOG_FORMAT,
                    'datefmt': self.LOG_DATE_FORMAT
                }
            },
            'handlers': {
                'console': {
                    'class': 'logging.StreamHandler',
                    'level': self.LOG_LEVEL.value,
                    'formatter': 'default',
                    'stream': sys.stdout
                }
            },
            'loggers': {
                '': {
                    'level': self.LOG_LEVEL.value,
                    'handlers': handlers,
                },
                'httpx': {'level': 'WARNING'},
                'hpack': {'level': 'WARNING'},
                'uvicorn.access': {'level': 'WARNING'},
            }
        }

        if self.LOG_TO_FILE:
            config['handlers']['file'] = {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': self.LOG_LEVEL.value,
                'formatter': 'default',
                'filename': str(self.LOG_DIR / f"pixelstreak_{self.ENVIRONMENT.value}.log"),
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'encoding': 'utf-8'
            }

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация без секретов"""
        return {
            'app_name': self.APP_NAME,
            'version': self.VERSION,
            'environment': self.ENVIRONMENT.value,
            'debug': self.DEBUG,
            'store_backend': self.store_backend.value,
            'supabase_configured': bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY),
            'timezone': self.TIMEZONE or 'local',
            'min_year': self.MIN_YEAR,
            'log_level': self.LOG_LEVEL.value,
        }


# Глобальный экземпляр конфигурации
settings = Settings()

__all__ = [
    'settings',
    'Settings',
    'Environment',
    'LogLevel',
    'StoreBackend'
]
