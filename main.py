#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PixelStreak - точка входа
Запуск веб-приложения трекера привычек

Использование: python main.py [--host HOST] [--port PORT] [--reload] [--memory]
"""

import argparse
import os
import sys

import uvicorn

from config import StoreBackend, settings
from utils.logger import setup_logging


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Запуск веб-приложения PixelStreak')
    parser.add_argument('--port', type=int, default=settings.PORT, help='Порт сервера')
    parser.add_argument('--host', default=settings.HOST, help='Хост сервера')
    parser.add_argument('--reload', action='store_true', help='Автоперезагрузка при изменениях')
    parser.add_argument('--memory', action='store_true',
                        help='Хранить цели в памяти процесса вместо Supabase')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    if args.memory:
        # читается при импорте config в процессе uvicorn
        os.environ['STORE_BACKEND'] = 'memory'
        settings.STORE_BACKEND = StoreBackend.MEMORY

    logger = setup_logging(settings)
    logger.info(f"🚀 {settings.APP_NAME} v{settings.VERSION} ({settings.ENVIRONMENT.value})")
    logger.info(f"💾 Хранилище: {settings.store_backend.value}")

    try:
        uvicorn.run(
            "dashboard.app:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_config=None,
        )
    except KeyboardInterrupt:
        logger.info("👋 Остановлено пользователем")
    return 0


if __name__ == '__main__':
    sys.exit(main())
