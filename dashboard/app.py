#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PixelStreak - FastAPI Application
Веб-приложение трекера привычек: сетка в стиле GitHub для каждой цели

Версия: 1.0.0
"""

import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from config import settings
from core.exceptions import HabitGridError
from handlers.router import Gesture, Interaction
from services.auth import AuthUser
from shared.models import HealthCheck
from ui.messages import EMPTY_STATE_TEXT, EMPTY_STATE_TITLE, stats_line
from ui.themes import get_theme
from dashboard import dependencies
from dashboard.api import auth, goals, preferences

logger = logging.getLogger(__name__)

app_start_time = time.time()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Управление жизненным циклом приложения"""
    global app_start_time

    # Startup
    logger.info("🚀 Запуск PixelStreak...")
    app_start_time = time.time()
    dependencies.ensure_components()
    logger.info(f"🌐 Приложение доступно на: http://{settings.HOST}:{settings.PORT}")

    yield

    # Shutdown
    logger.info("🛑 Остановка PixelStreak...")
    await dependencies.close_workspaces()
    logger.info("✅ Незавершенные записи сохранены")


# Создание FastAPI приложения
app = FastAPI(
    title=settings.APP_NAME,
    description="Трекер привычек с сеткой выполнения по дням",
    version=settings.VERSION,
    docs_url="/api/docs" if settings.DEBUG else None,
    redoc_url="/api/redoc" if settings.DEBUG else None,
    openapi_url="/api/openapi.json" if settings.DEBUG else None,
    lifespan=lifespan
)

# ===== MIDDLEWARE =====

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)


@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    """Middleware для логирования запросов"""
    start_time = time.time()
    client_ip = request.headers.get("X-Forwarded-For", request.client.host if request.client else "-")

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(
        f"{request.method} {request.url.path} "
        f"- {response.status_code} "
        f"- {process_time:.3f}s "
        f"- {client_ip}"
    )
    response.headers["X-Process-Time"] = f"{process_time:.4f}"
    return response


@app.exception_handler(HabitGridError)
async def habit_grid_error_handler(request: Request, exc: HabitGridError):
    logger.warning(f"⚠️ {type(exc).__name__}: {exc}")
    return JSONResponse(status_code=400, content={"detail": str(exc)})

# ===== СТАТИЧЕСКИЕ ФАЙЛЫ И ШАБЛОНЫ =====

static_dir = Path(__file__).parent / "static"
app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

templates_dir = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(templates_dir))
templates.env.globals["stats_line"] = stats_line

# ===== ПОДКЛЮЧЕНИЕ API РОУТЕРОВ =====

app.include_router(goals.router)
app.include_router(goals.notices_router)
app.include_router(auth.router)
app.include_router(preferences.router)

# ===== ОСНОВНЫЕ МАРШРУТЫ =====


@app.get("/", response_class=HTMLResponse)
async def login_page(
    request: Request,
    user: Optional[AuthUser] = Depends(dependencies.get_optional_user)
):
    """Страница входа или переход к целям"""
    if user is not None:
        return RedirectResponse("/app", status_code=303)
    return templates.TemplateResponse(
        request,
        "login.html",
        {"title": settings.APP_NAME, "theme": "light"}
    )


@app.get("/app", response_class=HTMLResponse)
async def goals_page(
    request: Request,
    year: Optional[int] = None,
    user: Optional[AuthUser] = Depends(dependencies.get_optional_user)
):
    """Главная страница: сетки всех целей за выбранный год"""
    if user is None:
        return RedirectResponse("/", status_code=303)

    workspace = await dependencies.load_workspace(user, dependencies.extract_token(request))
    if year is not None:
        result = await workspace.router.dispatch(Interaction(Gesture.SELECT_YEAR, value=str(year)))
        if not result.ok:
            logger.debug(f"Год {year} недоступен, остаётся {workspace.router.view.year}")

    theme = dependencies.get_preferences().get_theme(user.id)
    return templates.TemplateResponse(
        request,
        "app.html",
        {
            "title": settings.APP_NAME,
            "board": workspace.router.render(),
            "user": user,
            "theme": theme.value,
            "palette": get_theme(theme.value),
            "notices": workspace.notices.drain(),
            "empty_title": EMPTY_STATE_TITLE,
            "empty_text": EMPTY_STATE_TEXT,
        }
    )


@app.get("/health", response_model=HealthCheck)
async def health_check():
    """Проверка состояния сервиса"""
    return HealthCheck(
        status="ok",
        service=settings.APP_NAME,
        version=settings.VERSION,
        timestamp=time.time(),
        store_backend=settings.store_backend.value,
    )
