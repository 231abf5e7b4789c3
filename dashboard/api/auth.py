import logging

from fastapi import APIRouter, HTTPException, Depends, Request, Response
from typing import Dict, Any

from config import settings
from core.exceptions import AuthError
from models.enums import NoticeKind
from services.auth import AuthProvider, AuthSession, AuthUser
from shared.models import CredentialsRequest, PasswordResetRequest, PasswordUpdateRequest
from ..dependencies import (
    drop_workspace,
    extract_refresh_token,
    extract_token,
    get_auth_provider,
    get_current_user,
    load_workspace,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _start_session(response: Response, session: AuthSession) -> Dict[str, Any]:
    response.set_cookie(
        settings.SESSION_COOKIE,
        session.access_token,
        max_age=settings.SESSION_TIMEOUT,
        httponly=True,
        samesite="lax",
        secure=settings.is_production(),
    )
    if session.refresh_token:
        response.set_cookie(
            settings.REFRESH_COOKIE,
            session.refresh_token,
            max_age=settings.SESSION_TIMEOUT,
            httponly=True,
            samesite="lax",
            secure=settings.is_production(),
        )
    return {
        "user": {"id": session.user.id, "email": session.user.email},
        "access_token": session.access_token,
    }


@router.post("/signup", response_model=Dict[str, Any])
async def sign_up(
    request: CredentialsRequest,
    response: Response,
    auth: AuthProvider = Depends(get_auth_provider)
):
    """Регистрация нового пользователя"""
    try:
        session = await auth.sign_up(request.email, request.password)
    except AuthError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _start_session(response, session)


@router.post("/login", response_model=Dict[str, Any])
async def sign_in(
    request: CredentialsRequest,
    response: Response,
    auth: AuthProvider = Depends(get_auth_provider)
):
    """Вход существующего пользователя"""
    try:
        session = await auth.sign_in(request.email, request.password)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))
    return _start_session(response, session)


@router.post("/logout", response_model=Dict[str, Any])
async def sign_out(
    request: Request,
    response: Response,
    user: AuthUser = Depends(get_current_user),
    auth: AuthProvider = Depends(get_auth_provider)
):
    """Выход: ждём незавершенные записи, затем закрываем сессию"""
    token = extract_token(request)
    workspace = await load_workspace(user, token)
    await workspace.store.flush()
    try:
        await auth.sign_out(token)
    except AuthError as e:
        logger.error(f"❌ Ошибка выхода: {e}")
        notice = workspace.notices.report(NoticeKind.SIGN_OUT, error=e)
        raise HTTPException(status_code=502, detail=notice.message)

    drop_workspace(user.id)
    response.delete_cookie(settings.SESSION_COOKIE)
    response.delete_cookie(settings.REFRESH_COOKIE)
    return {"success": True}


@router.post("/reset-password", response_model=Dict[str, Any])
async def send_password_reset(
    request: PasswordResetRequest,
    http_request: Request,
    auth: AuthProvider = Depends(get_auth_provider)
):
    """Отправить письмо для сброса пароля"""
    redirect_to = request.redirect_to or str(http_request.base_url)
    try:
        await auth.send_password_reset(request.email, redirect_to)
    except AuthError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True}


@router.post("/update-password", response_model=Dict[str, Any])
async def update_password(
    request: PasswordUpdateRequest,
    http_request: Request,
    user: AuthUser = Depends(get_current_user),
    auth: AuthProvider = Depends(get_auth_provider)
):
    """Сменить пароль (после перехода по ссылке сброса)"""
    try:
        await auth.update_password(
            extract_token(http_request),
            request.password,
            extract_refresh_token(http_request),
        )
    except AuthError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True}


@router.get("/me", response_model=Dict[str, Any])
async def current_user(user: AuthUser = Depends(get_current_user)):
    return {"id": user.id, "email": user.email}
