from fastapi import APIRouter, HTTPException, Depends
from typing import Dict, Any

from database.preferences import PreferenceStore
from handlers.router import Gesture, Interaction
from services.auth import AuthUser
from shared.models import ThemeRequest
from ..dependencies import Workspace, get_current_user, get_preferences, get_workspace

router = APIRouter(prefix="/api/preferences", tags=["preferences"])


@router.get("/theme", response_model=Dict[str, Any])
async def get_theme(
    user: AuthUser = Depends(get_current_user),
    preferences: PreferenceStore = Depends(get_preferences)
):
    """Текущая тема пользователя (light/dark)"""
    return {"theme": preferences.get_theme(user.id).value}


@router.put("/theme", response_model=Dict[str, Any])
async def set_theme(
    request: ThemeRequest,
    workspace: Workspace = Depends(get_workspace)
):
    """Установить тему или переключить её, если тема не указана"""
    value = request.theme.value if request.theme else None
    result = await workspace.router.dispatch(Interaction(Gesture.TOGGLE_THEME, value=value))
    if not result.ok:
        raise HTTPException(status_code=422, detail=result.message)
    return result.data
