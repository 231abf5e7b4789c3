from fastapi import APIRouter, HTTPException, Depends, Query
from typing import Dict, Any, Optional

from core.exceptions import DeleteFailure, FutureDateError, GoalNotFound, ValidationFailure
from handlers.router import CommandResult, Gesture, Interaction
from shared.models import GoalCreateRequest, GoalRenameRequest
from ..dependencies import Workspace, get_workspace

router = APIRouter(prefix="/api/goals", tags=["goals"])

_ERROR_STATUS = {
    GoalNotFound: 404,
    FutureDateError: 409,
    ValidationFailure: 422,
    DeleteFailure: 502,
}


def _checked(result: CommandResult) -> Dict[str, Any]:
    """Превратить неуспешный результат жеста в HTTP ошибку"""
    if result.ok:
        return result.to_dict()
    status_code = _ERROR_STATUS.get(type(result.error), 400)
    raise HTTPException(status_code=status_code, detail=result.message)


@router.get("", response_model=Dict[str, Any])
async def get_board(
    year: Optional[int] = Query(None, ge=1000, le=9999),
    workspace: Workspace = Depends(get_workspace)
):
    """
    Сетка всех целей за выбранный год со статистикой
    """
    if year is not None and year != workspace.router.view.year:
        _checked(await workspace.router.dispatch(
            Interaction(Gesture.SELECT_YEAR, value=str(year))
        ))
    board = workspace.router.render().to_dict()
    board["notices"] = [notice.to_dict() for notice in workspace.notices.pending()]
    return board


@router.post("", status_code=201, response_model=Dict[str, Any])
async def create_goal(
    request: GoalCreateRequest,
    workspace: Workspace = Depends(get_workspace)
):
    """Создать цель; сохранение выполняется в фоне"""
    return _checked(await workspace.router.dispatch(
        Interaction(Gesture.ADD_GOAL, value=request.name)
    ))


@router.patch("/{goal_id}", response_model=Dict[str, Any])
async def rename_goal(
    goal_id: str,
    request: GoalRenameRequest,
    workspace: Workspace = Depends(get_workspace)
):
    """Переименовать цель (пустое имя откатывается к прежнему)"""
    return _checked(await workspace.router.dispatch(
        Interaction(Gesture.COMMIT_TITLE, goal_id=goal_id, value=request.name)
    ))


@router.post("/{goal_id}/days/{date_key}/toggle", response_model=Dict[str, Any])
async def toggle_day(
    goal_id: str,
    date_key: str,
    workspace: Workspace = Depends(get_workspace)
):
    """Переключить статус дня: пусто -> выполнено -> пропущено -> пусто"""
    return _checked(await workspace.router.dispatch(
        Interaction(Gesture.CLICK_CELL, goal_id=goal_id, date_key=date_key)
    ))


@router.delete("/{goal_id}", response_model=Dict[str, Any])
async def delete_goal(
    goal_id: str,
    confirm: bool = Query(False),
    workspace: Workspace = Depends(get_workspace)
):
    """Удалить цель; без confirm=true возвращает текст подтверждения"""
    result = await workspace.router.dispatch(
        Interaction(Gesture.DELETE_GOAL, goal_id=goal_id, confirmed=confirm)
    )
    if result.data.get("confirm_required"):
        raise HTTPException(status_code=409, detail=result.message)
    return _checked(result)


@router.post("/{goal_id}/retry", response_model=Dict[str, Any])
async def retry_goal(
    goal_id: str,
    workspace: Workspace = Depends(get_workspace)
):
    """Повторить неудавшееся сохранение цели"""
    return _checked(await workspace.router.dispatch(
        Interaction(Gesture.RETRY_SYNC, goal_id=goal_id)
    ))


notices_router = APIRouter(prefix="/api/notices", tags=["notices"])


@notices_router.get("", response_model=Dict[str, Any])
async def drain_notices(workspace: Workspace = Depends(get_workspace)):
    """Забрать накопленные уведомления об ошибках"""
    return {"notices": [notice.to_dict() for notice in workspace.notices.drain()]}
