# handlers/router.py

"""
Таблица жестов пользователя -> операции ядра.

Каждый жест отображается ровно на одну именованную операцию; таблица
явная и проверяется тестами без веб-слоя.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

from core.calendar_grid import DEFAULT_CELL_SIZE_PX, available_years
from core.exceptions import (
    DeleteFailure,
    FutureDateError,
    HabitGridError,
    ValidationFailure,
)
from core.grid_renderer import BoardView, render_board
from database.preferences import PreferenceStore
from models.enums import Theme
from services.goal_store import GoalStore
from ui.messages import delete_confirmation
from ui.themes import toggle_theme
from utils.datetime_utils import parse_date_key
from utils.validators import is_valid_date_key

logger = logging.getLogger(__name__)


class Gesture(str, Enum):
    ADD_GOAL = "add_goal"
    CLICK_CELL = "click_cell"
    EDIT_TITLE = "edit_title"
    COMMIT_TITLE = "commit_title"
    CANCEL_TITLE = "cancel_title"
    DELETE_GOAL = "delete_goal"
    SELECT_YEAR = "select_year"
    TOGGLE_THEME = "toggle_theme"
    RETRY_SYNC = "retry_sync"


@dataclass
class Interaction:
    gesture: Gesture
    goal_id: Optional[str] = None
    date_key: Optional[str] = None
    value: Optional[str] = None
    confirmed: bool = False


@dataclass
class CommandResult:
    ok: bool
    gesture: Gesture
    message: str = ""
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[HabitGridError] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "gesture": self.gesture.value,
            "message": self.message,
            "data": self.data,
        }


@dataclass
class ViewState:
    year: int
    editing_goal_id: Optional[str] = None
    original_name: Optional[str] = None


Handler = Callable[[Interaction], Awaitable[CommandResult]]


class CommandRouter:
    """Диспетчер жестов одного пользователя"""

    def __init__(self, store: GoalStore,
                 preferences: Optional[PreferenceStore] = None,
                 today_provider: Callable[[], date] = date.today,
                 min_year: int = 2026,
                 cell_size_px: int = DEFAULT_CELL_SIZE_PX):
        self.store = store
        self.preferences = preferences
        self.today_provider = today_provider
        self.min_year = min_year
        self.cell_size_px = cell_size_px
        self.view = ViewState(year=today_provider().year)

        self._handlers: Dict[Gesture, Handler] = {
            Gesture.ADD_GOAL: self.add_goal,
            Gesture.CLICK_CELL: self.click_cell,
            Gesture.EDIT_TITLE: self.edit_title,
            Gesture.COMMIT_TITLE: self.commit_title,
            Gesture.CANCEL_TITLE: self.cancel_title,
            Gesture.DELETE_GOAL: self.delete_goal,
            Gesture.SELECT_YEAR: self.select_year,
            Gesture.TOGGLE_THEME: self.switch_theme,
            Gesture.RETRY_SYNC: self.retry_sync,
        }

    @property
    def routes(self) -> Dict[Gesture, str]:
        return {gesture: handler.__name__ for gesture, handler in self._handlers.items()}

    async def dispatch(self, interaction: Interaction) -> CommandResult:
        handler = self._handlers[interaction.gesture]
        try:
            return await handler(interaction)
        except HabitGridError as e:
            logger.info(f"⚠️ Жест {interaction.gesture.value} отклонён: {e}")
            return CommandResult(ok=False, gesture=interaction.gesture, message=str(e), error=e)

    def render(self) -> BoardView:
        return render_board(
            self.store.goals,
            self.view.year,
            self.today_provider(),
            self.min_year,
            self.cell_size_px,
            self.store.sync_errors(),
        )

    # === ОБРАБОТЧИКИ ===

    async def add_goal(self, interaction: Interaction) -> CommandResult:
        goal = self.store.create(interaction.value or "")
        return CommandResult(ok=True, gesture=interaction.gesture,
                             data={"goal_id": goal.client_id, "name": goal.name})

    async def click_cell(self, interaction: Interaction) -> CommandResult:
        key = interaction.date_key or ""
        if not is_valid_date_key(key):
            raise ValidationFailure(f"Invalid date {key!r}")
        today = self.today_provider()
        if parse_date_key(key) > today:
            raise FutureDateError(key)

        status = self.store.toggle_day(interaction.goal_id, key)
        stats = self.store.stats(interaction.goal_id, today)
        return CommandResult(ok=True, gesture=interaction.gesture, data={
            "date": key,
            "status": status.value if status else None,
            "stats": stats.to_dict(),
        })

    async def edit_title(self, interaction: Interaction) -> CommandResult:
        goal = self.store.get(interaction.goal_id)
        self.view.editing_goal_id = goal.client_id
        self.view.original_name = goal.name
        return CommandResult(ok=True, gesture=interaction.gesture, data={"name": goal.name})

    async def commit_title(self, interaction: Interaction) -> CommandResult:
        renamed = self.store.rename(interaction.goal_id, interaction.value or "")
        name = self.store.get(interaction.goal_id).name
        self._end_edit()
        return CommandResult(ok=True, gesture=interaction.gesture,
                             data={"renamed": renamed, "name": name})

    async def cancel_title(self, interaction: Interaction) -> CommandResult:
        goal = self.store.get(interaction.goal_id)
        self._end_edit()
        return CommandResult(ok=True, gesture=interaction.gesture, data={"name": goal.name})

    async def delete_goal(self, interaction: Interaction) -> CommandResult:
        goal = self.store.get(interaction.goal_id)
        if not interaction.confirmed:
            return CommandResult(ok=False, gesture=interaction.gesture,
                                 message=delete_confirmation(goal.name),
                                 data={"confirm_required": True})

        if not await self.store.delete(goal.client_id):
            raise DeleteFailure(f"Goal '{goal.name}' was not deleted")
        if self.view.editing_goal_id == goal.client_id:
            self._end_edit()
        return CommandResult(ok=True, gesture=interaction.gesture,
                             data={"goal_id": goal.client_id})

    async def select_year(self, interaction: Interaction) -> CommandResult:
        try:
            year = int(interaction.value)
        except (TypeError, ValueError):
            raise ValidationFailure(f"Invalid year {interaction.value!r}")
        if year not in available_years(self.today_provider(), self.min_year):
            raise ValidationFailure(f"Year {year} is not available")
        self.view.year = year
        return CommandResult(ok=True, gesture=interaction.gesture, data={"year": year})

    async def switch_theme(self, interaction: Interaction) -> CommandResult:
        if self.preferences is None:
            raise ValidationFailure("Preferences are not available")
        owner = self.store.owner_id
        if interaction.value:
            try:
                theme = Theme(interaction.value)
            except ValueError:
                raise ValidationFailure(f"Unknown theme {interaction.value!r}")
        else:
            theme = toggle_theme(self.preferences.get_theme(owner))
        self.preferences.set_theme(owner, theme)
        return CommandResult(ok=True, gesture=interaction.gesture, data={"theme": theme.value})

    async def retry_sync(self, interaction: Interaction) -> CommandResult:
        retried = self.store.retry(interaction.goal_id)
        return CommandResult(ok=True, gesture=interaction.gesture, data={"retried": retried})

    def _end_edit(self) -> None:
        self.view.editing_goal_id = None
        self.view.original_name = None
