from core.stats import StatsSnapshot
from models.enums import NoticeKind

NOTICE_MESSAGES = {
    NoticeKind.LOAD: "Failed to load goals. Please refresh the page.",
    NoticeKind.SAVE: "Failed to save goal. Please try again.",
    NoticeKind.DELETE: "Failed to delete goal. Please try again.",
    NoticeKind.SIGN_OUT: "Failed to sign out. Please try again.",
}

EMPTY_STATE_TITLE = "No goals yet"
EMPTY_STATE_TEXT = "Add your first goal above to start tracking!"


def notice_message(kind: NoticeKind) -> str:
    return NOTICE_MESSAGES[kind]


def stats_line(stats: StatsSnapshot) -> str:
    return f"{stats.completed} completed · {stats.missed} missed · {stats.streak} day streak"


def delete_confirmation(name: str) -> str:
    return f'Are you sure you want to delete "{name}"?'
