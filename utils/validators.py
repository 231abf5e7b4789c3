from utils.datetime_utils import parse_date_key

MAX_GOAL_NAME_LENGTH = 200


def normalize_goal_name(name) -> str:
    return (name or "").strip()


def is_valid_goal_name(name: str) -> bool:
    return 1 <= len(normalize_goal_name(name)) <= MAX_GOAL_NAME_LENGTH


def is_valid_date_key(key: str) -> bool:
    try:
        parse_date_key(key)
    except (TypeError, ValueError):
        return False
    return len(key) == 10
