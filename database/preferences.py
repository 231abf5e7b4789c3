# database/preferences.py

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from models.enums import Theme

logger = logging.getLogger(__name__)

THEME_KEY = "theme"


class PreferenceStore:
    """Настройки пользователей в JSON-файле: {user_id: {key: value}}"""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> Dict[str, Dict[str, Any]]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"⚠️ Поврежден файл настроек {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def get(self, user_id: str, key: str, default: Optional[Any] = None) -> Any:
        return self._load().get(str(user_id), {}).get(key, default)

    def set(self, user_id: str, key: str, value: Any) -> None:
        data = self._load()
        data.setdefault(str(user_id), {})[key] = value
        self._save(data)

    def get_theme(self, user_id: str) -> Theme:
        try:
            return Theme(self.get(user_id, THEME_KEY, Theme.LIGHT.value))
        except ValueError:
            return Theme.LIGHT

    def set_theme(self, user_id: str, theme: Theme) -> None:
        self.set(user_id, THEME_KEY, Theme(theme).value)
