"""ユーザー設定の永続化ストレージ"""

import json
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any

from src.application.interfaces.environment import Preferences
from src.infrastructure.logging_config import get_logger

logger = get_logger(__name__)

# デフォルトの保存先
DEFAULT_PREFERENCES_PATH = Path("outputs") / "preferences.json"


def preferences_from_dict(data: dict[str, Any]) -> Preferences:
    """未知のキーは無視し、欠けているキーはデフォルト値"""
    known = {f.name for f in fields(Preferences)}
    return Preferences(**{k: v for k, v in data.items() if k in known})


class JsonPreferenceStore:
    """JSONファイルにユーザー設定を保存する"""

    def __init__(self, path: Path | None = None):
        self.path = path or DEFAULT_PREFERENCES_PATH

    def load(self) -> Preferences:
        """設定を読み込む（ファイルが無い・壊れている場合はデフォルト）"""
        if not self.path.exists():
            return Preferences()
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load preferences: {self.path} - {e}")
            return Preferences()
        if not isinstance(data, dict):
            return Preferences()
        return preferences_from_dict(data)

    def save(self, preferences: Preferences) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(asdict(preferences), f, ensure_ascii=False, indent=2)
        logger.debug(f"Preferences saved: {self.path}")
