"""外部コラボレーター（UI側）とのインターフェース"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol


@dataclass
class ToolCheckResult:
    """外部ツールの存在確認結果"""

    missing: set[str] = field(default_factory=set)

    @property
    def has_all(self) -> bool:
        return not self.missing


@dataclass
class Preferences:
    """ユーザー設定"""

    default_duration: int = 15
    download_path: str = ""   # 既定の保存先
    last_used_path: str = ""  # 前回実行時の保存先

    def initial_folder(self, fallback: str) -> str:
        """フォルダ入力の初期値: 前回の保存先 → 既定の保存先 → fallback"""
        return self.last_used_path or self.download_path or fallback

    def remember_folder(self, folder: str, default_duration: int) -> "Preferences":
        """実行時の保存先を記録した設定。既定の保存先は未設定の場合のみ埋める"""
        return Preferences(
            default_duration=default_duration,
            download_path=self.download_path or folder,
            last_used_path=folder,
        )


class FolderSelector(Protocol):
    """出力フォルダ選択"""

    def select_folder(self) -> Path | None:
        """選択されたフォルダ。キャンセル時はNone"""
        ...


class ToolChecker(Protocol):
    """外部ツールの存在確認"""

    def check_tools(self) -> ToolCheckResult:
        ...


class PreferenceStore(Protocol):
    """ユーザー設定の永続化"""

    def load(self) -> Preferences:
        ...

    def save(self, preferences: Preferences) -> None:
        ...
