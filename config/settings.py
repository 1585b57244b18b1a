"""設定管理"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """アプリケーション設定"""

    # Paths
    # 同梱バイナリのディレクトリ（存在すれば PATH より優先）
    BINARIES_DIR: str = "binaries"
    FFMPEG_PATH: str = "ffmpeg"
    YTDLP_PATH: str = "yt-dlp"
    DOWNLOAD_DIR: str = "outputs/clips"
    PREFERENCES_PATH: str = "outputs/preferences.json"

    # Timeouts (seconds)
    METADATA_TIMEOUT: int = 30
    FETCH_TIMEOUT: int = 120
    EXTRACT_TIMEOUT: int = 120
    FADE_TIMEOUT: int = 120
    JOB_TIMEOUT: int = 300  # 1件あたり5分
    SOCKET_TIMEOUT: int = 30

    # Processing
    DEFAULT_DURATION_SEC: int = 15
    COOLDOWN_SEC: float = 1.0
    AUDIO_BITRATE: str = "128k"
    FADE_SEC: float = 1.0

    # Archive
    # "multiple": 2件以上のときだけ zip / "always": 常に zip
    ARCHIVE_POLICY: Literal["multiple", "always"] = "multiple"
    ARCHIVE_PREFIX: str = "music_clips"

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def binaries_dir(self) -> Path | None:
        path = Path(self.BINARIES_DIR)
        return path if path.is_dir() else None

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


@lru_cache
def get_settings() -> Settings:
    """シングルトンで設定を取得"""
    return Settings()
