"""音声クリップ抽出インターフェース"""

from pathlib import Path
from typing import Protocol

from src.domain.deadline import Deadline


class ClipExtractor(Protocol):
    """音声クリップ抽出のインターフェース"""

    def extract(
        self,
        source_url: str,
        output_path: Path,
        start_sec: int,
        duration_sec: int,
        deadline: Deadline | None = None,
    ) -> Path:
        """
        指定区間を切り出し、フェードアウトを付けて出力

        Args:
            source_url: 正規化済みURL
            output_path: 最終出力パス
            start_sec: 開始位置（秒）
            duration_sec: クリップ長（秒）
            deadline: ジョブ全体の期限

        Returns:
            出力ファイルパス

        Raises:
            ClipExtractionError: 各段階の失敗・タイムアウト
            JobTimeout: ジョブ全体の期限切れ
        """
        ...
