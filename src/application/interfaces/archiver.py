"""アーカイブ作成インターフェース"""

from pathlib import Path
from typing import Protocol


class Archiver(Protocol):
    """複数ファイルを1つにまとめるインターフェース"""

    def create(self, file_paths: list[Path], archive_path: Path) -> Path:
        """
        ファイルをアーカイブにまとめる（エントリ名はファイル名のみ）

        Raises:
            ArchiveFailed: 作成失敗。途中まで書いたアーカイブは削除済み
        """
        ...
