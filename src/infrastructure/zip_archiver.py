"""zip アーカイブ作成"""

import zipfile
from pathlib import Path

from src.domain.exceptions import ArchiveFailed
from src.infrastructure.logging_config import get_logger

logger = get_logger(__name__)


class ZipArchiver:
    """deflate 圧縮（最大レベル）の zip を作成"""

    def __init__(self, compresslevel: int = 9):
        self.compresslevel = compresslevel

    def create(self, file_paths: list[Path], archive_path: Path) -> Path:
        """
        ファイルを zip にまとめる

        エントリ名はファイル名のみ（ディレクトリ階層なし）。
        1ファイルでも欠けていれば失敗とし、途中まで書いた zip は削除する。
        archive_path が既に存在する場合は上書きせずに失敗する。

        Args:
            file_paths: まとめるファイル
            archive_path: 出力する zip のパス

        Returns:
            archive_path

        Raises:
            ArchiveFailed: 作成失敗
        """
        missing = [p for p in file_paths if not p.is_file()]
        if missing:
            raise ArchiveFailed(
                f"Failed to create zip: file not found: {', '.join(p.name for p in missing)}"
            )

        logger.info(f"[ZipArchiver] zip作成開始: {archive_path.name} ({len(file_paths)}件)")
        try:
            zf = zipfile.ZipFile(
                archive_path,
                mode="x",
                compression=zipfile.ZIP_DEFLATED,
                compresslevel=self.compresslevel,
            )
        except OSError as e:
            # 既存ファイルは上書きも削除もしない
            raise ArchiveFailed(f"Failed to create zip: {e}") from e

        try:
            with zf:
                for i, path in enumerate(file_paths, 1):
                    zf.write(path, arcname=path.name)
                    logger.debug(f"[ZipArchiver] 追加: {path.name} ({i}/{len(file_paths)})")
        except (OSError, zipfile.BadZipFile) as e:
            try:
                archive_path.unlink(missing_ok=True)
            except OSError:
                logger.warning(f"[ZipArchiver] 不完全な zip を削除できません: {archive_path}")
            raise ArchiveFailed(f"Failed to create zip: {e}") from e

        logger.info(
            f"[ZipArchiver] zip作成完了: {archive_path.name} ({archive_path.stat().st_size} bytes)"
        )
        return archive_path
