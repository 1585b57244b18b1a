"""ユースケース: バッチの出力ファイルを zip にまとめる"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable

from src.application.interfaces.archiver import Archiver
from src.domain.entities import BatchOutcome, ClipKind, ClipResult, JobError
from src.domain.exceptions import ArchiveFailed
from src.infrastructure.logging_config import get_logger

logger = get_logger(__name__)


class ArchivePolicy(str, Enum):
    """zip にまとめる条件"""

    MULTIPLE = "multiple"  # 2件以上のときだけ
    ALWAYS = "always"      # 1件でもまとめる


@dataclass
class AggregateOutputsConfig:
    """ユースケースの設定"""

    policy: ArchivePolicy = ArchivePolicy.MULTIPLE
    archive_prefix: str = "music_clips"


def archive_filename(prefix: str, now: datetime) -> str:
    """タイムスタンプ付きの zip ファイル名"""
    return f"{prefix}_{now.strftime('%Y-%m-%d_%H-%M-%S')}.zip"


def unique_archive_path(output_dir: Path, filename: str) -> Path:
    """同名の zip が既にあれば _1, _2, ... を付けて重複しないパスにする"""
    path = output_dir / filename
    counter = 1
    while path.exists():
        path = output_dir / f"{Path(filename).stem}_{counter}.zip"
        counter += 1
    return path


def _has_output(result: ClipResult) -> bool:
    return result.file_path.is_file() and result.file_path.stat().st_size > 0


class AggregateOutputsUseCase:
    """複数の音声クリップを1つの zip にまとめ、個別ファイルを削除する"""

    def __init__(
        self,
        archiver: Archiver,
        config: AggregateOutputsConfig | None = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.archiver = archiver
        self.config = config or AggregateOutputsConfig()
        self._now = now

    def should_bundle(self, audio_count: int) -> bool:
        if self.config.policy == ArchivePolicy.ALWAYS:
            return audio_count >= 1
        return audio_count > 1

    def execute(self, outcome: BatchOutcome, output_dir: Path) -> BatchOutcome:
        """
        必要に応じて結果を zip にまとめる

        出力ファイルが消えている結果はエラーに回し、残りだけを対象にする。
        zip 作成に成功した場合のみ個別ファイルを削除し、結果を zip 1件に置き換える。
        失敗した場合はバッチ全体のエラーを追加し、個別ファイルはそのまま残す。

        Args:
            outcome: 全ジョブ終了後の結果
            output_dir: zip の出力先

        Returns:
            まとめた後の BatchOutcome
        """
        results: list[ClipResult] = []
        errors = list(outcome.errors)
        for result in outcome.results:
            if _has_output(result):
                results.append(result)
            else:
                logger.warning(f"[Aggregate] 出力ファイルがありません: {result.file_path}")
                errors.append(
                    JobError(
                        locator="",
                        message=f"Output file is missing or empty: {result.filename}",
                        kind="EmptyOutput",
                    )
                )

        audio_results = [r for r in results if r.kind == ClipKind.AUDIO]
        if not self.should_bundle(len(audio_results)):
            if len(audio_results) == 1:
                logger.info(f"[Aggregate] 1件のみのため zip は作成しません: {audio_results[0].filename}")
            return BatchOutcome(results=results, errors=errors)

        archive_path = unique_archive_path(
            output_dir, archive_filename(self.config.archive_prefix, self._now())
        )

        try:
            self.archiver.create([r.file_path for r in audio_results], archive_path)
        except ArchiveFailed as e:
            logger.error(f"[Aggregate] zip作成失敗: {e}")
            errors.append(JobError(locator="", message=str(e), kind=e.kind))
            return BatchOutcome(results=[r for r in results if _has_output(r)], errors=errors)

        for result in audio_results:
            try:
                result.file_path.unlink(missing_ok=True)
                logger.debug(f"[Aggregate] 個別ファイルを削除: {result.filename}")
            except OSError as e:
                logger.warning(f"[Aggregate] 削除失敗: {result.file_path} - {e}")

        archive = ClipResult(
            kind=ClipKind.ARCHIVE,
            file_path=archive_path,
            filename=archive_path.name,
            title=archive_path.stem,
            duration_sec=sum(r.duration_sec for r in audio_results),
            start_sec=0,
        )
        return BatchOutcome(results=[archive], errors=errors)
