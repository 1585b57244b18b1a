"""ユースケース: 1件のリンクから音声クリップを作成"""

import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from src.application.interfaces.clip_extractor import ClipExtractor
from src.application.interfaces.metadata_fetcher import MetadataFetcher
from src.domain.deadline import Deadline
from src.domain.entities import (
    ClipKind,
    ClipRequest,
    ClipResult,
    JobError,
    JobRun,
    JobState,
    ProgressEvent,
    VideoMetadata,
)
from src.domain.exceptions import ClipCreatorError, JobTimeout, MetadataError
from src.domain.locator import normalize, resolve_start_seconds
from src.infrastructure.logging_config import LogContext, get_logger

logger = get_logger(__name__)

ProgressCallback = Callable[[ProgressEvent], None]

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")

STAGE_STATUS = {
    JobState.NORMALIZING: "Normalizing link",
    JobState.FETCHING_METADATA: "Getting video info",
    JobState.EXTRACTING: "Downloading audio",
    JobState.DONE: "Completed",
    JobState.FAILED: "Failed",
}


def sanitize_title(title: str) -> str:
    """英数字と空白以外を除去し、空白の連続を "_" 1つにまとめる"""
    cleaned = _UNSAFE_CHARS.sub("", title).strip()
    return _WHITESPACE.sub("_", cleaned)


def build_filename(order: int, title: str, ext: str = "mp3") -> str:
    """
    出力ファイル名 "<2桁の順番>_<タイトル>.<拡張子>"

    タイトルが全て除去された場合（日本語タイトル等）は Audio_Clip_<順番> を使う。
    """
    safe_title = sanitize_title(title) or f"Audio_Clip_{order}"
    return f"{order:02d}_{safe_title}.{ext}"


@dataclass
class ProcessClipJobConfig:
    """ユースケースの設定"""

    job_timeout_sec: float = 300  # 1件あたりの上限（5分）
    audio_ext: str = "mp3"


class ProcessClipJobUseCase:
    """
    1件分のジョブを実行する状態機械

    Pending → Normalizing → FetchingMetadata → Extracting → Done
    いずれの段階からも Failed に遷移しうる（メタデータ取得失敗を除く）。
    """

    def __init__(
        self,
        metadata_fetcher: MetadataFetcher,
        clip_extractor: ClipExtractor,
        config: ProcessClipJobConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.metadata_fetcher = metadata_fetcher
        self.clip_extractor = clip_extractor
        self.config = config or ProcessClipJobConfig()
        self._clock = clock

    def execute(
        self,
        request: ClipRequest,
        order: int,
        total: int,
        output_dir: Path,
        progress_callback: ProgressCallback | None = None,
    ) -> JobRun:
        """
        ジョブを最後まで実行する（例外は送出せず JobRun に記録する）

        Args:
            request: 入力リクエスト
            order: 入力上の位置（1始まり）
            total: バッチ全体の件数
            output_dir: 出力ディレクトリ
            progress_callback: 進捗イベントの通知先

        Returns:
            JobRun: 終端状態（Done / Failed）の実行記録
        """
        run = JobRun(order=order, request=request)
        ctx = LogContext(order=order, url=request.locator)
        deadline = Deadline(self.config.job_timeout_sec, clock=self._clock)

        def enter(state: JobState) -> None:
            run.transition(state)
            logger.info(f"[Job] {STAGE_STATUS[state]} ({order}/{total}) | {ctx}")
            if progress_callback:
                progress_callback(
                    ProgressEvent(
                        current=order,
                        total=total,
                        status=f"{STAGE_STATUS[state]} ({order}/{total})",
                        locator=request.locator,
                    )
                )

        def check_budget() -> None:
            if deadline.expired():
                raise JobTimeout(
                    f"File processing timeout ({self.config.job_timeout_sec:.0f} seconds)"
                )

        try:
            # Phase 1: URL正規化
            enter(JobState.NORMALIZING)
            locator = normalize(request.locator)
            start_sec = resolve_start_seconds(request, locator)
            logger.debug(
                f"[Job] {locator.canonical_url} start={start_sec}s "
                f"duration={request.duration_sec}s"
            )

            # Phase 2: メタデータ取得（失敗してもフォールバックで続行）
            check_budget()
            enter(JobState.FETCHING_METADATA)
            metadata = self._fetch_metadata(locator.canonical_url, order, deadline)

            # Phase 3: ダウンロード・切り出し・フェード
            check_budget()
            enter(JobState.EXTRACTING)
            filename = build_filename(order, metadata.title, self.config.audio_ext)
            output_path = output_dir / filename
            self.clip_extractor.extract(
                source_url=locator.canonical_url,
                output_path=output_path,
                start_sec=start_sec,
                duration_sec=request.duration_sec,
                deadline=deadline,
            )

        except ClipCreatorError as e:
            logger.error(f"[Job] {e.kind}: {e} | {ctx}")
            run.error = JobError(locator=request.locator, message=str(e), kind=e.kind)
            enter(JobState.FAILED)
            return run

        run.result = ClipResult(
            kind=ClipKind.AUDIO,
            file_path=output_path,
            filename=filename,
            title=metadata.title,
            duration_sec=request.duration_sec,
            start_sec=start_sec,
        )
        enter(JobState.DONE)
        return run

    def _fetch_metadata(
        self,
        canonical_url: str,
        order: int,
        deadline: Deadline,
    ) -> VideoMetadata:
        try:
            return self.metadata_fetcher.fetch(canonical_url, deadline=deadline)
        except MetadataError as e:
            logger.warning(f"[Job] 動画情報の取得に失敗、代替タイトルを使用: {e}")
            return VideoMetadata.fallback(order)
