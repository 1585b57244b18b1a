"""yt-dlp によるメタデータ取得"""

import json

from src.domain.deadline import Deadline
from src.domain.entities import VideoMetadata
from src.domain.exceptions import MetadataTimeout, MetadataUnavailable, ToolNotFound
from src.infrastructure.logging_config import get_logger
from src.infrastructure.subprocess_runner import Runner, run_process_group, run_with_timeout

logger = get_logger(__name__)


class YtdlpMetadataFetcher:
    """yt-dlp --dump-json による実装"""

    def __init__(
        self,
        ytdlp_path: str = "yt-dlp",
        timeout_sec: float = 30,
        socket_timeout_sec: int = 30,
        runner: Runner = run_process_group,
    ):
        """
        Args:
            ytdlp_path: yt-dlpの実行パス
            timeout_sec: プロセス全体のタイムアウト
            socket_timeout_sec: yt-dlp に渡すソケットタイムアウト
            runner: subprocess.run 互換の実行関数
        """
        self.ytdlp_path = ytdlp_path
        self.timeout_sec = timeout_sec
        self.socket_timeout_sec = socket_timeout_sec
        self._runner = runner

    def build_command(self, canonical_url: str) -> list[str]:
        return [
            self.ytdlp_path,
            "--dump-json",
            "--no-warnings",
            "--no-check-certificate",
            "--socket-timeout", str(self.socket_timeout_sec),
            "--retries", "1",
            "--quiet",
            canonical_url,
        ]

    def fetch(
        self,
        canonical_url: str,
        deadline: Deadline | None = None,
    ) -> VideoMetadata:
        """
        動画情報を取得

        Raises:
            MetadataTimeout: タイムアウト（プロセスはkill済み）
            MetadataUnavailable: 異常終了・JSON解析失敗
            JobTimeout: ジョブ全体の期限切れ
        """
        logger.info(f"[MetadataFetcher] 動画情報を取得中: {canonical_url}")

        try:
            result = run_with_timeout(
                self.build_command(canonical_url),
                timeout_sec=self.timeout_sec,
                timeout_error=MetadataTimeout,
                deadline=deadline,
                runner=self._runner,
            )
        except ToolNotFound as e:
            raise MetadataUnavailable(str(e)) from e

        if result.returncode != 0:
            logger.warning(
                f"[MetadataFetcher] yt-dlp exit code {result.returncode}: "
                f"{(result.stderr or '').strip()[:200]}"
            )
            raise MetadataUnavailable(
                f"Failed to get video info (exit code: {result.returncode})"
            )

        metadata = parse_metadata(result.stdout)
        logger.info(f"[MetadataFetcher] 取得完了: {metadata.title}")
        return metadata


def parse_metadata(output: str) -> VideoMetadata:
    """
    yt-dlp の JSON 出力を VideoMetadata に変換

    Raises:
        MetadataUnavailable: JSONでない、または title が無い
    """
    try:
        info = json.loads(output)
    except (json.JSONDecodeError, TypeError) as e:
        raise MetadataUnavailable(f"Failed to parse video info: {e}") from e

    if not isinstance(info, dict) or not info.get("title"):
        raise MetadataUnavailable("Video info has no title")

    duration = info.get("duration")
    try:
        duration_sec = int(duration) if duration is not None else 0
    except (TypeError, ValueError):
        duration_sec = 0

    return VideoMetadata(
        title=str(info["title"]),
        duration_sec=duration_sec,
        uploader=str(info.get("uploader") or "Unknown"),
    )
