"""yt-dlp + ffmpeg による音声クリップ抽出"""

import subprocess
from pathlib import Path

from src.domain.deadline import Deadline
from src.domain.exceptions import (
    ClipCreatorError,
    DownloadFailed,
    EmptyDownload,
    EmptyOutput,
    ExtractTimeout,
    FadeApplicationFailed,
    FadeTimeout,
    FetchTimeout,
    SegmentExtractionFailed,
)
from src.infrastructure.logging_config import get_logger
from src.infrastructure.subprocess_runner import Runner, run_process_group, run_with_timeout

logger = get_logger(__name__)


def temp_paths_for(output_path: Path) -> tuple[Path, Path]:
    """
    最終出力パスから一時ファイルのパスを決める

    Returns:
        (ダウンロードした全長音声, 切り出した区間)
    """
    stem, suffix = output_path.stem, output_path.suffix
    return (
        output_path.with_name(f"{stem}_temp{suffix}"),
        output_path.with_name(f"{stem}_segment_temp{suffix}"),
    )


def is_non_empty_file(path: Path) -> bool:
    return path.is_file() and path.stat().st_size > 0


def _remove_quietly(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"[ClipExtractor] 一時ファイルを削除できません: {path} - {e}")


def _tail(text: str | None, limit: int = 300) -> str:
    return (text or "").strip()[-limit:]


class YtdlpClipExtractor:
    """yt-dlp + ffmpeg による実装"""

    def __init__(
        self,
        ffmpeg_path: str = "ffmpeg",
        ytdlp_path: str = "yt-dlp",
        fetch_timeout_sec: float = 120,
        extract_timeout_sec: float = 120,
        fade_timeout_sec: float = 120,
        audio_bitrate: str = "128k",
        fade_sec: float = 1.0,
        socket_timeout_sec: int = 30,
        runner: Runner = run_process_group,
    ):
        """
        Args:
            ffmpeg_path: ffmpegの実行パス
            ytdlp_path: yt-dlpの実行パス
            fetch_timeout_sec: ダウンロードのタイムアウト
            extract_timeout_sec: 区間切り出しのタイムアウト
            fade_timeout_sec: フェード処理のタイムアウト
            audio_bitrate: 最終出力のビットレート
            fade_sec: フェードアウトの長さ
            socket_timeout_sec: yt-dlp に渡すソケットタイムアウト
            runner: subprocess.run 互換の実行関数
        """
        self.ffmpeg_path = ffmpeg_path
        self.ytdlp_path = ytdlp_path
        self.fetch_timeout_sec = fetch_timeout_sec
        self.extract_timeout_sec = extract_timeout_sec
        self.fade_timeout_sec = fade_timeout_sec
        self.audio_bitrate = audio_bitrate
        self.fade_sec = fade_sec
        self.socket_timeout_sec = socket_timeout_sec
        self._runner = runner

    def extract(
        self,
        source_url: str,
        output_path: Path,
        start_sec: int,
        duration_sec: int,
        deadline: Deadline | None = None,
    ) -> Path:
        """
        音声をダウンロードし、区間切り出し → フェードアウトの2段階で出力

        処理フロー:
        1. yt-dlp で全長の音声を一時ファイルにダウンロード
        2. ffmpeg -acodec copy で区間だけを切り出し（再エンコードなし）
        3. ffmpeg で末尾1秒のフェードアウトを付けて再エンコード

        一時ファイルは成功・失敗・タイムアウトのいずれでも必ず削除する。

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
            ToolNotFound: yt-dlp / ffmpeg が見つからない
        """
        temp_path, segment_path = temp_paths_for(output_path)
        logger.info(
            f"[ClipExtractor] 開始: {source_url} -> {output_path.name} "
            f"(start={start_sec}s, duration={duration_sec}s)"
        )

        succeeded = False
        try:
            self._download(source_url, temp_path, deadline)
            self._cut_segment(temp_path, segment_path, start_sec, duration_sec, deadline)
            _remove_quietly(temp_path)
            self._apply_fade(segment_path, output_path, duration_sec, deadline)

            if not is_non_empty_file(output_path):
                raise EmptyOutput(f"Final processed file is missing or empty: {output_path.name}")

            succeeded = True
            logger.info(f"[ClipExtractor] 完了: {output_path} ({output_path.stat().st_size} bytes)")
            return output_path
        finally:
            for path in (temp_path, segment_path, temp_path.with_name(f"{temp_path.name}.part")):
                _remove_quietly(path)
            if not succeeded:
                _remove_quietly(output_path)

    def _run(
        self,
        cmd: list[str],
        timeout_sec: float,
        timeout_error: type[ClipCreatorError],
        deadline: Deadline | None,
    ) -> subprocess.CompletedProcess:
        return run_with_timeout(
            cmd,
            timeout_sec=timeout_sec,
            timeout_error=timeout_error,
            deadline=deadline,
            runner=self._runner,
        )

    def _download(self, source_url: str, temp_path: Path, deadline: Deadline | None) -> None:
        cmd = [
            self.ytdlp_path,
            "--extract-audio",
            "--audio-format", "mp3",
            "--output", str(temp_path),
            "--no-warnings",
            "--no-check-certificate",
            "--socket-timeout", str(self.socket_timeout_sec),
            "--retries", "1",
            "--quiet",
            source_url,
        ]
        result = self._run(cmd, self.fetch_timeout_sec, FetchTimeout, deadline)
        if result.returncode != 0:
            logger.error(f"[ClipExtractor] yt-dlp failed: {_tail(result.stderr)}")
            raise DownloadFailed(f"Failed to download audio (exit code: {result.returncode})")

        if not is_non_empty_file(temp_path):
            raise EmptyDownload(f"Downloaded file is missing or empty: {temp_path.name}")
        logger.debug(f"[ClipExtractor] ダウンロード完了: {temp_path.stat().st_size} bytes")

    def _cut_segment(
        self,
        temp_path: Path,
        segment_path: Path,
        start_sec: int,
        duration_sec: int,
        deadline: Deadline | None,
    ) -> None:
        cmd = [
            self.ffmpeg_path,
            "-i", str(temp_path),
            "-ss", str(start_sec),
            "-t", str(duration_sec),
            "-acodec", "copy",  # 再エンコードなし（高速）
            "-y",
            str(segment_path),
        ]
        result = self._run(cmd, self.extract_timeout_sec, ExtractTimeout, deadline)
        if result.returncode != 0:
            logger.error(f"[ClipExtractor] segment failed: {_tail(result.stderr)}")
            raise SegmentExtractionFailed(
                f"Failed to extract segment (exit code: {result.returncode})"
            )

    def _apply_fade(
        self,
        segment_path: Path,
        output_path: Path,
        duration_sec: int,
        deadline: Deadline | None,
    ) -> None:
        cmd = [
            self.ffmpeg_path,
            "-i", str(segment_path),
            "-af", self.fade_filter(duration_sec),
            "-acodec", "libmp3lame",
            "-b:a", self.audio_bitrate,
            "-y",
            str(output_path),
        ]
        result = self._run(cmd, self.fade_timeout_sec, FadeTimeout, deadline)
        if result.returncode != 0:
            logger.error(f"[ClipExtractor] fade failed: {_tail(result.stderr)}")
            raise FadeApplicationFailed(
                f"Failed to apply fade effect (exit code: {result.returncode})"
            )

    def fade_filter(self, duration_sec: int) -> str:
        """クリップ末尾で終わるフェードアウトのフィルタ式"""
        fade = min(self.fade_sec, duration_sec)
        start = max(duration_sec - fade, 0)
        return f"afade=t=out:st={start:g}:d={fade:g}"
