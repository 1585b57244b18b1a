"""外部ツールのテストダブル"""

import json
import subprocess
from pathlib import Path

from src.domain.entities import VideoMetadata


class FakeClock:
    """手動で進める時計"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeToolRunner:
    """
    subprocess.run の代わりに yt-dlp / ffmpeg の動作を模倣する

    behaviors: 段階名 → "ok" / "fail" / "timeout" / "empty"
    段階名は "metadata" / "download" / "segment" / "fade"
    """

    def __init__(
        self,
        behaviors: dict[str, str] | None = None,
        metadata: dict | None = None,
    ):
        self.behaviors = behaviors or {}
        self.metadata = metadata or {
            "title": "Test Video",
            "duration": 212,
            "uploader": "Test Channel",
        }
        self.calls: list[tuple[list[str], float | None]] = []

    @staticmethod
    def stage_of(cmd: list[str]) -> str:
        if "--dump-json" in cmd:
            return "metadata"
        if "--extract-audio" in cmd:
            return "download"
        if "-af" in cmd:
            return "fade"
        return "segment"

    def stages(self) -> list[str]:
        return [self.stage_of(cmd) for cmd, _ in self.calls]

    def __call__(self, cmd, capture_output=True, text=True, timeout=None):
        self.calls.append((cmd, timeout))
        stage = self.stage_of(cmd)
        behavior = self.behaviors.get(stage, "ok")

        if stage == "metadata":
            if behavior == "timeout":
                raise subprocess.TimeoutExpired(cmd, timeout)
            if behavior == "fail":
                return subprocess.CompletedProcess(cmd, 1, "", "ERROR: Video unavailable")
            return subprocess.CompletedProcess(cmd, 0, json.dumps(self.metadata), "")

        output = Path(cmd[cmd.index("--output") + 1]) if stage == "download" else Path(cmd[-1])
        if behavior == "timeout":
            # 途中まで書き込まれた状態を再現
            output.write_bytes(b"partial")
            raise subprocess.TimeoutExpired(cmd, timeout)
        if behavior == "fail":
            return subprocess.CompletedProcess(cmd, 1, "", "conversion failed")
        output.write_bytes(b"" if behavior == "empty" else b"ID3 fake mp3 data")
        return subprocess.CompletedProcess(cmd, 0, "", "")


class StubMetadataFetcher:
    """固定のメタデータを返す（error 指定時は送出）"""

    def __init__(self, metadata: VideoMetadata | None = None, error: Exception | None = None):
        self.metadata = metadata or VideoMetadata(
            title="Test Video", duration_sec=212, uploader="Test Channel"
        )
        self.error = error
        self.urls: list[str] = []

    def fetch(self, canonical_url, deadline=None):
        self.urls.append(canonical_url)
        if self.error is not None:
            raise self.error
        return self.metadata


class StubClipExtractor:
    """出力ファイルを書くだけの抽出器。failing_urls に含まれるURLでは error を送出"""

    def __init__(self, error: Exception | None = None, failing_urls: tuple[str, ...] = ()):
        self.error = error
        self.failing_urls = failing_urls
        self.calls: list[dict] = []

    def extract(self, source_url, output_path, start_sec, duration_sec, deadline=None):
        self.calls.append(
            {
                "source_url": source_url,
                "output_path": output_path,
                "start_sec": start_sec,
                "duration_sec": duration_sec,
            }
        )
        if self.error is not None and (not self.failing_urls or source_url in self.failing_urls):
            raise self.error
        output_path.write_bytes(b"ID3 fake mp3 data")
        return output_path
