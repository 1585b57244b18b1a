"""yt-dlp メタデータ取得のテスト"""

import pytest

from src.domain.exceptions import MetadataTimeout, MetadataUnavailable
from src.infrastructure.ytdlp_metadata_fetcher import YtdlpMetadataFetcher, parse_metadata
from tests.unit.fakes import FakeToolRunner

URL = "https://www.youtube.com/watch?v=abc123"


class TestYtdlpMetadataFetcher:
    """YtdlpMetadataFetcher のテスト"""

    def test_fetch(self) -> None:
        runner = FakeToolRunner()
        fetcher = YtdlpMetadataFetcher(ytdlp_path="yt-dlp", runner=runner)

        metadata = fetcher.fetch(URL)

        assert metadata.title == "Test Video"
        assert metadata.duration_sec == 212
        assert metadata.uploader == "Test Channel"
        assert not metadata.is_fallback

        cmd, timeout = runner.calls[0]
        assert timeout == 30
        assert cmd[-1] == URL
        for flag in ("--dump-json", "--quiet", "--no-check-certificate"):
            assert flag in cmd
        assert cmd[cmd.index("--retries") + 1] == "1"
        assert cmd[cmd.index("--socket-timeout") + 1] == "30"

    def test_timeout(self) -> None:
        fetcher = YtdlpMetadataFetcher(runner=FakeToolRunner({"metadata": "timeout"}))
        with pytest.raises(MetadataTimeout):
            fetcher.fetch(URL)

    def test_non_zero_exit(self) -> None:
        fetcher = YtdlpMetadataFetcher(runner=FakeToolRunner({"metadata": "fail"}))
        with pytest.raises(MetadataUnavailable, match="exit code: 1"):
            fetcher.fetch(URL)

    def test_missing_binary(self) -> None:
        """yt-dlp が無い場合も MetadataUnavailable（フォールバック対象）"""
        fetcher = YtdlpMetadataFetcher(ytdlp_path="definitely-not-installed-yt-dlp")
        with pytest.raises(MetadataUnavailable):
            fetcher.fetch(URL)


class TestParseMetadata:
    """JSON 解析のテスト"""

    def test_float_duration(self) -> None:
        metadata = parse_metadata('{"title": "A", "duration": 61.7, "uploader": "B"}')
        assert metadata.duration_sec == 61

    def test_missing_optional_fields(self) -> None:
        """duration / uploader が無くても取得できる"""
        metadata = parse_metadata('{"title": "Live stream", "duration": null}')
        assert metadata.duration_sec == 0
        assert metadata.uploader == "Unknown"

    @pytest.mark.parametrize("output", ["", "not json", "[]", '{"duration": 10}'])
    def test_invalid(self, output: str) -> None:
        with pytest.raises(MetadataUnavailable):
            parse_metadata(output)
