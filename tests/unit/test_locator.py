"""URL正規化のテスト"""

import pytest

from src.domain.entities import ClipRequest, NormalizedLocator
from src.domain.locator import normalize, resolve_start_seconds


class TestNormalize:
    """normalize のテスト"""

    def test_short_link_expanded(self) -> None:
        """youtu.be を watch?v= に展開"""
        result = normalize("https://youtu.be/dQw4w9WgXcQ")
        assert result.canonical_url == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
        assert result.extracted_start_sec is None

    def test_short_link_keeps_time(self) -> None:
        """短縮URLのクエリ（t）は維持し、si は除去"""
        result = normalize("https://youtu.be/dQw4w9WgXcQ?si=abcdef&t=42")
        assert result.canonical_url == "https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42"
        assert result.extracted_start_sec == 42

    def test_short_link_without_scheme(self) -> None:
        """スキーム無しの短縮URL"""
        result = normalize("youtu.be/dQw4w9WgXcQ")
        assert result.canonical_url == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

    def test_playlist_params_removed(self) -> None:
        """プレイリスト関連のパラメータを除去"""
        result = normalize(
            "https://www.youtube.com/watch?v=abc123&list=PL999&index=4"
            "&start_radio=1&feature=share&ab_channel=Foo&pp=xyz"
        )
        assert result.canonical_url == "https://www.youtube.com/watch?v=abc123"

    def test_unknown_params_dropped(self) -> None:
        """v / t / time 以外は再構築時に落ちる"""
        result = normalize("https://www.youtube.com/watch?utm_source=x&v=abc123&t=10")
        assert result.canonical_url == "https://www.youtube.com/watch?v=abc123&t=10"

    def test_time_param(self) -> None:
        """time パラメータも開始時刻として扱う"""
        result = normalize("https://www.youtube.com/watch?v=abc123&time=1:30")
        assert result.canonical_url == "https://www.youtube.com/watch?v=abc123&time=1:30"
        assert result.extracted_start_sec == 90

    def test_youtube_duration_format(self) -> None:
        """1m30s 形式"""
        result = normalize("https://www.youtube.com/watch?v=abc123&t=1m30s")
        assert result.extracted_start_sec == 90

    @pytest.mark.parametrize("raw", ["not a url", "", "watch?v=abc", "http://[::1"])
    def test_invalid_url_returned_unchanged(self, raw: str) -> None:
        """URLとして解釈できなければそのまま返す"""
        assert normalize(raw) == NormalizedLocator(canonical_url=raw)

    @pytest.mark.parametrize(
        "raw",
        [
            "https://youtu.be/dQw4w9WgXcQ?si=abc&t=42",
            "https://www.youtube.com/watch?v=abc123&list=PL1&t=1:02:03",
            "https://www.youtube.com/watch?feature=share&v=abc123",
            "https://example.com/video/1?foo=bar",
        ],
    )
    def test_idempotent(self, raw: str) -> None:
        """正規化済みURLを再度正規化しても変わらない"""
        once = normalize(raw)
        twice = normalize(once.canonical_url)
        assert twice.canonical_url == once.canonical_url
        assert twice.extracted_start_sec == once.extracted_start_sec


class TestResolveStartSeconds:
    """開始時刻の決定"""

    def test_extracted_wins(self) -> None:
        """URL内の開始時刻を優先"""
        request = ClipRequest(locator="x", start_hint="0:10", duration_sec=15)
        locator = NormalizedLocator(canonical_url="x", extracted_start_sec=42)
        assert resolve_start_seconds(request, locator) == 42

    def test_falls_back_to_hint(self) -> None:
        """URLに無ければ入力欄の値"""
        request = ClipRequest(locator="x", start_hint="1:30", duration_sec=15)
        locator = NormalizedLocator(canonical_url="x")
        assert resolve_start_seconds(request, locator) == 90

    def test_no_hint(self) -> None:
        request = ClipRequest(locator="x", duration_sec=15)
        assert resolve_start_seconds(request, NormalizedLocator(canonical_url="x")) == 0
