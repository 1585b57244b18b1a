"""動画URLの正規化"""

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from src.domain.entities import ClipRequest, NormalizedLocator
from src.domain.time_utils import parse_to_seconds, parse_youtube_time_param

SHORT_LINK_HOSTS = frozenset({"youtu.be", "www.youtu.be"})
CANONICAL_WATCH_URL = "https://www.youtube.com/watch"

# yt-dlp がハングする原因になるパラメータ
DENIED_PARAMS = frozenset({
    "list",         # プレイリスト
    "index",        # プレイリスト内の位置
    "start_radio",  # ラジオ機能
    "feature",
    "ab_channel",
    "si",           # セッション情報
    "pp",
})

# 再構築時に残すパラメータ（この順序で並べる）
ESSENTIAL_PARAMS = ("v", "t", "time")


def _expand_short_link(url: str) -> str:
    """youtu.be/<id> を watch?v=<id> 形式に変換（クエリは維持）"""
    candidate = url if "://" in url else f"https://{url}"
    try:
        parts = urlsplit(candidate)
    except ValueError:
        return url

    if parts.netloc.lower() not in SHORT_LINK_HOSTS:
        return url

    segments = [s for s in parts.path.split("/") if s]
    if len(segments) != 1:
        return url

    query = f"v={segments[0]}"
    if parts.query:
        query = f"{query}&{parts.query}"
    return f"{CANONICAL_WATCH_URL}?{query}"


def normalize(raw_url: str) -> NormalizedLocator:
    """
    URLを正規化し、埋め込まれた開始時刻を抽出

    処理フロー:
    1. 短縮URL (youtu.be) を watch?v= 形式に展開
    2. t / time パラメータから開始時刻を抽出
    3. 問題のあるパラメータを除去し、v / t / time のみで再構築

    URLとして解釈できない場合は元の文字列をそのまま返す。

    Args:
        raw_url: 入力されたURL

    Returns:
        NormalizedLocator
    """
    url = _expand_short_link(raw_url.strip())

    try:
        parts = urlsplit(url)
    except ValueError:
        return NormalizedLocator(canonical_url=raw_url)
    if not parts.scheme or not parts.netloc:
        return NormalizedLocator(canonical_url=raw_url)

    params: dict[str, str] = {}
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        if key in DENIED_PARAMS:
            continue
        # 同名パラメータは先勝ち
        params.setdefault(key, value)

    start_param = params.get("t") or params.get("time")
    extracted = parse_youtube_time_param(start_param)

    kept = [(key, params[key]) for key in ESSENTIAL_PARAMS if key in params]
    query = urlencode(kept, safe=":")
    canonical = urlunsplit((parts.scheme, parts.netloc, parts.path, query, ""))

    return NormalizedLocator(canonical_url=canonical, extracted_start_sec=extracted)


def resolve_start_seconds(request: ClipRequest, locator: NormalizedLocator) -> int:
    """URL内の開始時刻を優先し、無ければ入力欄の値を使う"""
    if locator.extracted_start_sec is not None:
        return locator.extracted_start_sec
    return parse_to_seconds(request.start_hint)
