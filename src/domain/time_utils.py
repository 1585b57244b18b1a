"""時間変換ユーティリティ"""

import re

_LEADING_DIGITS = re.compile(r"^\s*(\d+)")
# YouTube の t パラメータ形式（例: 1h2m3s, 1m30s, 90s）
_YOUTUBE_DURATION = re.compile(r"^(?:(\d+)h)?(?:(\d+)m)?(?:(\d+)s)?$")


def parse_to_seconds(text: str | None) -> int:
    """
    時間表記を秒数に変換

    "H:MM:SS" / "MM:SS" / 秒数のみ を受け付ける。
    解釈できない入力は 0 を返す（例外は投げない）。

    Example:
        parse_to_seconds("1:30")    # 90
        parse_to_seconds("1:02:03") # 3723
        parse_to_seconds("45")      # 45
    """
    if not text:
        return 0

    if ":" in text:
        try:
            parts = [int(p) for p in text.strip().split(":")]
        except ValueError:
            return 0
        if len(parts) == 2:
            minutes, seconds = parts
            return minutes * 60 + seconds
        if len(parts) == 3:
            hours, minutes, seconds = parts
            return hours * 3600 + minutes * 60 + seconds
        return 0

    match = _LEADING_DIGITS.match(text)
    return int(match.group(1)) if match else 0


def format_from_seconds(seconds: int) -> str:
    """秒をM:SS形式に変換"""
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes}:{secs:02d}"


def normalize_timestamp(text: str | None) -> str | None:
    """
    入力欄向けにタイムスタンプを整形

    ":" を含む値はそのまま、秒数のみの値は M:SS に変換する。
    """
    if not text:
        return None
    if ":" in text:
        return text
    match = _LEADING_DIGITS.match(text)
    if not match:
        return text
    return format_from_seconds(int(match.group(1)))


def parse_youtube_time_param(value: str | None) -> int | None:
    """
    URLの t / time パラメータを秒数に変換

    "90" / "1:30" / "1m30s" / "1h2m3s" を受け付ける。
    解釈できない場合は None。
    """
    if not value:
        return None
    value = value.strip()

    if ":" in value:
        return parse_to_seconds(value)
    if value.isdigit():
        return int(value)

    match = _YOUTUBE_DURATION.match(value.lower())
    if not match or not any(match.groups()):
        return None
    hours, minutes, seconds = (int(g) if g else 0 for g in match.groups())
    return hours * 3600 + minutes * 60 + seconds
