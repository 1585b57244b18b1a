"""ドメイン固有の例外定義"""


class ClipCreatorError(Exception):
    """基底例外クラス"""

    @property
    def kind(self) -> str:
        """エラー種別名（JobError.kind に入る）"""
        return type(self).__name__


class MetadataError(ClipCreatorError):
    """メタデータ取得エラー（ジョブ内でフォールバックされる）"""

    pass


class MetadataTimeout(MetadataError):
    """メタデータ取得のタイムアウト"""

    pass


class MetadataUnavailable(MetadataError):
    """メタデータ取得失敗（終了コード異常・JSON不正）"""

    pass


class ClipExtractionError(ClipCreatorError):
    """クリップ抽出エラー"""

    pass


class FetchTimeout(ClipExtractionError):
    """音声ダウンロードのタイムアウト"""

    pass


class DownloadFailed(ClipExtractionError):
    """yt-dlp が異常終了"""

    pass


class EmptyDownload(ClipExtractionError):
    """ダウンロード結果が存在しない、または空"""

    pass


class ExtractTimeout(ClipExtractionError):
    """区間切り出しのタイムアウト"""

    pass


class SegmentExtractionFailed(ClipExtractionError):
    """区間切り出し失敗"""

    pass


class FadeTimeout(ClipExtractionError):
    """フェードアウト処理のタイムアウト"""

    pass


class FadeApplicationFailed(ClipExtractionError):
    """フェードアウト処理失敗"""

    pass


class EmptyOutput(ClipExtractionError):
    """最終出力が存在しない、または空"""

    pass


class JobTimeout(ClipCreatorError):
    """ジョブ全体の時間予算を超過"""

    pass


class ArchiveFailed(ClipCreatorError):
    """アーカイブ作成失敗"""

    pass


class ToolNotFound(ClipCreatorError):
    """外部ツール（yt-dlp / ffmpeg）が見つからない"""

    def __init__(self, tool: str):
        self.tool = tool
        super().__init__(
            f"{tool} is not available. Install it or place it in the binaries directory."
        )
