"""メタデータ取得インターフェース"""

from typing import Protocol

from src.domain.deadline import Deadline
from src.domain.entities import VideoMetadata


class MetadataFetcher(Protocol):
    """動画メタデータ取得のインターフェース"""

    def fetch(
        self,
        canonical_url: str,
        deadline: Deadline | None = None,
    ) -> VideoMetadata:
        """
        動画のタイトル・長さ・投稿者を取得

        Args:
            canonical_url: 正規化済みURL
            deadline: ジョブ全体の期限（個別タイムアウトより短ければ優先）

        Returns:
            VideoMetadata

        Raises:
            MetadataTimeout: タイムアウト
            MetadataUnavailable: 取得・解析失敗
        """
        ...
