"""ドメインエンティティ定義"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


@dataclass(frozen=True)
class ClipRequest:
    """1件分のクリップ抽出リクエスト（呼び出し側から渡される）"""

    locator: str
    start_hint: str = ""
    duration_sec: int = 15

    def __post_init__(self) -> None:
        if self.duration_sec <= 0:
            raise ValueError("duration_sec must be positive")


@dataclass(frozen=True)
class NormalizedLocator:
    """正規化済みURLとURLに埋め込まれていた開始時刻"""

    canonical_url: str
    extracted_start_sec: int | None = None


@dataclass(frozen=True)
class VideoMetadata:
    """動画のメタデータ"""

    title: str
    duration_sec: int
    uploader: str
    is_fallback: bool = False

    @classmethod
    def fallback(cls, order: int) -> "VideoMetadata":
        """
        メタデータ取得失敗時の代替値

        Args:
            order: 入力上の位置（1始まり）
        """
        return cls(
            title=f"Audio_Clip_{order}",
            duration_sec=0,
            uploader="Unknown",
            is_fallback=True,
        )


class ClipKind(str, Enum):
    """出力ファイルの種別"""

    AUDIO = "audio"
    ARCHIVE = "archive"


@dataclass(frozen=True)
class ClipResult:
    """完了したジョブ（またはバンドル後のアーカイブ）の出力"""

    kind: ClipKind
    file_path: Path
    filename: str
    title: str
    duration_sec: int
    start_sec: int


@dataclass(frozen=True)
class JobError:
    """失敗したジョブ1件分のエラー。バッチ全体のエラーは locator が空文字"""

    locator: str
    message: str
    kind: str = ""


@dataclass
class BatchOutcome:
    """バッチ実行の戻り値"""

    results: list[ClipResult] = field(default_factory=list)
    errors: list[JobError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def succeeded(self) -> int:
        """成功したクリップ数（アーカイブの場合は1）"""
        return len(self.results)


@dataclass(frozen=True)
class ProgressEvent:
    """進捗イベント。UI側へ一方向に通知される"""

    current: int
    total: int
    status: str
    locator: str


class JobState(str, Enum):
    """ジョブの状態"""

    PENDING = "Pending"
    NORMALIZING = "Normalizing"
    FETCHING_METADATA = "FetchingMetadata"
    EXTRACTING = "Extracting"
    DONE = "Done"
    FAILED = "Failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.DONE, JobState.FAILED)


@dataclass
class JobRun:
    """1ジョブの実行記録"""

    order: int
    request: ClipRequest
    state: JobState = JobState.PENDING
    history: list[JobState] = field(default_factory=lambda: [JobState.PENDING])
    result: ClipResult | None = None
    error: JobError | None = None

    def transition(self, state: JobState) -> None:
        """状態遷移（終端状態からは遷移できない）"""
        if self.state.is_terminal:
            raise ValueError(f"job already finished: {self.state.value}")
        self.state = state
        self.history.append(state)
