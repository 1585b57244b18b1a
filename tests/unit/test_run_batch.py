"""バッチ実行のテスト"""

from pathlib import Path

import pytest

from src.application.usecases.aggregate_outputs import AggregateOutputsUseCase
from src.application.usecases.process_clip_job import ProcessClipJobUseCase
from src.application.usecases.run_batch import RunBatchConfig, RunBatchUseCase
from src.domain.entities import BatchOutcome, ClipKind, ClipRequest
from src.domain.exceptions import DownloadFailed
from src.infrastructure.zip_archiver import ZipArchiver
from tests.unit.fakes import StubClipExtractor, StubMetadataFetcher

INVALID_URL = "https://www.youtube.com/watch?v=invalid"


class PassThroughAggregator:
    """まとめずにそのまま返す"""

    def execute(self, outcome: BatchOutcome, output_dir: Path) -> BatchOutcome:
        return outcome


class ExplodingJobUseCase:
    """2件目で想定外の例外を送出する"""

    def __init__(self, inner: ProcessClipJobUseCase):
        self.inner = inner

    def execute(self, request, order, total, output_dir, progress_callback=None):
        if order == 2:
            raise RuntimeError("unexpected")
        return self.inner.execute(request, order, total, output_dir, progress_callback)


def make_requests(invalid_position: int | None = None, count: int = 4) -> list[ClipRequest]:
    requests = [
        ClipRequest(locator=f"https://youtu.be/video{i}", duration_sec=10) for i in range(count)
    ]
    if invalid_position is not None:
        requests[invalid_position] = ClipRequest(locator=INVALID_URL, duration_sec=10)
    return requests


def make_usecase(aggregator=None, sleeps: list | None = None) -> RunBatchUseCase:
    job = ProcessClipJobUseCase(
        StubMetadataFetcher(),
        StubClipExtractor(
            error=DownloadFailed("Failed to download audio (exit code: 1)"),
            failing_urls=(INVALID_URL,),
        ),
    )
    return RunBatchUseCase(
        job_usecase=job,
        aggregator=aggregator or PassThroughAggregator(),
        config=RunBatchConfig(cooldown_sec=1.0),
        sleep=(sleeps.append if sleeps is not None else lambda _: None),
    )


class TestRunBatchUseCase:
    """RunBatchUseCase のテスト"""

    @pytest.mark.parametrize("invalid_position", [0, 1, 2, 3])
    def test_one_invalid_does_not_abort(self, tmp_path: Path, invalid_position: int) -> None:
        """1件の失敗はバッチを止めない（位置に関係なく 成功3件・エラー1件）"""
        outcome = make_usecase().execute(make_requests(invalid_position), tmp_path)

        assert len(outcome.results) == 3
        assert len(outcome.errors) == 1
        assert outcome.errors[0].locator == INVALID_URL
        assert outcome.errors[0].kind == "DownloadFailed"

        # ファイル名の順番は入力位置
        orders = [int(r.filename[:2]) for r in outcome.results]
        assert orders == [i + 1 for i in range(4) if i != invalid_position]
        for result in outcome.results:
            assert result.file_path.stat().st_size > 0

    def test_cooldown_between_jobs(self, tmp_path: Path) -> None:
        """成功・失敗にかかわらずジョブ間で待機（最後の後は待たない）"""
        sleeps: list[float] = []
        make_usecase(sleeps=sleeps).execute(make_requests(1), tmp_path)
        assert sleeps == [1.0, 1.0, 1.0]

    def test_progress_event_per_job(self, tmp_path: Path) -> None:
        events = []
        requests = make_requests(count=2)
        make_usecase().execute(requests, tmp_path, progress_callback=events.append)

        starts = [e for e in events if e.status.startswith("Processing link")]
        assert [(e.current, e.total, e.status, e.locator) for e in starts] == [
            (1, 2, "Processing link 1/2", requests[0].locator),
            (2, 2, "Processing link 2/2", requests[1].locator),
        ]

    def test_unexpected_error_is_isolated(self, tmp_path: Path) -> None:
        """想定外の例外もエラーとして記録し、次へ進む"""
        usecase = make_usecase()
        usecase.job_usecase = ExplodingJobUseCase(usecase.job_usecase)

        outcome = usecase.execute(make_requests(count=3), tmp_path)

        assert len(outcome.results) == 2
        assert [(e.locator, e.kind) for e in outcome.errors] == [
            ("https://youtu.be/video1", "RuntimeError")
        ]

    def test_empty_batch(self, tmp_path: Path) -> None:
        outcome = make_usecase().execute([], tmp_path / "new_dir")
        assert outcome == BatchOutcome()
        assert (tmp_path / "new_dir").is_dir()

    def test_results_bundled_into_archive(self, tmp_path: Path) -> None:
        """複数成功時は zip 1件に置き換わり、個別ファイルは消える"""
        usecase = make_usecase(aggregator=AggregateOutputsUseCase(ZipArchiver()))

        outcome = usecase.execute(make_requests(2), tmp_path)

        assert len(outcome.results) == 1
        assert outcome.results[0].kind == ClipKind.ARCHIVE
        assert len(outcome.errors) == 1
        assert [p.suffix for p in tmp_path.iterdir()] == [".zip"]
