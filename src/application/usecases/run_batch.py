"""メインユースケース: 複数リンクから音声クリップを一括作成"""

import gc
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from src.application.usecases.aggregate_outputs import AggregateOutputsUseCase
from src.application.usecases.process_clip_job import (
    ProcessClipJobUseCase,
    ProgressCallback,
)
from src.domain.entities import (
    BatchOutcome,
    ClipRequest,
    ClipResult,
    JobError,
    ProgressEvent,
)
from src.infrastructure.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class RunBatchConfig:
    """ユースケースの設定"""

    cooldown_sec: float = 1.0  # ジョブ間の待機秒数


class RunBatchUseCase:
    """
    バッチ実行: 入力順に1件ずつジョブを実行し、最後に出力をまとめる

    ジョブは並列実行せず、ジョブ間で待機する。開始したバッチは途中で中断できない。
    """

    def __init__(
        self,
        job_usecase: ProcessClipJobUseCase,
        aggregator: AggregateOutputsUseCase,
        config: RunBatchConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.job_usecase = job_usecase
        self.aggregator = aggregator
        self.config = config or RunBatchConfig()
        self._sleep = sleep

    def execute(
        self,
        requests: Sequence[ClipRequest],
        output_dir: Path,
        progress_callback: ProgressCallback | None = None,
    ) -> BatchOutcome:
        """
        メイン実行フロー

        Args:
            requests: 入力リクエスト（この順に処理する）
            output_dir: 出力ディレクトリ
            progress_callback: 進捗イベントの通知先

        Returns:
            BatchOutcome: 成功結果とエラーの一覧（常に返る）
        """
        total = len(requests)
        output_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"[Batch] {total}件の処理を開始: {output_dir}")

        results: list[ClipResult] = []
        errors: list[JobError] = []

        for order, request in enumerate(requests, 1):
            if progress_callback:
                progress_callback(
                    ProgressEvent(
                        current=order,
                        total=total,
                        status=f"Processing link {order}/{total}",
                        locator=request.locator,
                    )
                )

            try:
                run = self.job_usecase.execute(
                    request=request,
                    order=order,
                    total=total,
                    output_dir=output_dir,
                    progress_callback=progress_callback,
                )
            except Exception as e:
                # 想定外のエラーでも後続のジョブは続行
                logger.exception(f"[Batch] {order}/{total} で想定外のエラー")
                errors.append(
                    JobError(locator=request.locator, message=str(e), kind=type(e).__name__)
                )
            else:
                if run.result is not None:
                    results.append(run.result)
                    logger.info(f"[Batch] 完了 {order}/{total}: {run.result.filename}")
                elif run.error is not None:
                    errors.append(run.error)
                    logger.info(f"[Batch] 失敗 {order}/{total}、次へ進みます")

            if order < total:
                self._cool_down()

        outcome = self.aggregator.execute(BatchOutcome(results=results, errors=errors), output_dir)
        logger.info(
            f"[Batch] 処理完了 results={len(outcome.results)} errors={len(outcome.errors)}"
        )
        return outcome

    def _cool_down(self) -> None:
        gc.collect()
        if self.config.cooldown_sec > 0:
            self._sleep(self.config.cooldown_sec)
