# Use Cases
from src.application.usecases.aggregate_outputs import (
    AggregateOutputsConfig,
    AggregateOutputsUseCase,
    ArchivePolicy,
)
from src.application.usecases.process_clip_job import (
    ProcessClipJobConfig,
    ProcessClipJobUseCase,
)
from src.application.usecases.run_batch import RunBatchConfig, RunBatchUseCase

__all__ = [
    "RunBatchUseCase",
    "RunBatchConfig",
    "ProcessClipJobUseCase",
    "ProcessClipJobConfig",
    "AggregateOutputsUseCase",
    "AggregateOutputsConfig",
    "ArchivePolicy",
]
