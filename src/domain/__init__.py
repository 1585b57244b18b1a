# Domain Layer
from src.domain.deadline import Deadline
from src.domain.entities import (
    BatchOutcome,
    ClipKind,
    ClipRequest,
    ClipResult,
    JobError,
    JobRun,
    JobState,
    NormalizedLocator,
    ProgressEvent,
    VideoMetadata,
)
from src.domain.exceptions import (
    ArchiveFailed,
    ClipCreatorError,
    ClipExtractionError,
    DownloadFailed,
    EmptyDownload,
    EmptyOutput,
    ExtractTimeout,
    FadeApplicationFailed,
    FadeTimeout,
    FetchTimeout,
    JobTimeout,
    MetadataError,
    MetadataTimeout,
    MetadataUnavailable,
    SegmentExtractionFailed,
    ToolNotFound,
)

__all__ = [
    "Deadline",
    "ClipRequest",
    "NormalizedLocator",
    "VideoMetadata",
    "ClipKind",
    "ClipResult",
    "JobError",
    "BatchOutcome",
    "ProgressEvent",
    "JobState",
    "JobRun",
    "ClipCreatorError",
    "MetadataError",
    "MetadataTimeout",
    "MetadataUnavailable",
    "ClipExtractionError",
    "FetchTimeout",
    "DownloadFailed",
    "EmptyDownload",
    "ExtractTimeout",
    "SegmentExtractionFailed",
    "FadeTimeout",
    "FadeApplicationFailed",
    "EmptyOutput",
    "JobTimeout",
    "ArchiveFailed",
    "ToolNotFound",
]
