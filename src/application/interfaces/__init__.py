# Application Interfaces (Protocols)
from src.application.interfaces.archiver import Archiver
from src.application.interfaces.clip_extractor import ClipExtractor
from src.application.interfaces.environment import (
    FolderSelector,
    PreferenceStore,
    Preferences,
    ToolChecker,
    ToolCheckResult,
)
from src.application.interfaces.metadata_fetcher import MetadataFetcher

__all__ = [
    "MetadataFetcher",
    "ClipExtractor",
    "Archiver",
    "FolderSelector",
    "ToolChecker",
    "ToolCheckResult",
    "PreferenceStore",
    "Preferences",
]
