# Infrastructure Layer
from src.infrastructure.preference_store import JsonPreferenceStore
from src.infrastructure.tool_checker import BinaryToolChecker, resolve_binary
from src.infrastructure.ytdlp_clip_extractor import YtdlpClipExtractor
from src.infrastructure.ytdlp_metadata_fetcher import YtdlpMetadataFetcher
from src.infrastructure.zip_archiver import ZipArchiver

__all__ = [
    "YtdlpMetadataFetcher",
    "YtdlpClipExtractor",
    "ZipArchiver",
    "BinaryToolChecker",
    "JsonPreferenceStore",
    "resolve_binary",
]
