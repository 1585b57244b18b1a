"""Streamlit アプリケーションエントリーポイント"""

import sys
from pathlib import Path

# プロジェクトルートをパスに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# .envファイルを最初に読み込む
from dotenv import load_dotenv
load_dotenv(project_root / ".env")

import streamlit as st

from config.settings import get_settings
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
from src.domain.entities import BatchOutcome, ClipKind, ClipRequest, ProgressEvent
from src.domain.locator import normalize
from src.domain.time_utils import format_from_seconds, normalize_timestamp
from src.infrastructure.logging_config import get_logger, parse_log_level, setup_logging
from src.infrastructure.preference_store import JsonPreferenceStore
from src.infrastructure.tool_checker import BinaryToolChecker, resolve_binary
from src.infrastructure.ytdlp_clip_extractor import YtdlpClipExtractor
from src.infrastructure.ytdlp_metadata_fetcher import YtdlpMetadataFetcher
from src.infrastructure.zip_archiver import ZipArchiver

# ロギング初期化
setup_logging(level=parse_log_level(get_settings().LOG_LEVEL))

logger = get_logger(__name__)


def tool_paths() -> dict[str, str]:
    """同梱版 → PATH の順で yt-dlp / ffmpeg を解決"""
    settings = get_settings()
    binaries_dir = settings.binaries_dir
    return {
        "yt-dlp": resolve_binary(settings.YTDLP_PATH, binaries_dir),
        "ffmpeg": resolve_binary(settings.FFMPEG_PATH, binaries_dir),
    }


def init_usecase() -> RunBatchUseCase:
    """DIでユースケースを組み立て"""
    settings = get_settings()
    paths = tool_paths()

    return RunBatchUseCase(
        job_usecase=ProcessClipJobUseCase(
            metadata_fetcher=YtdlpMetadataFetcher(
                ytdlp_path=paths["yt-dlp"],
                timeout_sec=settings.METADATA_TIMEOUT,
                socket_timeout_sec=settings.SOCKET_TIMEOUT,
            ),
            clip_extractor=YtdlpClipExtractor(
                ffmpeg_path=paths["ffmpeg"],
                ytdlp_path=paths["yt-dlp"],
                fetch_timeout_sec=settings.FETCH_TIMEOUT,
                extract_timeout_sec=settings.EXTRACT_TIMEOUT,
                fade_timeout_sec=settings.FADE_TIMEOUT,
                audio_bitrate=settings.AUDIO_BITRATE,
                fade_sec=settings.FADE_SEC,
                socket_timeout_sec=settings.SOCKET_TIMEOUT,
            ),
            config=ProcessClipJobConfig(job_timeout_sec=settings.JOB_TIMEOUT),
        ),
        aggregator=AggregateOutputsUseCase(
            archiver=ZipArchiver(),
            config=AggregateOutputsConfig(
                policy=ArchivePolicy(settings.ARCHIVE_POLICY),
                archive_prefix=settings.ARCHIVE_PREFIX,
            ),
        ),
        config=RunBatchConfig(cooldown_sec=settings.COOLDOWN_SEC),
    )


class TextInputFolderSelector:
    """テキスト入力で出力フォルダを指定する（ブラウザからはダイアログを開けないため）"""

    def __init__(self, default: str):
        self.default = default

    def select_folder(self) -> Path | None:
        value = st.text_input("📁 保存先フォルダ", value=self.default)
        if not value.strip():
            return None
        return Path(value.strip()).expanduser()


def build_requests(rows: list[dict], default_duration: int) -> list[ClipRequest]:
    """入力表の行から ClipRequest を作る（URLが空の行は無視）"""
    requests = []
    for row in rows:
        url = (row.get("url") or "").strip()
        if not url:
            continue
        start = (row.get("start") or "").strip()
        if not start:
            extracted = normalize(url).extracted_start_sec
            start = format_from_seconds(extracted) if extracted is not None else ""
        duration = row.get("duration") or default_duration
        requests.append(
            ClipRequest(
                locator=url,
                start_hint=normalize_timestamp(start) or "",
                duration_sec=max(1, int(duration)),
            )
        )
    return requests


def render_outcome(outcome: BatchOutcome) -> None:
    """結果とエラーを表示"""
    if outcome.results:
        st.success(f"✅ {outcome.succeeded}件のファイルを作成しました")
    for result in outcome.results:
        icon = "📦" if result.kind == ClipKind.ARCHIVE else "🎵"
        with st.container(border=True):
            st.markdown(f"**{icon} {result.filename}**")
            if result.kind == ClipKind.AUDIO:
                st.caption(
                    f"{result.duration_sec}s clip from {format_from_seconds(result.start_sec)}"
                )
            st.code(str(result.file_path), language=None)
            if result.file_path.exists():
                st.download_button(
                    "⬇️ ダウンロード",
                    data=result.file_path.read_bytes(),
                    file_name=result.filename,
                    key=f"dl_{result.filename}",
                )

    if outcome.has_errors:
        st.error(f"❌ {len(outcome.errors)}件のエラー")
        for error in outcome.errors:
            label = error.locator or "zip"
            st.markdown(f"- `{label}`: {error.message} ({error.kind})")


def run_batch(requests: list[ClipRequest], output_dir: Path) -> None:
    """バッチを実行"""
    logger.info("=" * 70)
    logger.info(f"[APP] バッチ実行リクエスト: {len(requests)}件 -> {output_dir}")

    progress_bar = st.progress(0.0)
    status_main = st.empty()
    status_detail = st.empty()

    def progress_callback(event: ProgressEvent) -> None:
        progress_bar.progress((event.current - 1) / max(event.total, 1))
        status_main.markdown(f"### ⏳ {event.status}")
        status_detail.text(event.locator)

    try:
        outcome = init_usecase().execute(requests, output_dir, progress_callback)
    except OSError as e:
        logger.error(f"[APP] 出力先を準備できません: {e}")
        st.error(f"出力先を準備できません: {e}")
        return

    progress_bar.progress(1.0)
    status_main.markdown("### ✅ 完了")
    status_detail.empty()
    render_outcome(outcome)


def main() -> None:
    """Streamlitアプリケーションのメイン関数"""
    st.set_page_config(
        page_title="Music Clip Creator",
        page_icon="🎵",
        layout="wide",
    )

    settings = get_settings()
    store = JsonPreferenceStore(Path(settings.PREFERENCES_PATH))
    preferences = store.load()

    st.title("🎵 Music Clip Creator")
    st.markdown("YouTube動画から音声クリップを切り出します")

    # 依存ツールの確認
    check = BinaryToolChecker(tool_paths()).check_tools()
    if not check.has_all:
        st.error(f"必要なツールが見つかりません: {', '.join(sorted(check.missing))}")

    with st.sidebar:
        st.header("⚙️ 設定")
        default_duration = st.number_input(
            "デフォルトのクリップ長（秒）",
            min_value=1,
            max_value=600,
            value=preferences.default_duration or settings.DEFAULT_DURATION_SEC,
        )
        folder = TextInputFolderSelector(
            preferences.initial_folder(settings.DOWNLOAD_DIR)
        ).select_folder()

    rows = st.data_editor(
        [{"url": "", "start": "", "duration": int(default_duration)}],
        num_rows="dynamic",
        use_container_width=True,
        column_config={
            "url": st.column_config.TextColumn("YouTube URL（タイムスタンプは自動検出）"),
            "start": st.column_config.TextColumn("開始時刻（例: 1:30）"),
            "duration": st.column_config.NumberColumn("長さ（秒）", min_value=1),
        },
    )

    if st.button("🎬 クリップを作成", type="primary", use_container_width=True):
        if folder is None:
            st.warning("保存先フォルダを指定してください")
            return
        requests = build_requests(rows, int(default_duration))
        if not requests:
            st.warning("リンクを1件以上入力してください")
            return

        store.save(preferences.remember_folder(str(folder), int(default_duration)))
        run_batch(requests, folder)


if __name__ == "__main__":
    main()
