"""外部ツール（yt-dlp / ffmpeg）の解決と存在確認"""

import shutil
import subprocess
from pathlib import Path

from src.application.interfaces.environment import ToolCheckResult
from src.infrastructure.logging_config import get_logger
from src.infrastructure.subprocess_runner import Runner, run_process_group

logger = get_logger(__name__)

# ツールごとのバージョン確認オプション
VERSION_FLAGS = {
    "yt-dlp": "--version",
    "ffmpeg": "-version",
}


def resolve_binary(name: str, binaries_dir: Path | None = None) -> str:
    """
    実行パスを決定する

    同梱ディレクトリに実行ファイルがあればそれを使い、
    無ければ PATH 上のコマンド名をそのまま返す。
    """
    if binaries_dir is not None:
        bundled = binaries_dir / name
        if bundled.is_file():
            logger.info(f"[ToolChecker] 同梱版を使用: {bundled}")
            return str(bundled)
    logger.debug(f"[ToolChecker] システムの {name} を使用")
    return name


class BinaryToolChecker:
    """バージョン表示コマンドを実行して存在を確認する"""

    def __init__(
        self,
        tool_paths: dict[str, str],
        timeout_sec: float = 10,
        runner: Runner = run_process_group,
    ):
        """
        Args:
            tool_paths: ツール名 → 実行パス
            timeout_sec: 確認コマンドのタイムアウト
            runner: subprocess.run 互換の実行関数
        """
        self.tool_paths = tool_paths
        self.timeout_sec = timeout_sec
        self._runner = runner

    def check_tools(self) -> ToolCheckResult:
        missing = {
            name
            for name, path in self.tool_paths.items()
            if not self._is_available(name, path)
        }
        if missing:
            logger.warning(f"[ToolChecker] 見つからないツール: {sorted(missing)}")
        return ToolCheckResult(missing=missing)

    def _is_available(self, name: str, path: str) -> bool:
        if shutil.which(path) is None:
            return False
        try:
            result = self._runner(
                [path, VERSION_FLAGS.get(name, "--version")],
                capture_output=True,
                text=True,
                timeout=self.timeout_sec,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug(f"[ToolChecker] {name} の確認に失敗: {e}")
            return False
        return result.returncode == 0
