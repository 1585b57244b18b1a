"""外部ツール実行（タイムアウト付き）"""

import os
import signal
import subprocess
from typing import Callable, Sequence

from src.domain.deadline import Deadline
from src.domain.exceptions import ClipCreatorError, JobTimeout, ToolNotFound
from src.infrastructure.logging_config import get_logger

logger = get_logger(__name__)

# subprocess.run と同じシグネチャ（テストでは差し替える）
Runner = Callable[..., subprocess.CompletedProcess]


def _kill_process_group(proc: subprocess.Popen) -> None:
    """プロセスグループごと SIGKILL する（yt-dlp が起動した ffmpeg も含む）"""
    if hasattr(os, "killpg"):
        try:
            os.killpg(proc.pid, signal.SIGKILL)
            return
        except ProcessLookupError:
            pass
    proc.kill()


def run_process_group(
    cmd: Sequence[str],
    capture_output: bool = False,
    text: bool = False,
    timeout: float | None = None,
) -> subprocess.CompletedProcess:
    """
    新しいセッションでコマンドを実行する subprocess.run 互換の関数

    タイムアウト時は子プロセスだけでなく、その子孫も含むプロセスグループ全体を
    kill し、終了を待ってから TimeoutExpired を送出する。
    """
    pipe = subprocess.PIPE if capture_output else None
    with subprocess.Popen(
        list(cmd),
        stdout=pipe,
        stderr=pipe,
        text=text,
        start_new_session=True,
    ) as proc:
        try:
            stdout, stderr = proc.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            _kill_process_group(proc)
            proc.communicate()
            raise
    return subprocess.CompletedProcess(proc.args, proc.returncode, stdout, stderr)


def run_with_timeout(
    cmd: Sequence[str],
    timeout_sec: float,
    timeout_error: type[ClipCreatorError],
    deadline: Deadline | None = None,
    runner: Runner = run_process_group,
) -> subprocess.CompletedProcess:
    """
    プロセス終了とタイムアウトを競争させて実行

    既定の runner はタイムアウト時にプロセスグループ全体を kill して回収してから
    TimeoutExpired を送出するため、プロセスが取り残されることはない。

    Args:
        cmd: 実行コマンド
        timeout_sec: この段階のタイムアウト（秒）
        timeout_error: タイムアウト時に送出する例外クラス
        deadline: ジョブ全体の期限。残り時間の方が短ければそちらで打ち切る
        runner: subprocess.run 互換の実行関数（既定は run_process_group）

    Returns:
        CompletedProcess（終了コードは呼び出し側で判定する）

    Raises:
        timeout_error: 段階のタイムアウト
        JobTimeout: ジョブ全体の期限切れ
        ToolNotFound: 実行ファイルが見つからない
    """
    effective_timeout = timeout_sec
    bounded_by_deadline = False
    if deadline is not None:
        effective_timeout = deadline.cap(timeout_sec)
        bounded_by_deadline = effective_timeout < timeout_sec
        if effective_timeout <= 0:
            raise JobTimeout(
                f"Job time budget ({deadline.budget_sec:.0f}s) exhausted before {cmd[0]}"
            )

    logger.debug(f"[Runner] {' '.join(cmd)} (timeout={effective_timeout:.1f}s)")

    try:
        return runner(
            list(cmd),
            capture_output=True,
            text=True,
            timeout=effective_timeout,
        )
    except subprocess.TimeoutExpired as e:
        logger.error(f"[Runner] Timeout - process killed: {cmd[0]}")
        if bounded_by_deadline:
            raise JobTimeout(
                f"Job time budget ({deadline.budget_sec:.0f}s) exceeded during {cmd[0]}"
            ) from e
        raise timeout_error(
            f"{cmd[0]} timeout ({timeout_sec:.0f} seconds)"
        ) from e
    except (FileNotFoundError, PermissionError) as e:
        raise ToolNotFound(cmd[0]) from e
