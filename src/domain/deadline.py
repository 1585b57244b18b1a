"""ジョブ全体の時間予算"""

import time
from typing import Callable


class Deadline:
    """
    壁時計ベースの期限

    clock を差し替えることでテスト時に時間を進められる。

    Example:
        deadline = Deadline(300)
        timeout = deadline.cap(120)  # 残り時間が120秒未満ならそちらが優先
    """

    def __init__(
        self,
        budget_sec: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.budget_sec = budget_sec
        self._clock = clock
        self._expires_at = clock() + budget_sec

    def remaining(self) -> float:
        """残り秒数（0未満にはならない）"""
        return max(0.0, self._expires_at - self._clock())

    def expired(self) -> bool:
        return self.remaining() <= 0

    def cap(self, timeout_sec: float) -> float:
        """個別タイムアウトを残り時間で切り詰める"""
        return min(timeout_sec, self.remaining())
