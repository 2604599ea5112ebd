"""
作業時間計測タイマー

1秒ごとのティックで経過秒数を加算するだけの単純なタイマー。
状態は running / stopped の2つのみで、値はワークアイテムの
duration_minutes に確定されるまで永続化されない。
"""

import logging
import math
import threading
from typing import Optional


class WorkTimer:
    """経過時間を積算するストップウォッチ"""

    def __init__(self, tick_seconds: float = 1.0):
        """
        初期化

        Args:
            tick_seconds: ティック間隔（秒）
        """
        self.tick_seconds = tick_seconds
        self.logger = logging.getLogger(__name__)

        self._elapsed = 0
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def elapsed_seconds(self) -> int:
        with self._lock:
            return self._elapsed

    def start(self) -> None:
        """計測開始（既に動作中なら何もしない）"""
        if self.running:
            self.logger.debug("Timer is already running")
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run_loop, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """計測停止（経過時間は保持）"""
        self._stop_event.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=self.tick_seconds * 2)
        self._thread = None

    def toggle(self) -> bool:
        """開始/停止を切り替え、切り替え後に動作中かどうかを返す"""
        if self.running:
            self.stop()
        else:
            self.start()
        return self.running

    def reset(self) -> None:
        """停止して経過時間を0に戻す"""
        self.stop()
        with self._lock:
            self._elapsed = 0

    def tick(self) -> None:
        with self._lock:
            self._elapsed += 1

    def _run_loop(self) -> None:
        while not self._stop_event.wait(self.tick_seconds):
            self.tick()

    def format_elapsed(self) -> str:
        """M:SS形式"""
        seconds = self.elapsed_seconds
        return f"{seconds // 60}:{seconds % 60:02d}"

    def duration_minutes(self) -> int:
        """分単位に切り上げ（計測していれば最低1分）"""
        seconds = self.elapsed_seconds
        if seconds <= 0:
            return 0
        return max(1, math.ceil(seconds / 60))

    def resolve_duration(self, manual_minutes: int = 0) -> int:
        """タイマーを使っていればその値、そうでなければ手入力の値"""
        if self.elapsed_seconds > 0:
            return self.duration_minutes()
        return max(0, manual_minutes)
