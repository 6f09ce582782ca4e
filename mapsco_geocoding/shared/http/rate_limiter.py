"""レート制限ユーティリティ"""

import time
from typing import Callable, Optional

from ..logging.config import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """
    リクエスト間に最小間隔を設ける

    Maps.co の無料プランは 1リクエスト/秒 のため、バッチ処理で使用する。
    """

    def __init__(
        self,
        min_interval: float = 0.0,
        requests_per_second: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            min_interval: リクエスト間の最小間隔（秒）
            requests_per_second: 秒あたりの最大リクエスト数（設定時はmin_intervalを上書き）
            clock: 現在時刻を返す関数
            sleep: 待機関数
        """
        if requests_per_second:
            min_interval = 1.0 / requests_per_second

        self.min_interval = max(min_interval, 0.0)
        self._clock = clock
        self._sleep = sleep
        self.last_request_time: Optional[float] = None

        logger.debug(f"RateLimiter initialized: min_interval={self.min_interval:.2f}s")

    def wait(self) -> None:
        """前回の呼び出しから min_interval 経っていなければ残りを待つ"""
        if self.min_interval > 0 and self.last_request_time is not None:
            elapsed = self._clock() - self.last_request_time
            if elapsed < self.min_interval:
                sleep_duration = self.min_interval - elapsed
                logger.debug(f"Rate limiting: sleeping for {sleep_duration:.2f}s")
                self._sleep(sleep_duration)

        self.last_request_time = self._clock()

    def reset(self) -> None:
        """レート制限をリセット"""
        self.last_request_time = None
