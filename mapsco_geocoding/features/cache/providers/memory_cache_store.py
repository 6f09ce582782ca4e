"""メモリ内キャッシュストア"""
import copy
import threading
import time
from typing import Any, Callable, Optional

from ....shared.logging.config import get_logger

logger = get_logger(__name__)


class InMemoryCacheStore:
    """
    メモリ内キャッシュストア（TTL・接頭辞削除対応）

    値は保存時と取得時にディープコピーするため、呼び出し側で値を変更しても
    キャッシュの内容は変わらない。
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """
        Args:
            clock: 現在時刻（秒）を返す関数（テスト時に差し替え可能）
        """
        self._clock = clock
        self._entries: dict[str, tuple[Any, Optional[float]]] = {}
        self._lock = threading.Lock()
        self.hit_count = 0
        self.miss_count = 0

        logger.debug("InMemoryCacheStore initialized")

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.miss_count += 1
                return None

            value, expires_at = entry
            if expires_at is not None and expires_at <= self._clock():
                # 期限切れ
                del self._entries[key]
                self.miss_count += 1
                return None

            self.hit_count += 1
            return copy.deepcopy(value)

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        expires_at = self._clock() + ttl_seconds if ttl_seconds > 0 else None
        with self._lock:
            self._entries[key] = (copy.deepcopy(value), expires_at)

    def delete(self, key: str) -> bool:
        with self._lock:
            self._entries.pop(key, None)
        return True

    def delete_by_prefix(self, prefix: str) -> bool:
        with self._lock:
            keys = [key for key in self._entries if key.startswith(prefix)]
            for key in keys:
                del self._entries[key]

        logger.info(f"Cache cleared: {len(keys)} entries removed")
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_cache_stats(self) -> dict[str, Any]:
        """
        キャッシュ統計を取得

        Returns:
            dict[str, Any]: キャッシュ統計（サイズ、ヒット数、ミス数、ヒット率）
        """
        total_requests = self.hit_count + self.miss_count
        hit_rate = (self.hit_count / total_requests * 100) if total_requests > 0 else 0.0

        return {
            "cache_size": len(self),
            "hit_count": self.hit_count,
            "miss_count": self.miss_count,
            "total_requests": total_requests,
            "hit_rate_percent": round(hit_rate, 2),
        }
