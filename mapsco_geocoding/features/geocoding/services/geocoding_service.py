"""ジオコーディングサービス"""

from collections.abc import Iterable
from typing import Any, Optional

from tqdm import tqdm

from ..domain.results import GeocodingResult
from ..providers.mapsco_geocoder import GeocodingClient
from ...cache.providers.memory_cache_store import InMemoryCacheStore
from ....infrastructure.config.settings import Settings
from ....shared.exceptions.errors import GeocodingError
from ....shared.http.rate_limiter import RateLimiter
from ....shared.logging.config import get_logger

logger = get_logger(__name__)


class GeocodingService:
    """
    ジオコーディングサービス

    GeocodingClient の例外を GeocodingResult に変換して返す。
    想定内の失敗（入力不正、通信エラー、APIエラー、結果なし）では例外を送出しない。
    """

    def __init__(
        self,
        client: GeocodingClient,
        delay_between_requests: float = 0.0,
    ) -> None:
        """
        Args:
            client: ジオコーディングクライアント
            delay_between_requests: バッチ処理時のリクエスト間の遅延（秒）
        """
        self.client = client
        self.delay_between_requests = delay_between_requests
        self.rate_limiter = RateLimiter(min_interval=delay_between_requests)

        logger.info(
            f"GeocodingService initialized: cache={client.config.cache_enabled}, "
            f"delay={delay_between_requests}s"
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, delay_between_requests: float = 0.0
    ) -> "GeocodingService":
        """アプリケーション設定からサービスを生成（ロギングも設定する）"""
        settings.configure_logging()
        return cls(
            GeocodingClient.from_settings(settings),
            delay_between_requests=delay_between_requests,
        )

    def geocode(self, address: str) -> GeocodingResult:
        """
        住所をジオコーディング

        Args:
            address: 住所文字列

        Returns:
            GeocodingResult: 成功時は location、失敗時は error を持つ
        """
        try:
            location = self.client.geocode(address)
            return GeocodingResult.success(address, location)
        except GeocodingError as e:
            logger.warning(f"Geocoding failed for '{address}': [{e.code}] {e}")
            return GeocodingResult.failure(address, e)

    def reverse_geocode(self, latitude: float, longitude: float) -> GeocodingResult:
        """
        座標から住所を取得

        Args:
            latitude: 緯度
            longitude: 経度

        Returns:
            GeocodingResult: 成功時は location、失敗時は error を持つ
        """
        query = f"{latitude},{longitude}"
        try:
            location = self.client.reverse_geocode(latitude, longitude)
            return GeocodingResult.success(query, location)
        except GeocodingError as e:
            logger.warning(f"Reverse geocoding failed for ({query}): [{e.code}] {e}")
            return GeocodingResult.failure(query, e)

    def geocode_batch(
        self, addresses: Iterable[str], show_progress: bool = True
    ) -> dict[str, GeocodingResult]:
        """
        複数の住所をバッチジオコーディング

        重複と空文字列は除外し、入力順を保って処理する。

        Args:
            addresses: 住所のリスト
            show_progress: プログレスバーを表示するか

        Returns:
            dict[str, GeocodingResult]: 住所ごとの結果
        """
        unique_addresses = list(dict.fromkeys(address for address in addresses if address))

        logger.info(f"Starting batch geocoding: {len(unique_addresses)} unique addresses")

        iterator = (
            tqdm(unique_addresses, desc="Geocoding") if show_progress else unique_addresses
        )

        results: dict[str, GeocodingResult] = {}
        self.rate_limiter.reset()
        for address in iterator:
            self.rate_limiter.wait()
            results[address] = self.geocode(address)

        summary = self.summarize(results)
        logger.info(
            f"Batch geocoding completed: {summary['success']} success, "
            f"{summary['failure']} failure"
        )

        return results

    @staticmethod
    def summarize(results: dict[str, GeocodingResult]) -> dict[str, int]:
        """
        バッチ結果の集計

        Returns:
            dict[str, int]: 成功数、失敗数、合計、失敗のエラーコード別件数
        """
        success_count = sum(1 for result in results.values() if result.ok)
        summary: dict[str, int] = {
            "success": success_count,
            "failure": len(results) - success_count,
            "total": len(results),
        }

        for result in results.values():
            if result.error_code:
                key = f"error:{result.error_code}"
                summary[key] = summary.get(key, 0) + 1

        return summary

    def clear_cache(self, key: Optional[str] = None) -> bool:
        """キャッシュを削除"""
        return self.client.clear_cache(key)

    def get_cache_stats(self) -> Optional[dict[str, Any]]:
        """
        キャッシュ統計を取得（メモリ内ストアを使用している場合のみ）

        Returns:
            Optional[dict[str, Any]]: キャッシュ統計
        """
        store = self.client.cache_store
        if isinstance(store, InMemoryCacheStore):
            return store.get_cache_stats()

        logger.warning("Cache stats are only available when using InMemoryCacheStore")
        return None
