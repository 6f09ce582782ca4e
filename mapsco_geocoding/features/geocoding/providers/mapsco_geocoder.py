"""Maps.co Geocoding API実装"""
import math
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Optional, Union

from ..domain.cache_keys import (
    CACHE_KEY_PREFIX,
    build_cache_key,
    forward_raw_key,
    is_tagged_raw_key,
    reverse_raw_key,
)
from ..domain.enums import ResponseFormat
from ..domain.models import (
    DEFAULT_CACHE_TTL_SECONDS,
    ClientConfig,
    LocationView,
)
from ...cache.domain.store import CacheStore
from ...cache.providers.memory_cache_store import InMemoryCacheStore
from ....shared.exceptions.errors import (
    CacheError,
    DecodeError,
    InvalidInputError,
    NoResultsError,
    ServiceError,
)
from ....shared.http.client import HTTPClient
from ....shared.logging.config import get_logger

if TYPE_CHECKING:
    from ....infrastructure.config.settings import Settings

logger = get_logger(__name__)


def _importance(candidate: Mapping[str, Any]) -> float:
    """候補のimportance（無い・数値でない場合は0）"""
    try:
        return float(candidate.get("importance") or 0)
    except (TypeError, ValueError):
        return 0.0


def select_best_candidate(candidates: list[Mapping[str, Any]]) -> Mapping[str, Any]:
    """
    importanceが最大の候補を選ぶ

    同点の場合は先に現れた候補を優先する（max()は最初の最大値を返す）。
    """
    return max(candidates, key=_importance)


class GeocodingClient:
    """
    Maps.co Geocoding APIクライアント

    正引き（住所 -> 座標）と逆引き（座標 -> 住所）に対応し、
    成功したレスポンスをキャッシュストアに保存する。

    Example:
        >>> client = GeocodingClient("your-api-key")
        >>> location = client.geocode("1600 Pennsylvania Avenue NW, Washington, DC")
        >>> location.coordinates()
        Coordinates(latitude=38.8976633, longitude=-77.0365739)
    """

    def __init__(
        self,
        api_key: str,
        format: Union[str, ResponseFormat] = ResponseFormat.JSON,
        cache_enabled: bool = True,
        cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
        cache_store: Optional[CacheStore] = None,
        http_client: Optional[HTTPClient] = None,
        config: Optional[ClientConfig] = None,
    ) -> None:
        """
        Args:
            api_key: Maps.co APIキー
            format: レスポンス形式（json, xml, jsonv2, geojson, geocodejson）
            cache_enabled: キャッシュを使用するか
            cache_ttl_seconds: キャッシュの有効期限（秒、デフォルト: 1週間）
            cache_store: キャッシュストア（省略時はメモリ内ストア）
            http_client: HTTPクライアント（省略時は新規作成）
            config: 設定オブジェクト（指定時は他の設定引数より優先）
        """
        self._config = config or ClientConfig(
            api_key=api_key,
            format=format,
            cache_enabled=cache_enabled,
            cache_ttl_seconds=cache_ttl_seconds,
        )
        self.cache_store: CacheStore = (
            cache_store if cache_store is not None else InMemoryCacheStore()
        )
        self.http_client = http_client or HTTPClient(timeout=self._config.timeout)

        logger.info(
            f"GeocodingClient initialized: format={self._config.format}, "
            f"cache={self._config.cache_enabled}, ttl={self._config.cache_ttl_seconds}s"
        )

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        cache_store: Optional[CacheStore] = None,
        http_client: Optional[HTTPClient] = None,
    ) -> "GeocodingClient":
        """設定オブジェクトからクライアントを生成"""
        return cls(
            api_key=config.api_key,
            cache_store=cache_store,
            http_client=http_client,
            config=config,
        )

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        cache_store: Optional[CacheStore] = None,
        http_client: Optional[HTTPClient] = None,
    ) -> "GeocodingClient":
        """
        アプリケーション設定からクライアントを生成

        cache_store を省略した場合は settings.cache_backend に応じたストアを使う。
        """
        if cache_store is None:
            cache_store = settings.create_cache_store()
        return cls.from_config(
            settings.to_client_config(),
            cache_store=cache_store,
            http_client=http_client,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    # ---- 公開API ----

    def geocode(self, address: str) -> LocationView:
        """
        住所をジオコーディング

        複数の候補が返された場合は importance が最大のものを採用する。

        Args:
            address: 住所文字列

        Returns:
            LocationView: 位置情報

        Raises:
            InvalidInputError: 住所が空の場合
            TransportError: 通信に失敗した場合
            ServiceError: APIがエラーを返した場合
            DecodeError: レスポンスがJSONとして解析できない場合
            NoResultsError: 結果が0件の場合
        """
        if not address:
            raise InvalidInputError("Address cannot be empty", code="invalid_address")

        cache_key = self._cache_key(forward_raw_key(address))

        cached = self._read_cache(cache_key)
        if cached is not None:
            logger.debug(f"Cache hit for address: {address}")
            return LocationView(cached)

        logger.debug(f"Geocoding address: {address}")
        response = self._request("search", {"q": address, "format": self._config.format})

        if not isinstance(response, list) or not response:
            logger.warning(f"No geocoding results for address: {address}")
            raise NoResultsError("No results found for the provided address")

        if not all(isinstance(candidate, Mapping) for candidate in response):
            raise NoResultsError("Geocoding API returned malformed result entries")

        data = select_best_candidate(response)

        self._write_cache(cache_key, data)

        location = LocationView(data)
        logger.debug(
            f"Geocoded: {address} -> ({data.get('lat')}, {data.get('lon')}) "
            f"from {len(response)} candidate(s)"
        )
        return location

    def reverse_geocode(self, latitude: float, longitude: float) -> LocationView:
        """
        座標から住所を取得（逆ジオコーディング）

        正引きと異なり結果件数の検査は行わない。APIが返したオブジェクトを
        そのままキャッシュし、ラップして返す。

        Args:
            latitude: 緯度（-90〜90）
            longitude: 経度（-180〜180）

        Returns:
            LocationView: 位置情報

        Raises:
            InvalidInputError: 座標が範囲外の場合
            TransportError: 通信に失敗した場合
            ServiceError: APIがエラーを返した場合
            DecodeError: レスポンスがJSONとして解析できない場合
        """
        if not self._is_valid_coordinates(latitude, longitude):
            raise InvalidInputError(
                "Invalid coordinates provided", code="invalid_coordinates"
            )

        cache_key = self._cache_key(reverse_raw_key(latitude, longitude))

        cached = self._read_cache(cache_key)
        if cached is not None:
            logger.debug(f"Cache hit for coordinates: ({latitude}, {longitude})")
            return LocationView(cached)

        logger.debug(f"Reverse geocoding: ({latitude}, {longitude})")
        response = self._request(
            "reverse",
            {"lat": latitude, "lon": longitude, "format": self._config.format},
        )

        location = LocationView(response)

        self._write_cache(cache_key, response)

        logger.debug(
            f"Reverse geocoded: ({latitude}, {longitude}) -> {location.display_name}"
        )
        return location

    def clear_cache(self, key: Optional[str] = None) -> bool:
        """
        キャッシュを削除

        Args:
            key: 削除する生キー（例: "forward_Tokyo"）。操作タグの無い文字列は
                住所とみなし、その正引きキャッシュも削除する。
                省略時はこのライブラリが書き込んだ全エントリを削除する。

        Returns:
            bool: 削除処理が完了した場合True（ストアの障害時のみFalse）
        """
        try:
            if key is None:
                result = self.cache_store.delete_by_prefix(CACHE_KEY_PREFIX)
                logger.info("Geocoding cache cleared")
                return result

            result = self.cache_store.delete(self._cache_key(key))
            if not is_tagged_raw_key(key):
                result = self.cache_store.delete(self._cache_key(forward_raw_key(key))) and result
            return result

        except CacheError as e:
            logger.error(f"Failed to clear geocoding cache: {e}")
            return False

    def clear_cached_address(self, address: str) -> bool:
        """住所1件の正引きキャッシュを削除"""
        return self.clear_cache(forward_raw_key(address))

    def clear_cached_coordinates(self, latitude: float, longitude: float) -> bool:
        """座標1件の逆引きキャッシュを削除"""
        return self.clear_cache(reverse_raw_key(latitude, longitude))

    def close(self) -> None:
        self.http_client.close()

    def __enter__(self) -> "GeocodingClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    # ---- 内部処理 ----

    def _request(self, endpoint: str, params: dict[str, Any]) -> Any:
        """
        APIにリクエストしてデコード済みのJSONを返す

        Args:
            endpoint: エンドポイント（search または reverse）
            params: クエリパラメータ（api_keyはここで付与する）

        Raises:
            TransportError: 通信に失敗した場合
            ServiceError: ステータスが200以外、またはerrorフィールドがある場合
            DecodeError: JSONとして解析できない場合
        """
        params = {**params, "api_key": self._config.api_key}
        url = self._config.base_url + endpoint

        response = self.http_client.get(url, params=params)

        if response.status_code != 200:
            logger.error(
                f"Geocoding API returned error status {response.status_code} for {endpoint}"
            )
            raise ServiceError(
                f"Geocoding API returned error code: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Failed to parse Geocoding API response from {endpoint}")
            raise DecodeError("Failed to parse Geocoding API response") from e

        if isinstance(data, Mapping) and "error" in data:
            message = data.get("error") or "Unknown API error"
            if isinstance(message, Mapping):
                message = message.get("message") or str(message)
            logger.warning(f"Geocoding API error for {endpoint}: {message}")
            raise ServiceError(str(message))

        return data

    def _cache_key(self, raw_key: str) -> str:
        return build_cache_key(raw_key, self._config.api_key)

    def _read_cache(self, cache_key: str) -> Optional[Any]:
        """キャッシュを読む（無効時・障害時はNone）"""
        if not self._config.cache_enabled:
            return None

        try:
            return self.cache_store.get(cache_key)
        except CacheError as e:
            logger.warning(f"Cache read failed, falling back to API: {e}")
            return None

    def _write_cache(self, cache_key: str, data: Any) -> None:
        if not self._config.cache_enabled:
            return

        try:
            self.cache_store.set(cache_key, data, self._config.cache_ttl_seconds)
        except CacheError as e:
            logger.warning(f"Cache write failed: {e}")

    @staticmethod
    def _is_valid_coordinates(latitude: float, longitude: float) -> bool:
        try:
            latitude = float(latitude)
            longitude = float(longitude)
        except (TypeError, ValueError):
            return False

        if math.isnan(latitude) or math.isnan(longitude):
            return False

        return -90 <= latitude <= 90 and -180 <= longitude <= 180
