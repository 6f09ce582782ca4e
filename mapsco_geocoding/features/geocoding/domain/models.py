"""ジオコーディング機能のドメインモデル"""
import copy
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Optional, Union
from urllib.parse import quote

from .enums import ResponseFormat
from ....shared.exceptions.errors import ConfigurationError, DecodeError

API_BASE_URL = "https://geocode.maps.co/"
DEFAULT_CACHE_TTL_SECONDS = 604800  # 1週間
DEFAULT_TIMEOUT_SECONDS = 15.0
EARTH_RADIUS_KM = 6371

# 地図サービスのURLテンプレート
MAP_URL_TEMPLATES = {
    "google": "https://www.google.com/maps/search/?api=1&query={lat},{lon}",
    "apple": "https://maps.apple.com/?q={lat},{lon}",
    "bing": "https://www.bing.com/maps?cp={lat}~{lon}",
    "osm": "https://www.openstreetmap.org/?mlat={lat}&mlon={lon}&zoom=12",
}


@dataclass(frozen=True)
class ClientConfig:
    """
    クライアント設定（生成後は不変）

    値を変えたい場合は with_* メソッドで新しいインスタンスを作る。
    """

    api_key: str = field(repr=False)  # ログやreprに出さない
    format: Union[str, ResponseFormat] = ResponseFormat.JSON.value
    cache_enabled: bool = True
    cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    base_url: str = API_BASE_URL

    def __post_init__(self) -> None:
        if not isinstance(self.api_key, str):
            raise ConfigurationError("API key must be a string")

        if isinstance(self.format, ResponseFormat):
            object.__setattr__(self, "format", self.format.value)
        elif not isinstance(self.format, str):
            raise ConfigurationError("Response format must be a string")

        if (
            isinstance(self.cache_ttl_seconds, bool)
            or not isinstance(self.cache_ttl_seconds, int)
            or self.cache_ttl_seconds < 0
        ):
            raise ConfigurationError(
                f"Cache expiration must be a non-negative integer: {self.cache_ttl_seconds!r}"
            )

        if self.timeout <= 0:
            raise ConfigurationError(f"Timeout must be positive: {self.timeout!r}")

        if not self.base_url.endswith("/"):
            object.__setattr__(self, "base_url", self.base_url + "/")

    @property
    def cache_settings(self) -> dict[str, Any]:
        """キャッシュ設定をまとめて返す"""
        return {
            "enabled": self.cache_enabled,
            "expiration": self.cache_ttl_seconds,
        }

    def with_api_key(self, api_key: str) -> "ClientConfig":
        return replace(self, api_key=api_key)

    def with_format(self, response_format: Union[str, ResponseFormat]) -> "ClientConfig":
        return replace(self, format=response_format)

    def with_cache_enabled(self, enabled: bool) -> "ClientConfig":
        return replace(self, cache_enabled=enabled)

    def with_cache_expiration(self, seconds: int) -> "ClientConfig":
        return replace(self, cache_ttl_seconds=seconds)


@dataclass(frozen=True)
class Coordinates:
    """緯度・経度の組"""

    latitude: float  # 緯度
    longitude: float  # 経度

    def to_tuple(self) -> tuple[float, float]:
        """(緯度, 経度)のタプルとして返す"""
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class BoundingBox:
    """
    バウンディングボックス

    APIの `boundingbox` は [min_lat, max_lat, min_lon, max_lon] の順で返される。
    """

    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    @property
    def center(self) -> Coordinates:
        """中心座標"""
        return Coordinates(
            latitude=(self.max_lat + self.min_lat) / 2,
            longitude=(self.max_lon + self.min_lon) / 2,
        )

    def to_dict(self) -> dict[str, float]:
        return {
            "min_lat": self.min_lat,
            "max_lat": self.max_lat,
            "min_lon": self.min_lon,
            "max_lon": self.max_lon,
        }


def _to_float(value: Any, field_name: str) -> Optional[float]:
    """数値文字列をfloatに変換（Noneはそのまま）"""
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Field '{field_name}' is not numeric: {value!r}") from e


def _to_int(value: Any, field_name: str) -> Optional[int]:
    """数値をintに変換（Noneはそのまま）"""
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Field '{field_name}' is not an integer: {value!r}") from e


class LocationView:
    """
    ジオコーディング結果1件の読み取り専用ビュー

    APIのJSONはすべてのフィールドが任意のため、各アクセサはキーが無ければ
    None を返す。座標などの派生値はアクセスのたびにペイロードから計算し、
    内部状態を持たない。

    数値であるべきフィールド（lat, lon, place_id など）に数値以外が入っている
    場合は、そのアクセサを呼んだ時点で DecodeError を送出する。
    """

    def __init__(self, data: Mapping[str, Any]) -> None:
        """
        Args:
            data: APIレスポンス（1件分）をデコードした辞書
        """
        if not isinstance(data, Mapping):
            raise DecodeError(
                f"Location payload must be a JSON object, got {type(data).__name__}"
            )
        self._data: dict[str, Any] = copy.deepcopy(dict(data))

    def __repr__(self) -> str:
        return (
            f"LocationView(display_name={self.display_name!r}, "
            f"lat={self._data.get('lat')!r}, lon={self._data.get('lon')!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LocationView):
            return NotImplemented
        return self._data == other._data

    __hash__ = None  # type: ignore[assignment]

    # ---- 座標 ----

    @property
    def latitude(self) -> Optional[float]:
        """緯度"""
        return _to_float(self._data.get("lat"), "lat")

    @property
    def longitude(self) -> Optional[float]:
        """経度"""
        return _to_float(self._data.get("lon"), "lon")

    def coordinates(self) -> Optional[Coordinates]:
        """緯度・経度（どちらかが無ければNone）"""
        latitude = self.latitude
        longitude = self.longitude

        if latitude is None or longitude is None:
            return None

        return Coordinates(latitude=latitude, longitude=longitude)

    # ---- 地図サービスURL ----

    def _map_url(self, service: str) -> Optional[str]:
        coordinates = self.coordinates()
        if coordinates is None:
            return None

        return MAP_URL_TEMPLATES[service].format(
            lat=quote(str(coordinates.latitude), safe=""),
            lon=quote(str(coordinates.longitude), safe=""),
        )

    def google_maps_url(self) -> Optional[str]:
        return self._map_url("google")

    def apple_maps_url(self) -> Optional[str]:
        return self._map_url("apple")

    def bing_maps_url(self) -> Optional[str]:
        return self._map_url("bing")

    def openstreetmap_url(self) -> Optional[str]:
        return self._map_url("osm")

    def map_urls(self) -> dict[str, Optional[str]]:
        """全地図サービスのURL（キー: google, apple, bing, osm）"""
        return {service: self._map_url(service) for service in MAP_URL_TEMPLATES}

    # ---- 基本フィールド ----

    @property
    def display_name(self) -> Optional[str]:
        return self._data.get("display_name")

    @property
    def place_id(self) -> Optional[int]:
        return _to_int(self._data.get("place_id"), "place_id")

    @property
    def osm_type(self) -> Optional[str]:
        """OSMタイプ（node, way, relation）"""
        return self._data.get("osm_type")

    @property
    def osm_id(self) -> Optional[int]:
        return _to_int(self._data.get("osm_id"), "osm_id")

    @property
    def location_class(self) -> Optional[str]:
        """分類（office, building, tourism など）。jsonv2形式では category"""
        value = self._data.get("class")
        if value is None:
            value = self._data.get("category")
        return value

    @property
    def location_type(self) -> Optional[str]:
        """種別（government, yes, information など）"""
        return self._data.get("type")

    @property
    def importance(self) -> Optional[float]:
        return _to_float(self._data.get("importance"), "importance")

    @property
    def license(self) -> Optional[str]:
        return self._data.get("licence")

    @property
    def raw_data(self) -> Mapping[str, Any]:
        """ペイロード全体（読み取り専用）"""
        return MappingProxyType(copy.deepcopy(self._data))

    # ---- バウンディングボックス ----

    def has_bounding_box(self) -> bool:
        value = self._data.get("boundingbox")
        return (
            isinstance(value, Sequence)
            and not isinstance(value, (str, bytes))
            and len(value) == 4
        )

    def bounding_box(self) -> Optional[BoundingBox]:
        """
        バウンディングボックス

        Returns:
            Optional[BoundingBox]: 4要素の配列が無い場合はNone
        """
        if not self.has_bounding_box():
            return None

        values = self._data["boundingbox"]
        return BoundingBox(
            min_lat=_to_float(values[0], "boundingbox[0]"),
            max_lat=_to_float(values[1], "boundingbox[1]"),
            min_lon=_to_float(values[2], "boundingbox[2]"),
            max_lon=_to_float(values[3], "boundingbox[3]"),
        )

    def bounding_box_dimensions(self) -> Optional[dict[str, float]]:
        """
        バウンディングボックスの幅・高さ（km）

        正距円筒図法による近似。幅は中心緯度のcosで補正する。

        Returns:
            Optional[dict[str, float]]: {"width_km", "height_km"}
        """
        box = self.bounding_box()
        if box is None:
            return None

        lat_distance = math.radians(box.max_lat - box.min_lat)
        lon_distance = math.radians(box.max_lon - box.min_lon)
        lat_center = math.radians((box.max_lat + box.min_lat) / 2)

        width_km = EARTH_RADIUS_KM * lon_distance * math.cos(lat_center)
        height_km = EARTH_RADIUS_KM * lat_distance

        return {
            "width_km": abs(width_km),
            "height_km": abs(height_km),
        }

    def bounding_box_radius(self) -> Optional[float]:
        """
        バウンディングボックスのおおよその半径（km）

        中心から北東角（max_lat, max_lon）までの大圏距離（ハーバサイン公式）。
        """
        box = self.bounding_box()
        if box is None:
            return None

        center = box.center
        corner_lat = box.max_lat
        corner_lon = box.max_lon

        lat_distance = math.radians(corner_lat - center.latitude)
        lon_distance = math.radians(corner_lon - center.longitude)

        a = (
            math.sin(lat_distance / 2) ** 2
            + math.cos(math.radians(center.latitude))
            * math.cos(math.radians(corner_lat))
            * math.sin(lon_distance / 2) ** 2
        )
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

        return EARTH_RADIUS_KM * c

    # ---- 住所 ----

    def address(self) -> Optional[dict[str, Any]]:
        """
        住所の構成要素

        `address` があればそのまま返す。無い場合（正引きの結果など）は
        display_name を ", " で分割し、末尾から country, postcode, state, city
        の順に取り出し、残りを road とする。あくまで推定であり、
        正確な分解は保証しない。
        """
        address = self._data.get("address")
        if isinstance(address, Mapping):
            return copy.deepcopy(dict(address))

        display_name = self._data.get("display_name")
        if not isinstance(display_name, str):
            return None

        parts = display_name.split(", ")
        result: dict[str, Any] = {}

        for component in ("country", "postcode", "state", "city"):
            if parts:
                result[component] = parts.pop()

        if parts:
            result["road"] = ", ".join(parts)

        return result

    def address_component(self, component: str) -> Optional[Any]:
        """
        住所の構成要素を1つ取得

        Args:
            component: 要素名（city, country, postcode など）
        """
        address = self.address()
        if address is None:
            return None
        return address.get(component)

    def house_number(self) -> Optional[str]:
        return self.address_component("house_number")

    def street(self) -> Optional[str]:
        return self.address_component("road")

    def city(self) -> Optional[str]:
        return self.address_component("city")

    def state(self) -> Optional[str]:
        return self.address_component("state")

    def postcode(self) -> Optional[str]:
        return self.address_component("postcode")

    def country(self) -> Optional[str]:
        return self.address_component("country")

    def country_code(self) -> Optional[str]:
        """国コード（ISO 3166-1 alpha-2、大文字）"""
        code = self.address_component("country_code")
        return str(code).upper() if code else None

    def borough(self) -> Optional[str]:
        return self.address_component("borough")
