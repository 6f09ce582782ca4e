"""ジオコーディング機能の列挙型定義"""
from enum import Enum


class ResponseFormat(str, Enum):
    """Maps.co APIのレスポンス形式"""

    JSON = "json"
    XML = "xml"
    JSONV2 = "jsonv2"
    GEOJSON = "geojson"
    GEOCODEJSON = "geocodejson"


class Operation(str, Enum):
    """キャッシュキーに付与する操作タグ"""

    FORWARD = "forward"
    REVERSE = "reverse"

    @property
    def key_prefix(self) -> str:
        """生キーの接頭辞（例: "forward_"）"""
        return f"{self.value}_"
