"""カスタム例外定義"""
from typing import Optional


class GeocodingError(Exception):
    """ジオコーディング基底例外"""

    code = "geocoding_error"


class InvalidInputError(GeocodingError):
    """入力値エラー（空の住所、範囲外の座標）"""

    def __init__(self, message: str, code: str = "invalid_input") -> None:
        super().__init__(message)
        self.code = code


class TransportError(GeocodingError):
    """HTTP通信エラー（接続失敗、タイムアウト）"""

    code = "api_error"


class ServiceError(GeocodingError):
    """
    APIエラー

    HTTPステータスが200以外、またはレスポンスに `error` フィールドが含まれる場合
    """

    code = "api_error"

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class DecodeError(GeocodingError):
    """レスポンス解析エラー"""

    code = "json_error"


class NoResultsError(GeocodingError):
    """検索結果なし"""

    code = "no_results"


class CacheError(GeocodingError):
    """キャッシュストア関連のエラー"""

    code = "cache_error"


class ConfigurationError(GeocodingError):
    """設定エラー"""

    code = "config_error"
