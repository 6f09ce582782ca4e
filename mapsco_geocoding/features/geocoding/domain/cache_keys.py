"""キャッシュキー生成"""
import hashlib

from .enums import Operation

CACHE_KEY_PREFIX = "mapsco_geocoding_"


def build_cache_key(raw_key: str, api_key: str) -> str:
    """
    生キーとAPIキーからキャッシュキーを生成

    APIキーを混ぜることで、異なるキー間でキャッシュを共有しない。

    Args:
        raw_key: 操作タグ付きの生キー（例: "forward_Tokyo"）
        api_key: APIキー

    Returns:
        str: "mapsco_geocoding_" + md5の16進ダイジェスト
    """
    digest = hashlib.md5((raw_key + api_key).encode("utf-8")).hexdigest()
    return f"{CACHE_KEY_PREFIX}{digest}"


def forward_raw_key(address: str) -> str:
    """正引き用の生キー"""
    return f"{Operation.FORWARD.key_prefix}{address}"


def reverse_raw_key(latitude: float, longitude: float) -> str:
    """
    逆引き用の生キー

    座標は丸めずに str() の表記をそのまま使う。表記が同じ値は同じキー、
    表記が異なる値（38.0 と 38 など）は別キーになる。
    """
    return f"{Operation.REVERSE.key_prefix}{latitude}_{longitude}"


def is_tagged_raw_key(raw_key: str) -> bool:
    """操作タグ付きの生キーかどうか"""
    return any(raw_key.startswith(op.key_prefix) for op in Operation)
