"""キャッシュストアのインターフェース"""
from typing import Any, Optional, Protocol


class CacheStore(Protocol):
    """
    期限付きキー・バリューストア

    実装は失敗時に CacheError を送出する。存在しないキーの削除は成功扱い。
    ttl_seconds が 0 の場合は期限なし。
    """

    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any, ttl_seconds: int) -> None: ...

    def delete(self, key: str) -> bool: ...

    def delete_by_prefix(self, prefix: str) -> bool: ...
