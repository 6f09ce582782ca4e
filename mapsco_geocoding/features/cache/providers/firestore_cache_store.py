"""Firestoreを使った永続キャッシュストア"""
import json
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from ...storage.clients.firestore_client import FirestoreClient
from ....shared.exceptions.errors import CacheError
from ....shared.logging.config import get_logger

logger = get_logger(__name__)

# 接頭辞検索の上限文字（Firestoreの範囲クエリで前方一致を表現する）
_PREFIX_UPPER_BOUND = "\uf8ff"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FirestoreCacheStore:
    """
    Firestoreコレクションをキャッシュストアとして使う

    ドキュメント構造:
    - key: キャッシュキー（ドキュメントIDと同じ。接頭辞検索用）
    - value: 値のJSON文字列（Firestoreは入れ子の配列を保存できないため）
    - expires_at: 有効期限（UTC、期限なしはNone）
    - created_at: 作成日時（UTC）
    """

    def __init__(
        self,
        client: FirestoreClient,
        collection: str = "geocoding_cache",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """
        Args:
            client: Firestoreクライアント
            collection: キャッシュ用コレクション名
            clock: 現在時刻（UTC）を返す関数
        """
        self.client = client
        self.collection = collection
        self._clock = clock

        logger.info(f"FirestoreCacheStore initialized: collection={collection}")

    def get(self, key: str) -> Optional[Any]:
        document = self.client.get_document(self.collection, key)
        if document is None:
            return None

        expires_at = document.get("expires_at")
        if expires_at is not None and expires_at <= self._clock():
            logger.debug(f"Cache entry expired: {key}")
            self.client.delete_document(self.collection, key)
            return None

        try:
            return json.loads(document["value"])
        except (KeyError, TypeError, ValueError) as e:
            raise CacheError(f"Corrupted cache entry {key}: {e}") from e

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        now = self._clock()
        expires_at = now + timedelta(seconds=ttl_seconds) if ttl_seconds > 0 else None

        try:
            serialized = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise CacheError(f"Cache value for {key} is not JSON serializable: {e}") from e

        self.client.set_document(
            self.collection,
            key,
            {
                "key": key,
                "value": serialized,
                "expires_at": expires_at,
                "created_at": now,
            },
        )

    def delete(self, key: str) -> bool:
        self.client.delete_document(self.collection, key)
        return True

    def delete_by_prefix(self, prefix: str) -> bool:
        document_ids = self.client.query_document_ids(
            self.collection,
            filters=[
                ("key", ">=", prefix),
                ("key", "<", prefix + _PREFIX_UPPER_BOUND),
            ],
        )
        deleted = self.client.batch_delete(self.collection, document_ids)
        logger.info(f"Cache cleared: {deleted} entries removed from {self.collection}")
        return True
