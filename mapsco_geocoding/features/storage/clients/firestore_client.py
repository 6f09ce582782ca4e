"""Firestoreクライアント"""
import os
from typing import Any, Optional

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from ....shared.exceptions.errors import CacheError
from ....shared.logging.config import get_logger

logger = get_logger(__name__)

# Firestoreのバッチ書き込み上限
MAX_BATCH_SIZE = 500


class FirestoreClient:
    """Firestore操作クライアント"""

    def __init__(
        self,
        project_id: Optional[str] = None,
        database_id: str = "(default)",
        client: Optional[firestore.Client] = None,
    ) -> None:
        """
        Firestoreクライアントを初期化

        Args:
            project_id: GCPプロジェクトID
            database_id: データベースID（デフォルトは"(default)"）
            client: 生成済みのfirestore.Client（指定時はそれを使う）
        """
        self.project_id = project_id
        self.database_id = database_id

        if client is not None:
            self.client = client
            return

        # エミュレータモードの検出
        emulator_host = os.environ.get("FIRESTORE_EMULATOR_HOST")

        try:
            self.client = firestore.Client(project=project_id, database=database_id)

            if emulator_host:
                logger.info(
                    f"Firestore client initialized (EMULATOR MODE): "
                    f"host={emulator_host}, project={project_id}, database={database_id}"
                )
            else:
                logger.info(
                    f"Firestore client initialized: project={project_id}, database={database_id}"
                )
        except Exception as e:
            raise CacheError(f"Failed to initialize Firestore client: {e}") from e

    def get_collection(self, collection_path: str) -> firestore.CollectionReference:
        """
        コレクション参照を取得

        Args:
            collection_path: コレクションパス

        Returns:
            CollectionReference: コレクション参照
        """
        return self.client.collection(collection_path)

    def get_document(
        self, collection_path: str, document_id: str
    ) -> Optional[dict[str, Any]]:
        """
        ドキュメントを取得

        Args:
            collection_path: コレクションパス
            document_id: ドキュメントID

        Returns:
            Optional[dict[str, Any]]: ドキュメントデータ（存在しない場合はNone）
        """
        try:
            doc_ref = self.get_collection(collection_path).document(document_id)
            doc = doc_ref.get()

            if doc.exists:
                return doc.to_dict()
            return None

        except Exception as e:
            raise CacheError(
                f"Failed to get document {document_id} from {collection_path}: {e}"
            ) from e

    def set_document(
        self, collection_path: str, document_id: str, data: dict[str, Any]
    ) -> None:
        """
        ドキュメントを作成・上書き

        Args:
            collection_path: コレクションパス
            document_id: ドキュメントID
            data: ドキュメントデータ
        """
        try:
            doc_ref = self.get_collection(collection_path).document(document_id)
            doc_ref.set(data)
            logger.debug(f"Document {document_id} written to {collection_path}")

        except Exception as e:
            raise CacheError(
                f"Failed to write document {document_id} to {collection_path}: {e}"
            ) from e

    def query_document_ids(
        self,
        collection_path: str,
        filters: Optional[list[tuple[str, str, Any]]] = None,
        limit: Optional[int] = None,
    ) -> list[str]:
        """
        条件に一致するドキュメントのIDを取得

        Args:
            collection_path: コレクションパス
            filters: フィルタ条件のリスト [(field, operator, value), ...]
            limit: 取得件数の上限

        Returns:
            list[str]: ドキュメントIDのリスト

        Example:
            >>> client.query_document_ids(
            ...     "geocoding_cache",
            ...     filters=[("key", ">=", "mapsco_geocoding_")],
            ...     limit=100
            ... )
        """
        try:
            query = self.get_collection(collection_path)

            if filters:
                for field, operator, value in filters:
                    query = query.where(filter=FieldFilter(field, operator, value))

            if limit:
                query = query.limit(limit)

            docs = query.stream()
            return [doc.id for doc in docs if doc.exists]

        except Exception as e:
            raise CacheError(
                f"Failed to query documents from {collection_path}: {e}"
            ) from e

    def delete_document(self, collection_path: str, document_id: str) -> None:
        """
        ドキュメントを削除（存在しない場合も成功扱い）

        Args:
            collection_path: コレクションパス
            document_id: ドキュメントID
        """
        try:
            doc_ref = self.get_collection(collection_path).document(document_id)
            doc_ref.delete()
            logger.debug(f"Document {document_id} deleted from {collection_path}")

        except Exception as e:
            raise CacheError(
                f"Failed to delete document {document_id} from {collection_path}: {e}"
            ) from e

    def batch_delete(
        self,
        collection_path: str,
        document_ids: list[str],
        batch_size: int = MAX_BATCH_SIZE,
    ) -> int:
        """
        バッチ削除（500件ずつ）

        Args:
            collection_path: コレクションパス
            document_ids: 削除するドキュメントIDのリスト
            batch_size: バッチサイズ（デフォルト500、最大500）

        Returns:
            int: 削除したドキュメント数

        Raises:
            CacheError: 削除に失敗した場合
        """
        if batch_size > MAX_BATCH_SIZE:
            raise ValueError(f"Batch size must be <= {MAX_BATCH_SIZE}")

        if not document_ids:
            logger.debug("No documents to delete")
            return 0

        collection = self.get_collection(collection_path)
        total = len(document_ids)
        deleted = 0

        try:
            for i in range(0, total, batch_size):
                batch = self.client.batch()
                chunk = document_ids[i : i + batch_size]

                for document_id in chunk:
                    batch.delete(collection.document(document_id))

                batch.commit()
                deleted += len(chunk)
                logger.debug(
                    f"Batch delete: {deleted}/{total} documents deleted from {collection_path}"
                )

            logger.info(
                f"Batch delete completed: {deleted} documents deleted from {collection_path}"
            )
            return deleted

        except Exception as e:
            raise CacheError(
                f"Failed to batch delete from {collection_path}: {e}"
            ) from e
