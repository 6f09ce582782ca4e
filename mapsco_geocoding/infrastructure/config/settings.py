"""アプリケーション設定（Pydantic Settings）"""
from typing import TYPE_CHECKING, Literal, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from ...features.geocoding.domain.enums import ResponseFormat
from ...features.geocoding.domain.models import (
    API_BASE_URL,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    ClientConfig,
)
from ...shared.exceptions.errors import ConfigurationError
from ...shared.logging.config import setup_logging

if TYPE_CHECKING:
    from ...features.cache.domain.store import CacheStore


class Settings(BaseSettings):
    """
    アプリケーション設定

    環境変数（接頭辞 MAPSCO_）または .env ファイルから読み込む。
    例: MAPSCO_API_KEY, MAPSCO_CACHE_TTL_SECONDS
    """

    model_config = SettingsConfigDict(
        env_prefix="MAPSCO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Geocoding API
    api_key: Optional[SecretStr] = Field(
        default=None,
        description="Maps.co APIキー",
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.JSON,
        description="レスポンス形式 (json, xml, jsonv2, geojson, geocodejson)",
    )
    base_url: str = Field(
        default=API_BASE_URL,
        description="APIのベースURL",
    )
    request_timeout: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        description="リクエストのタイムアウト（秒）",
    )

    # Cache
    cache_enabled: bool = Field(
        default=True,
        description="キャッシュを有効にするか",
    )
    cache_ttl_seconds: int = Field(
        default=DEFAULT_CACHE_TTL_SECONDS,
        ge=0,
        description="キャッシュの有効期限（秒、0は期限なし）",
    )
    cache_backend: Literal["memory", "firestore"] = Field(
        default="memory",
        description="キャッシュストア (memory, firestore)",
    )

    # Firestore（cache_backend=firestore の場合）
    gcp_project_id: Optional[str] = Field(
        default=None,
        description="GCPプロジェクトID",
    )
    firestore_database_id: str = Field(
        default="(default)",
        description="FirestoreデータベースID",
    )
    firestore_cache_collection: str = Field(
        default="geocoding_cache",
        description="キャッシュ用コレクション名",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    gcp_logging_enabled: bool = Field(
        default=False,
        description="Cloud Loggingを有効にするか",
    )

    def to_client_config(self) -> ClientConfig:
        """
        クライアント設定に変換

        Raises:
            ConfigurationError: APIキーが未設定の場合
        """
        if self.api_key is None or not self.api_key.get_secret_value():
            raise ConfigurationError("MAPSCO_API_KEY is not set")

        return ClientConfig(
            api_key=self.api_key.get_secret_value(),
            format=self.response_format,
            cache_enabled=self.cache_enabled,
            cache_ttl_seconds=self.cache_ttl_seconds,
            timeout=self.request_timeout,
            base_url=self.base_url,
        )

    def configure_logging(self) -> None:
        """log_level と gcp_logging_enabled に従ってロギングを設定"""
        setup_logging(
            level=self.log_level,
            enable_cloud_logging=self.gcp_logging_enabled,
            project_id=self.gcp_project_id,
        )

    def create_cache_store(self) -> "CacheStore":
        """cache_backend に応じたキャッシュストアを生成"""
        if self.cache_backend == "firestore":
            from ...features.cache.providers.firestore_cache_store import (
                FirestoreCacheStore,
            )
            from ...features.storage.clients.firestore_client import FirestoreClient

            client = FirestoreClient(
                project_id=self.gcp_project_id,
                database_id=self.firestore_database_id,
            )
            return FirestoreCacheStore(client, collection=self.firestore_cache_collection)

        from ...features.cache.providers.memory_cache_store import InMemoryCacheStore

        return InMemoryCacheStore()
