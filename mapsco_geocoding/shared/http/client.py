"""HTTPクライアント"""

from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter

from ..exceptions.errors import TransportError
from ..logging.config import get_logger
from ..utils.text import mask_secret_params

logger = get_logger(__name__)

DEFAULT_USER_AGENT = "mapsco-geocoding/1.0 (+https://geocode.maps.co/)"


class HTTPClient:
    """
    ジオコーディングAPI用のHTTPクライアント

    Features:
    - タイムアウト設定
    - セッション管理（コネクション再利用）
    - JSONを要求するデフォルトヘッダー

    リトライは行わない。失敗はすべて呼び出し元にそのまま通知する。
    """

    def __init__(
        self,
        timeout: float = 15,
        user_agent: Optional[str] = None,
    ):
        """
        Args:
            timeout: リクエストタイムアウト（秒）
            user_agent: User-Agentヘッダー
        """
        self.timeout = timeout
        self.user_agent = user_agent or DEFAULT_USER_AGENT

        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """セッションを作成"""
        session = requests.Session()

        adapter = HTTPAdapter(max_retries=0)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        # デフォルトヘッダー
        session.headers.update(
            {
                "User-Agent": self.user_agent,
                "Accept": "application/json",
            }
        )

        return session

    def get(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> requests.Response:
        """
        GETリクエスト

        ステータスコードの検査は呼び出し元で行う（200以外でも例外にしない）。

        Args:
            url: リクエストURL
            params: クエリパラメータ
            headers: 追加ヘッダー

        Returns:
            レスポンスオブジェクト

        Raises:
            TransportError: 接続失敗・タイムアウト時
        """
        # paramsにはAPIキーが含まれるためURLのみログ出力する
        try:
            logger.debug(f"GET request to {url}")
            response = self.session.get(
                url,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
            logger.debug(f"GET request finished: {url} (status={response.status_code})")
            return response

        except requests.RequestException as e:
            logger.error(f"GET request failed: {url} - {type(e).__name__}")
            raise TransportError(
                f"Geocoding API request failed: {mask_secret_params(str(e))}"
            ) from e

    def close(self) -> None:
        """セッションをクローズ"""
        if self.session:
            self.session.close()
            logger.debug("HTTP session closed")

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
