"""HTTPClientのテスト"""
from typing import Any

import pytest
import requests

from fakes import make_response
from mapsco_geocoding.shared.exceptions.errors import TransportError
from mapsco_geocoding.shared.http.client import HTTPClient
from mapsco_geocoding.shared.utils.text import mask_secret_params


class StubSession:
    """requests.Sessionの代わり"""

    def __init__(self, result: Any) -> None:
        self.result = result
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def get(self, url: str, **kwargs: Any) -> Any:
        self.calls.append({"url": url, **kwargs})
        if isinstance(self.result, Exception):
            raise self.result
        return self.result

    def close(self) -> None:
        self.closed = True


def test_default_headers() -> None:
    """JSONを要求するヘッダーを設定する"""
    client = HTTPClient()

    assert client.session.headers["Accept"] == "application/json"
    assert client.timeout == 15
    client.close()


def test_get_passes_timeout_and_params() -> None:
    """タイムアウトとパラメータを渡し、200以外も例外にしない"""
    client = HTTPClient(timeout=3)
    session = StubSession(make_response(status_code=503, body={"error": "busy"}))
    client.session = session  # type: ignore[assignment]

    response = client.get("https://geocode.maps.co/search", params={"q": "Tokyo"})

    assert response.status_code == 503
    assert session.calls[0]["timeout"] == 3
    assert session.calls[0]["params"] == {"q": "Tokyo"}


def test_get_wraps_request_exception() -> None:
    """requestsの例外はTransportErrorに変換し、APIキーは伏せる"""
    client = HTTPClient()
    client.session = StubSession(  # type: ignore[assignment]
        requests.ConnectionError(
            "Max retries exceeded with url: /search?q=Tokyo&api_key=secret123"
        )
    )

    with pytest.raises(TransportError) as exc_info:
        client.get("https://geocode.maps.co/search")

    assert "secret123" not in str(exc_info.value)
    assert "api_key=***" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, requests.ConnectionError)


def test_context_manager_closes_session() -> None:
    """with文を抜けるとセッションを閉じる"""
    session = StubSession(None)

    with HTTPClient() as client:
        client.session = session  # type: ignore[assignment]

    assert session.closed is True


@pytest.mark.parametrize(
    "text,expected",
    [
        ("/search?q=a&api_key=abc&format=json", "/search?q=a&api_key=***&format=json"),
        ("/reverse?lat=1&api_key=abc", "/reverse?lat=1&api_key=***"),
        ("no secrets here", "no secrets here"),
        ("", ""),
    ],
)
def test_mask_secret_params(text: str, expected: str) -> None:
    """api_keyパラメータを伏せ字にする"""
    assert mask_secret_params(text) == expected
