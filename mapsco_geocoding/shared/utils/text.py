"""テキスト処理ユーティリティ"""

import re

_SECRET_PARAM_PATTERN = re.compile(r"(api_key=)[^&\s'\")]+")


def mask_secret_params(text: str) -> str:
    """
    URLやエラーメッセージ中の api_key クエリパラメータを伏せ字にする

    例: "/search?q=Tokyo&api_key=abc123" -> "/search?q=Tokyo&api_key=***"
    """
    if not text:
        return text

    return _SECRET_PARAM_PATTERN.sub(r"\1***", text)
