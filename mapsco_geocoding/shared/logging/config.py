"""ロギング設定"""
import logging
import sys
from typing import Optional

# ライブラリのロガー名（ルートロガーはアプリケーション側に任せる）
PACKAGE_LOGGER_NAME = "mapsco_geocoding"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# 出力を抑えるサードパーティのロガー
NOISY_LOGGERS = ("urllib3", "google")

_logger_configured = False


def _console_handler(log_level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    return handler


def _cloud_handler(log_level: int, project_id: Optional[str]) -> logging.Handler:
    """
    Cloud Logging用のハンドラーを生成

    Raises:
        Exception: クライアントの生成に失敗した場合（認証情報なしなど）
    """
    from google.cloud import logging as cloud_logging
    from google.cloud.logging import handlers as cloud_handlers

    client = cloud_logging.Client(project=project_id)
    handler = cloud_handlers.CloudLoggingHandler(client, name=PACKAGE_LOGGER_NAME)
    handler.setLevel(log_level)
    return handler


def setup_logging(
    level: str = "INFO",
    enable_cloud_logging: bool = False,
    project_id: Optional[str] = None,
) -> logging.Logger:
    """
    ライブラリのロガーを設定（2回目以降の呼び出しは何もしない）

    Args:
        level: ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_cloud_logging: Cloud Loggingを有効にするか
        project_id: GCPプロジェクトID (Cloud Logging有効時に使用)

    Returns:
        logging.Logger: ライブラリのロガー
    """
    global _logger_configured

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if _logger_configured:
        return package_logger

    log_level = getattr(logging, level.upper(), logging.INFO)

    package_logger.setLevel(log_level)
    package_logger.handlers.clear()
    package_logger.propagate = False
    package_logger.addHandler(_console_handler(log_level))

    if enable_cloud_logging:
        try:
            package_logger.addHandler(_cloud_handler(log_level, project_id))
            package_logger.info(f"Cloud Logging enabled: project={project_id}")
        except Exception as e:
            package_logger.warning(f"Failed to enable Cloud Logging: {e}")

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _logger_configured = True
    package_logger.debug(f"Logging configured: level={logging.getLevelName(log_level)}")
    return package_logger


def reset_logging() -> None:
    """ロギング設定を初期状態に戻す（テスト用）"""
    global _logger_configured

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
    _logger_configured = False


def get_logger(name: str) -> logging.Logger:
    """__name__ からロガーを取得"""
    return logging.getLogger(name)
