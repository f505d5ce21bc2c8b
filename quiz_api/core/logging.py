import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict

from fastapi import Request

from quiz_api.core.config import settings


class RequestIdFilter(logging.Filter):
    """request_idを持たないログレコードにデフォルト値を設定するフィルター"""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = "no-request-id"
        return True


class CustomJsonFormatter(logging.Formatter):
    """ログレコードを1行のJSONに整形するフォーマッター"""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "request_id": getattr(record, "request_id", "no-request-id"),
        }

        if hasattr(record, "user_id"):
            log_data["user_id"] = record.user_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)


TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] - %(message)s"

# 構成済みのロガー名（リクエストごとにハンドラーを積み増さないため）
_configured_loggers: set = set()


def get_logger(name: str) -> logging.Logger:
    """
    設定に従ってハンドラーとフィルターを構成したロガーを返す

    Args:
        name: ロガー名

    Returns:
        logging.Logger: 構成済みのロガー
    """
    logger = logging.getLogger(name)
    if name in _configured_loggers:
        return logger
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    logger.handlers.clear()
    logger.filters.clear()
    logger.addFilter(RequestIdFilter())

    if settings.ENVIRONMENT == "production":
        formatter: logging.Formatter = CustomJsonFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    stream_handler.addFilter(RequestIdFilter())
    logger.addHandler(stream_handler)

    if settings.LOG_TO_FILE:
        file_handler = RotatingFileHandler(
            settings.LOG_FILE_PATH,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(CustomJsonFormatter())
        file_handler.addFilter(RequestIdFilter())
        logger.addHandler(file_handler)

    logger.propagate = False
    _configured_loggers.add(name)
    return logger


def get_request_logger(request: Request) -> logging.LoggerAdapter:
    """リクエストIDを付与したロガーアダプターを返す"""
    request_id = getattr(request.state, "request_id", "no-request-id")
    return logging.LoggerAdapter(get_logger("app.request"), {"request_id": request_id})


app_logger = get_logger("app")
