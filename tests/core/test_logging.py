import json
import logging
import sys
import pytest
from unittest.mock import MagicMock, patch

from fastapi import Request

from quiz_api.core.logging import (
    CustomJsonFormatter,
    RequestIdFilter,
    app_logger,
    get_logger,
    get_request_logger,
)
from quiz_api.main import mask_authorization

def _make_record(msg: str = "テストメッセージ", lineno: int = 0) -> logging.LogRecord:
    return logging.LogRecord(
        name="test_logger",
        level=logging.INFO,
        pathname="test_logging.py",
        lineno=lineno,
        msg=msg,
        args=(),
        exc_info=None
    )

class TestLogging:
    def test_request_id_filter(self):
        """RequestIdFilterのテスト"""
        filter_instance = RequestIdFilter()
        record = _make_record()

        assert filter_instance.filter(record) is True
        assert record.request_id == "no-request-id"

        # 既にrequest_idが設定されている場合は変更されない
        record.request_id = "test-request-id"
        filter_instance.filter(record)
        assert record.request_id == "test-request-id"

    def test_custom_json_formatter(self):
        """CustomJsonFormatterのテスト"""
        formatter = CustomJsonFormatter()
        record = _make_record(lineno=123)
        record.request_id = "test-request-id"

        log_dict = json.loads(formatter.format(record))

        assert log_dict["level"] == "INFO"
        assert log_dict["message"] == "テストメッセージ"
        assert log_dict["module"] == "test_logging"
        assert log_dict["line"] == 123
        assert log_dict["request_id"] == "test-request-id"
        assert "timestamp" in log_dict
        assert "user_id" not in log_dict

        record.user_id = "test-user-id"
        log_dict = json.loads(formatter.format(record))
        assert log_dict["user_id"] == "test-user-id"

        try:
            raise ValueError("テスト例外")
        except ValueError:
            record.exc_info = sys.exc_info()
            log_dict = json.loads(formatter.format(record))
            assert "ValueError: テスト例外" in log_dict["exception"]

    def test_get_logger(self):
        """get_logger関数のテスト"""
        with patch("quiz_api.core.logging.settings") as mock_settings:
            mock_settings.LOG_LEVEL = "DEBUG"
            mock_settings.ENVIRONMENT = "development"
            mock_settings.LOG_TO_FILE = False

            logger = get_logger("quiz_test_logger")

            assert logger.name == "quiz_test_logger"
            assert logger.level == logging.DEBUG
            assert logger.propagate is False
            assert len(logger.handlers) == 1
            assert isinstance(logger.handlers[0], logging.StreamHandler)
            assert not isinstance(logger.handlers[0].formatter, CustomJsonFormatter)
            assert any(isinstance(f, RequestIdFilter) for f in logger.filters)

            # 本番環境ではJSONフォーマッター
            mock_settings.ENVIRONMENT = "production"
            logger = get_logger("quiz_test_logger_prod")
            assert isinstance(logger.handlers[0].formatter, CustomJsonFormatter)

    def test_get_logger_is_cached(self):
        """同じ名前で呼び出してもハンドラーが増えないことのテスト"""
        first = get_logger("quiz_test_logger_cached")
        handler_count = len(first.handlers)

        second = get_logger("quiz_test_logger_cached")

        assert first is second
        assert len(second.handlers) == handler_count

    def test_get_logger_with_file(self, tmp_path):
        with patch("quiz_api.core.logging.settings") as mock_settings:
            mock_settings.LOG_LEVEL = "INFO"
            mock_settings.ENVIRONMENT = "development"
            mock_settings.LOG_TO_FILE = True
            mock_settings.LOG_FILE_PATH = str(tmp_path / "quiz_api.log")

            logger = get_logger("quiz_test_logger_file")

            file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
            assert len(file_handlers) == 1
            assert isinstance(file_handlers[0].formatter, CustomJsonFormatter)

            for handler in file_handlers:
                logger.removeHandler(handler)
                handler.close()

    def test_get_request_logger(self):
        """get_request_logger関数のテスト"""
        mock_request = MagicMock(spec=Request)
        mock_request.state.request_id = "test-request-id"

        logger_adapter = get_request_logger(mock_request)

        assert isinstance(logger_adapter, logging.LoggerAdapter)
        assert logger_adapter.extra["request_id"] == "test-request-id"

        # リクエストIDがない場合
        mock_request = MagicMock(spec=Request)
        mock_request.state = MagicMock()
        delattr(mock_request.state, "request_id")

        logger_adapter = get_request_logger(mock_request)
        assert logger_adapter.extra["request_id"] == "no-request-id"

    def test_app_logger(self):
        assert isinstance(app_logger, logging.Logger)
        assert app_logger.name == "app"


class TestMaskAuthorization:
    @pytest.mark.parametrize("value,expected", [
        ("Bearer " + "a" * 32, "Bearer ***"),
        ("Bearer short", "Bearer ***"),
        ("Basic dXNlcjpwd2Q=", "Basic ***"),
        ("rawtokenvalue", "***"),
    ])
    def test_masks_credentials_for_every_scheme(self, value, expected):
        """スキームやトークン長に関わらず資格情報がログに残らないことのテスト"""
        assert mask_authorization(value) == expected
