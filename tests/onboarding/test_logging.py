"""日志配置测试：级别覆盖、文件输出格式与请求 ID 注入。"""

import logging

from app.packages.onboarding.core.logger import (
    ColorFormatter,
    RequestIdFilter,
    TimezoneFormatter,
    build_logging_config,
    set_request_id,
)


def test_level_override_applies_to_every_handler():
    config = build_logging_config("debug")

    assert {handler["level"] for handler in config["handlers"].values()} == {"DEBUG"}
    assert config["loggers"]["app"]["level"] == "DEBUG"
    assert config["root"]["level"] == "DEBUG"


def test_only_console_and_plain_formatters_are_configured():
    config = build_logging_config()

    assert set(config["formatters"]) == {"console", "plain"}
    assert config["handlers"]["default"]["formatter"] == "console"
    assert config["handlers"]["file"]["formatter"] == "plain"
    assert config["formatters"]["plain"]["()"] is TimezoneFormatter


def test_color_formatter_outputs_plain_text_when_not_a_tty():
    formatter = ColorFormatter("%(levelname)s %(message)s")
    formatter.use_colors = False
    record = logging.LogRecord("app.test", logging.ERROR, __file__, 1, "boom", None, None)

    assert formatter.format(record) == "ERROR boom"


def test_request_id_filter_injects_current_request_id():
    record = logging.LogRecord("app.test", logging.INFO, __file__, 1, "hello", None, None)
    set_request_id("req-123")
    try:
        assert RequestIdFilter().filter(record) is True
    finally:
        set_request_id(None)

    assert record.request_id == "req-123"
