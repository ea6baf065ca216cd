"""Tests for mvcsanic.logging: logger naming and structured output."""

import io
import json
import logging
import sys

import pytest

from mvcsanic.logging import JSONFormatter, LoggerConfig, getLogger
from mvcsanic.routing import Router


@pytest.fixture
def stream():
    """Capture the `mvcsanic` logger tree as JSON lines."""
    output = io.StringIO()
    logger = LoggerConfig.setup_logger("mvcsanic", format_type="json", level=logging.DEBUG, stream=output)
    yield output
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def _records(output: io.StringIO):
    return [json.loads(line) for line in output.getvalue().splitlines() if line]


class TestGetLogger:
    def test_short_names_under_framework_namespace(self) -> None:
        assert getLogger("routing").name == "mvcsanic.routing"

    def test_dotted_names_pass_through(self) -> None:
        assert getLogger("myapp.controllers").name == "myapp.controllers"
        assert getLogger("sanic.error").name == "sanic.error"

    def test_root(self) -> None:
        assert getLogger() is logging.getLogger()


class TestJSONFormatter:
    def test_extra_fields_are_kept(self) -> None:
        record = logging.LogRecord("mvcsanic.routing", logging.INFO, __file__, 10, "Route matched", None, None)
        record.route = "product"
        data = json.loads(JSONFormatter().format(record))
        assert data["message"] == "Route matched"
        assert data["level"] == "INFO"
        assert data["logger"] == "mvcsanic.routing"
        assert data["route"] == "product"

    def test_exception_is_formatted(self) -> None:
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())
        data = json.loads(JSONFormatter().format(record))
        assert "ValueError: boom" in data["exception"]


class TestLoggerConfig:
    def test_text_format(self) -> None:
        output = io.StringIO()
        logger = LoggerConfig.setup_logger("mvcsanic_test_text", format_type="text", level=logging.INFO, stream=output)
        logger.info("hello")
        assert " - mvcsanic_test_text - INFO - hello" in output.getvalue()
        assert logger.propagate is False

    def test_rotating_file(self, tmp_path) -> None:
        log_file = tmp_path / "logs" / "app.log"
        logger = LoggerConfig.setup_logger(
            "mvcsanic_test_file", format_type="json", level=logging.INFO, file_name=log_file, stream=io.StringIO()
        )
        logger.warning("written", extra={"path": "/x"})
        for handler in logger.handlers:
            handler.flush()
        data = json.loads(log_file.read_text().splitlines()[0])
        assert data["path"] == "/x"
        for handler in logger.handlers:
            handler.close()

    @pytest.mark.parametrize(
        "environment, level",
        [("production", logging.WARNING), ("development", logging.DEBUG), ("Testing", logging.ERROR), ("other", logging.INFO)],
    )
    def test_level_by_environment(self, environment: str, level: int) -> None:
        assert LoggerConfig.get_level_by_environment(environment) == level


class TestRoutingLogs:
    def test_match_is_logged(self, stream, routes) -> None:
        Router(routes).route("/products/5")
        matched = [record for record in _records(stream) if record["message"] == "Route matched"]
        assert matched[0]["route"] == "product"
        assert matched[0]["logger"] == "mvcsanic.routing"

    def test_query_string_fallback_is_logged(self, stream, routes) -> None:
        Router(routes).url("product", {})
        fallback = [record for record in _records(stream) if record["message"] == "URL built from query string"]
        assert fallback[0]["param"] == "id"
