import io
import json
import logging

from aws_ip_ranges.logging import configure_logging, get_logger, log_context, resolve_level


def _setup_logger():
    stream = io.StringIO()
    configure_logging(level="INFO", stream=stream, force=True)
    return get_logger("tests"), stream


def test_json_logging_includes_context_and_extras():
    logger, stream = _setup_logger()
    with log_context(service="EC2", region="us-east-1", mode=None):
        logger.info("fetch_complete", extra={"url": "http://localhost/x", "duration": 0.42})
    payload = json.loads(stream.getvalue())
    assert payload["message"] == "fetch_complete"
    assert payload["logger"] == "aws_ip_ranges.tests"
    assert payload["level"] == "INFO"
    assert payload["context"] == {"service": "EC2", "region": "us-east-1"}
    assert payload["extra"] == {"url": "http://localhost/x", "duration": 0.42}


def test_context_is_reset_after_block():
    logger, stream = _setup_logger()
    with log_context(service="EC2"):
        pass
    logger.warning("outside")
    payload = json.loads(stream.getvalue())
    assert "context" not in payload


def test_level_filters_records():
    stream = io.StringIO()
    configure_logging(level="WARNING", stream=stream, force=True)
    get_logger("tests").info("hidden")
    assert stream.getvalue() == ""


def test_resolve_level():
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(None) == logging.WARNING
    assert resolve_level("10") == logging.DEBUG
    assert resolve_level("bogus", default=logging.INFO) == logging.INFO
    assert get_logger().name == "aws_ip_ranges"
    assert get_logger("aws_ip_ranges.cli").name == "aws_ip_ranges.cli"


def test_exception_and_record_time_are_rendered():
    logger, stream = _setup_logger()
    try:
        raise ValueError("bad payload")
    except ValueError:
        logger.error("load_failed", exc_info=True)
    payload = json.loads(stream.getvalue())
    assert "ValueError: bad payload" in payload["exception"]
    assert payload["timestamp"].endswith("+00:00")
    assert "extra" not in payload
