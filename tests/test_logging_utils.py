import logging

from loguru import logger

from rtp_core.logging_utils import log_event, setup_logging


def test_log_event_quotes_only_when_needed() -> None:
    message = log_event("store.update", table="products", error="no rows", missing=None, count=2)

    assert message == "evt=store.update | table=products | error='no rows' | missing=None | count=2"


def test_setup_logging_routes_stdlib_into_loguru(monkeypatch) -> None:
    monkeypatch.setenv("RTP_LOG_LEVEL", "debug")
    assert setup_logging() == "DEBUG"

    lines: list[str] = []
    sink_id = logger.add(lambda message: lines.append(str(message)), format="{extra[origin]} {message}")
    try:
        logging.getLogger("uvicorn.error").info("server ready")
        logging.getLogger("httpx").info("HTTP Request: GET /")
    finally:
        logger.remove(sink_id)
        monkeypatch.setenv("RTP_LOG_LEVEL", "INFO")
        setup_logging()

    assert any(line.startswith("error:") and "server ready" in line for line in lines)
    assert not any("HTTP Request" in line for line in lines)


def test_unknown_level_falls_back_to_info(monkeypatch) -> None:
    monkeypatch.setenv("RTP_LOG_LEVEL", "loud")

    assert setup_logging() == "INFO"
