import json
import logging

from chat_widget.infrastructure.logging.logger import LOG_FILE_NAME, JsonFormatter, setup_logger


def _file_handlers(logger, directory):
    target = (directory / LOG_FILE_NAME).resolve()
    return [
        h for h in logger.handlers
        if isinstance(h, logging.FileHandler) and h.baseFilename == str(target)
    ]


def test_setup_logger_does_not_duplicate_handlers(tmp_path):
    logger = setup_logger(tmp_path)
    try:
        assert setup_logger(tmp_path) is logger
        assert len(_file_handlers(logger, tmp_path)) == 1
    finally:
        for handler in _file_handlers(logger, tmp_path):
            logger.removeHandler(handler)
            handler.close()


def test_json_formatter_merges_extra_fields():
    record = logging.LogRecord("chat_widget", logging.INFO, __file__, 1, "Exchange finished", None, None)
    record.extra = {"trace_id": "tr-1", "outcome": "success", "elapsed_ms": 12}

    payload = json.loads(JsonFormatter().format(record))

    assert payload["msg"] == "Exchange finished"
    assert payload["level"] == "INFO"
    assert payload["trace_id"] == "tr-1"
    assert payload["elapsed_ms"] == 12
    assert payload["ts"].endswith("Z")
