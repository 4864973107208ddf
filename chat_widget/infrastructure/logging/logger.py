import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from chat_widget.config.settings import settings

LOG_FILE_NAME = "widget.log"


class JsonFormatter(logging.Formatter):
    def __init__(self, redact_content: bool = False):
        super().__init__()
        self._redact_content = redact_content

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()
        if self._redact_content:
            msg = (msg or "")[:64]
        payload = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "name": record.name,
            "msg": msg,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logger(log_dir: str | Path | None = None) -> logging.Logger:
    logger = logging.getLogger("chat_widget")
    logger.setLevel(getattr(logging, settings.log_level, logging.INFO))
    target = Path(log_dir or settings.log_dir)
    target.mkdir(parents=True, exist_ok=True)
    log_path = (target / LOG_FILE_NAME).resolve()
    # 重复调用时不重复挂 handler
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == log_path:
            return logger
    fh = logging.FileHandler(log_path, encoding="utf-8")
    fh.setLevel(logger.level)
    fh.setFormatter(JsonFormatter(redact_content=settings.log_redact_content))
    logger.addHandler(fh)
    return logger


logger = setup_logger()
