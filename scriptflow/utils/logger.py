import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

# Fields copied from LogRecord.extra into the JSON payload
STRUCTURED_FIELDS = ("flow", "attempt", "status_code", "category", "delay_ms")


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging."""
    def format(self, record):
        log_obj = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "line": record.lineno,
        }
        for key in STRUCTURED_FIELDS:
            if hasattr(record, key):
                log_obj[key] = getattr(record, key)
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_obj)


def configure_logging(level: str = "INFO", json_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the ``scriptflow`` logger tree.
    Writes human readable logs to stdout and, when ``json_file`` is given,
    structured JSON logs to that file.
    """
    logger = logging.getLogger("scriptflow")
    logger.setLevel(level.upper())

    # Avoid adding duplicate handlers if called multiple times
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    ))
    logger.addHandler(console_handler)

    if json_file:
        path = Path(json_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path)
        file_handler.setFormatter(JsonFormatter())
        logger.addHandler(file_handler)

    return logger
