import logging
import sys
from typing import IO

from pythonjsonlogger import jsonlogger

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(funcName)s %(lineno)d"
# Pillow logs every PNG chunk at DEBUG.
NOISY_LOGGERS = ("PIL",)


def setup_logging(level: str = "INFO", stream: IO[str] | None = None) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    handler = logging.StreamHandler(stream or sys.stdout)
    # Arabic prompts stay readable in the log lines.
    handler.setFormatter(jsonlogger.JsonFormatter(fmt=LOG_FORMAT, json_ensure_ascii=False))
    root.handlers = [handler]
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.INFO))
