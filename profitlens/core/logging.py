"""
Logging configuration - console output plus optional rotating log file
"""
import logging
import os
from logging.handlers import RotatingFileHandler

from .config import settings

_configured = False


def setup_logging(level: str = None, to_file: bool = None) -> None:
    global _configured
    if _configured:
        return

    level_name = (level or settings.LOG_LEVEL).upper()
    handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    ))
    handlers.append(console_handler)

    write_file = settings.LOG_TO_FILE if to_file is None else to_file
    if write_file:
        os.makedirs(settings.LOGS_PATH, exist_ok=True)
        # 10MB per file, keep 5
        file_handler = RotatingFileHandler(
            os.path.join(settings.LOGS_PATH, "profitlens.log"),
            maxBytes=10*1024*1024,
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        handlers.append(file_handler)

    # Quiet noisy libraries before basicConfig
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)

    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), handlers=handlers)
    _configured = True
