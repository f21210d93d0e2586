import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from .text_processor import TextProcessor

FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s'
CONSOLE_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def log_file_for(base_file: str, scope: Optional[str] = None) -> Path:
    """Log file path, with an optional sanitized scope suffix before the extension."""
    path = Path(base_file)
    if not scope:
        return path
    return path.with_name(f"{path.stem}-{TextProcessor.sanitize_segment(scope)}{path.suffix}")


def setup_logging(config: Dict[str, Any], scope: Optional[str] = None) -> logging.Logger:
    """
    Set up logging for both file and console output.

    Handlers are attached to the root logger once per call, replacing any
    existing ones. Components obtain their own named loggers and receive
    them explicitly at construction.
    """
    log_config = config['logging']
    log_file = log_file_for(log_config['file'], scope)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    log_level = getattr(logging, str(log_config['level']).upper(), logging.INFO)
    root_logger.setLevel(log_level)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=log_config.get('max_size', 10485760),
        backupCount=log_config.get('backup_count', 5),
        encoding='utf-8'
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.debug(f"Logging initialized - Level: {log_config['level']}, file: {log_file}")
    return root_logger
