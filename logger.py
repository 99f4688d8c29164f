# logger.py
import logging
import os
import sys
import tempfile

LOGGER_NAME = "wiki_installer"
LOG_FILE = os.environ.get("WIKI_INSTALLER_LOG", "/var/log/wiki_installer.log")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _file_handler(path: str) -> logging.FileHandler:
    try:
        return logging.FileHandler(path)
    except OSError:
        # /var/log needs root
        fallback = os.path.join(tempfile.gettempdir(), os.path.basename(path))
        return logging.FileHandler(fallback)


def setup_logger(name: str = LOGGER_NAME, log_file: str = LOG_FILE) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.DEBUG)
    fmt = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")

    for handler, level in (
        (_file_handler(log_file), logging.DEBUG),
        (logging.StreamHandler(sys.stderr), logging.WARNING),
    ):
        handler.setLevel(level)
        handler.setFormatter(fmt)
        logger.addHandler(handler)
    return logger

log = setup_logger()
