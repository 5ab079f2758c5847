# xts_interactive/logger.py
import json
import logging
import os
from datetime import datetime
from typing import Any, Optional

from . import config

PACKAGE_LOGGER = "xts_interactive"
DATE_FMT = "%b %d %Y %H:%M:%S"

INIT_BANNER = (
    "============================================\n"
    "Initialized logger\n"
    "==================================================\n"
)


def ensure_folder(path: str):
    if not os.path.exists(path):
        os.makedirs(path, exist_ok=True)


def log_file_name(log_dir: str, when: Optional[datetime] = None) -> str:
    """debug_DDMMYYYY.txt inside log_dir"""
    when = when or datetime.now()
    return os.path.join(log_dir, f"debug_{when.strftime('%d%m%Y')}.txt")


def run_banner(when: Optional[datetime] = None) -> str:
    when = when or datetime.now()
    return (
        "============================================\n"
        f" RUN the application on {when.strftime(DATE_FMT)}\n"
        "==================================================\n"
    )


def format_message(value: Any) -> str:
    if isinstance(value, (dict, list, tuple)):
        try:
            return json.dumps(value, indent=2, default=str)
        except (TypeError, ValueError):
            return str(value)
    return str(value)


class DailyFileHandler(logging.FileHandler):
    """
    Appends to <log_dir>/debug_<DDMMYYYY>.txt and moves to a new file when
    the date changes.
    """
    def __init__(self, log_dir: str, encoding: str = "utf-8"):
        self.log_dir = log_dir
        ensure_folder(log_dir)
        super().__init__(log_file_name(log_dir), mode="a", encoding=encoding, delay=True)

    def emit(self, record):
        try:
            current = os.path.abspath(log_file_name(self.log_dir))
            if current != self.baseFilename:
                self.acquire()
                try:
                    self.close()
                    self.baseFilename = current
                finally:
                    self.release()
            super().emit(record)
        except Exception:
            self.handleError(record)


def write_banner(path: str):
    banner = run_banner() if os.path.exists(path) else INIT_BANNER
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(banner)
    except OSError:
        logging.getLogger(PACKAGE_LOGGER).debug("could not write banner to %s", path)


def setup_logging(log_dir: Optional[str] = None, console: bool = True, level: int = logging.INFO) -> logging.Logger:
    """
    Attach the daily debug file handler (and optionally a console handler) to
    the package logger. Safe to call more than once.
    """
    log_dir = log_dir or config.LOG_DIR
    ensure_folder(log_dir)
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    pkg_logger.setLevel(level)

    target = os.path.abspath(log_dir)
    have_file = any(isinstance(h, DailyFileHandler) and os.path.abspath(h.log_dir) == target
                    for h in pkg_logger.handlers)
    if not have_file:
        write_banner(log_file_name(log_dir))
        fh = DailyFileHandler(log_dir)
        fh.setFormatter(logging.Formatter("[%(asctime)s] %(message)s", datefmt=DATE_FMT))
        pkg_logger.addHandler(fh)

    if console and not any(type(h) is logging.StreamHandler for h in pkg_logger.handlers):
        sh = logging.StreamHandler()
        sh.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        pkg_logger.addHandler(sh)

    pkg_logger.info("logger module initialized successfully!")
    return pkg_logger
