"""
Logging Resource

Builds the application logger from the ``[log]`` table: a log file rotated
on a fixed interval, text or JSON records, and optional colored output on
stdout.
"""

import json
import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import List, Optional

from colorama import Fore, Style, just_fix_windows_console

from ..conf.configuration import Configuration
from ..conf.settings import LogSettings, load_log_settings
from ..resource import Resource

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s %(module)s.%(funcName)s %(message)s"


class ColorFormatter(logging.Formatter):
    """Text formatter that colors each record by level."""

    color_map = {
        logging.DEBUG: Fore.CYAN,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.MAGENTA,
    }

    def format(self, record):
        color = self.color_map.get(record.levelno, Fore.WHITE)
        message = super().format(record)
        return f"{color}{message}{Style.RESET_ALL}"


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record):
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "func": f"{record.module}.{record.funcName}",
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["error"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


class Log(Resource):
    """
    Logging resource configured from the ``[log]`` table.

    Records go to a file rotated every ``rotation_interval``, keeping
    ``rotation_counts`` old files, and optionally to stdout as well.
    """

    def __init__(self, config: Configuration, logger_name: Optional[str] = None):
        self.config = config
        self.logger_name = logger_name or config.app_name or "cbcipher"
        self.logger: Optional[logging.Logger] = None
        self.settings: Optional[LogSettings] = None
        self._handlers: List[logging.Handler] = []

    @property
    def name(self) -> str:
        return "log"

    def initialize(self) -> None:
        # handlers from an earlier initialize would otherwise stay open
        self.finalize()
        settings = load_log_settings(self.config)

        file_handler = self._rotating_handler(settings)
        handlers: List[logging.Handler] = [file_handler]
        if settings.output_stdout:
            handlers.append(self._stdout_handler(settings))

        logger = logging.getLogger(self.logger_name)
        logger.setLevel(settings.level)
        for handler in handlers:
            logger.addHandler(handler)

        self.settings, self.logger, self._handlers = settings, logger, handlers

    def _rotating_handler(self, settings: LogSettings) -> logging.Handler:
        path = Path(settings.basename)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = TimedRotatingFileHandler(
            path,
            when="S",
            interval=int(settings.rotation_interval.total_seconds()),
            backupCount=settings.rotation_counts,
            encoding="utf-8",
        )
        handler.setFormatter(self._formatter(settings))
        return handler

    def _stdout_handler(self, settings: LogSettings) -> logging.Handler:
        handler = logging.StreamHandler(sys.stdout)
        if settings.format == "text":
            just_fix_windows_console()
            handler.setFormatter(ColorFormatter(TEXT_FORMAT))
        else:
            handler.setFormatter(self._formatter(settings))
        return handler

    @staticmethod
    def _formatter(settings: LogSettings) -> logging.Formatter:
        if settings.format == "json":
            return JsonFormatter()
        return logging.Formatter(TEXT_FORMAT)

    def finalize(self) -> None:
        for handler in self._handlers:
            if self.logger is not None:
                self.logger.removeHandler(handler)
            handler.close()
        self._handlers = []
