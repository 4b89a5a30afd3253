import json
import logging
import sys
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    SUCCESS = "SUCCESS"


class Colors:
    """ANSI color codes for console output"""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'

    BRIGHT_BLACK = '\033[90m'
    BRIGHT_RED = '\033[91m'
    BRIGHT_GREEN = '\033[92m'
    BRIGHT_YELLOW = '\033[93m'
    BRIGHT_BLUE = '\033[94m'
    BRIGHT_CYAN = '\033[96m'
    WHITE = '\033[37m'


# SUCCESS is an INFO record with its own colour
_STDLIB_LEVELS: Dict[LogLevel, int] = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.SUCCESS: logging.INFO,
}


class BoardLogger:
    """
    Context-tagged service logger for the board domain services.

    Lines look like ``[12:00:01.123] [POST/CREATE] [INFO] Post created | post_id=3``.
    Records are emitted through the standard ``logging`` module under
    ``board.<service>`` so handlers and levels stay configurable.
    """

    def __init__(self, service_name: str = "BOARD", enable_colors: bool = True):
        self.service_name = service_name.upper()
        self.enable_colors = enable_colors and sys.stdout.isatty()
        self._logger = logging.getLogger(f"board.{service_name.lower()}")

        self.level_colors = {
            LogLevel.DEBUG: Colors.BRIGHT_CYAN,
            LogLevel.INFO: Colors.BRIGHT_BLUE,
            LogLevel.WARNING: Colors.BRIGHT_YELLOW,
            LogLevel.ERROR: Colors.BRIGHT_RED,
            LogLevel.SUCCESS: Colors.BRIGHT_GREEN,
        }

    def _get_timestamp(self) -> str:
        return datetime.now().strftime("%H:%M:%S.%f")[:-3]

    def _colorize(self, text: str, color: str) -> str:
        if not self.enable_colors:
            return text
        return f"{color}{text}{Colors.RESET}"

    def _format_extras(self, extras: Dict[str, Any]) -> str:
        parts = []
        for key, value in extras.items():
            if isinstance(value, (dict, list)):
                value_str = json.dumps(value, default=str, separators=(',', ':'))
                if len(value_str) > 100:
                    value_str = value_str[:100] + "..."
            else:
                value_str = str(value)
            parts.append(f"{key}={value_str}")
        return ", ".join(parts)

    def _format_message(self, level: LogLevel, message: str, context: Optional[str] = None) -> str:
        level_color = self.level_colors.get(level, Colors.WHITE)
        service_context = self.service_name
        if context:
            service_context += f"/{context.upper()}"

        timestamp_text = self._colorize(f"[{self._get_timestamp()}]", Colors.DIM)
        service_text = self._colorize(f"[{service_context}]", Colors.BRIGHT_BLACK)
        level_text = self._colorize(f"[{level.value}]", level_color + Colors.BOLD)

        return f"{timestamp_text} {service_text} {level_text} {message}"

    def _log(self, level: LogLevel, message: str, context: Optional[str] = None, **kwargs):
        stdlib_level = _STDLIB_LEVELS[level]
        if not self._logger.isEnabledFor(stdlib_level):
            return

        formatted_message = self._format_message(level, message, context)
        if kwargs:
            formatted_message += self._colorize(f" | {self._format_extras(kwargs)}", Colors.DIM)

        self._logger.log(stdlib_level, formatted_message)

    def debug(self, message: str, context: Optional[str] = None, **kwargs):
        self._log(LogLevel.DEBUG, message, context, **kwargs)

    def info(self, message: str, context: Optional[str] = None, **kwargs):
        self._log(LogLevel.INFO, message, context, **kwargs)

    def warning(self, message: str, context: Optional[str] = None, **kwargs):
        self._log(LogLevel.WARNING, message, context, **kwargs)

    def error(self, message: str, context: Optional[str] = None, **kwargs):
        self._log(LogLevel.ERROR, message, context, **kwargs)

    def success(self, message: str, context: Optional[str] = None, **kwargs):
        self._log(LogLevel.SUCCESS, message, context, **kwargs)


def configure_logging(level: int = logging.INFO):
    """Attach a plain stdout handler to the ``board`` logger tree once."""
    root = logging.getLogger("board")
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    root.setLevel(level)


# Global logger instances for different services
post_logger = BoardLogger("POST")
comment_logger = BoardLogger("COMMENT")
reaction_logger = BoardLogger("REACTION")
report_logger = BoardLogger("REPORT")
admin_logger = BoardLogger("ADMIN")
auth_logger = BoardLogger("AUTH")
search_logger = BoardLogger("SEARCH")
api_logger = BoardLogger("API")


