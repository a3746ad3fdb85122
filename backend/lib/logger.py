"""
Logging Utility for the Mentor Backend

Console logging for the mentor service:
- Color-coded levels (only when attached to a terminal)
- Per-component icons derived from the logger name
- Section banners for request lifecycles
- Compact rendering of dict/list payloads
"""

import json
import logging
import sys
from datetime import datetime
from pprint import pformat
from typing import Any, Dict, List, Optional


class Colors:
    """ANSI escape codes."""
    RESET = '\033[0m'
    BOLD = '\033[1m'

    DEBUG = '\033[36m'      # Cyan
    INFO = '\033[32m'       # Green
    WARNING = '\033[33m'    # Yellow
    ERROR = '\033[31m'      # Red
    CRITICAL = '\033[35m'   # Magenta

    BANNER = '\033[94m'     # Bright Blue
    DETAIL = '\033[96m'     # Bright Cyan
    KEY = '\033[93m'        # Bright Yellow
    MUTED = '\033[90m'      # Dark Gray


LEVEL_COLORS = {
    'DEBUG': Colors.DEBUG,
    'INFO': Colors.INFO,
    'WARNING': Colors.WARNING,
    'ERROR': Colors.ERROR,
    'CRITICAL': Colors.CRITICAL,
}

LEVEL_ICONS = {
    'DEBUG': '🔍',
    'INFO': 'ℹ️',
    'WARNING': '⚠️',
    'ERROR': '❌',
    'CRITICAL': '🚨',
}

# Keyed by the last dotted component of the logger name
COMPONENT_ICONS = {
    'main': '🌐',
    'mentor_session': '🎓',
    'session_manager': '💾',
    'response_synthesizer': '🧠',
    'streaming_presenter': '💬',
    'resource_gateway': '🎥',
    'learner_data_manager': '📊',
    'learner_context': '📊',
    'idle_monitor': '⏱️',
    'auth': '🔐',
}


def _is_terminal() -> bool:
    return sys.stdout.isatty()


class ColoredFormatter(logging.Formatter):
    """Single-line formatter: time, component icon, level, logger name, message."""

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and _is_terminal()

    def _paint(self, text: str, color: str) -> str:
        return f"{color}{text}{Colors.RESET}" if self.use_colors else text

    def format(self, record: logging.LogRecord) -> str:
        component = record.name.rsplit('.', 1)[-1]
        icon = COMPONENT_ICONS.get(component, LEVEL_ICONS.get(record.levelname, '•'))
        clock = datetime.fromtimestamp(record.created).strftime('%H:%M:%S.%f')[:-3]

        message = record.getMessage()
        stripped = message.strip()
        if stripped[:1] in ('{', '['):
            try:
                message = "\n" + pformat(json.loads(stripped), indent=2, width=100)
            except ValueError:
                pass

        line = (
            f"{self._paint(f'[{clock}]', Colors.MUTED)} "
            f"{icon} {self._paint(f'{record.levelname:8s}', LEVEL_COLORS.get(record.levelname, Colors.RESET))} "
            f"{self._paint(record.name, Colors.BOLD)} | {message}"
        )
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def render(data: Any, indent: int = 2) -> str:
    """Indented text for nested dicts/lists; lists longer than 5 are truncated to 3."""
    pad = ' ' * indent
    closing = ' ' * (indent - 2)
    if isinstance(data, dict):
        lines = [f"{pad}{key}: {render(value, indent + 2)}" for key, value in data.items()]
        return "{\n" + "\n".join(lines) + f"\n{closing}}}"
    if isinstance(data, list):
        shown: List[Any] = data[:3] if len(data) > 5 else data
        lines = [f"{pad}{render(item, indent + 2)}" for item in shown]
        if len(data) > 5:
            lines.append(f"{pad}... ({len(data)} items total)")
        return "[\n" + ",\n".join(lines) + f"\n{closing}]"
    return str(data)


class StructuredLogger:
    """Logger wrapper with banners and optional structured payloads."""

    def __init__(self, name: str, logger: Optional[logging.Logger] = None):
        self.name = name
        self.logger = logger or logging.getLogger(name)

    def _with_data(self, message: str, data: Optional[Dict[str, Any]]) -> str:
        return f"{message}\n{render(data)}" if data else message

    def _banner(self, marker: str, title: str, data: Optional[Dict[str, Any]], color: str):
        colored = _is_terminal()
        start, end = (color, Colors.RESET) if colored else ('', '')
        print(f"\n{start}{marker}{end}")
        print(f"{start}{title}{end}")
        if data:
            print(f"{Colors.DETAIL if colored else ''}{render(data)}{end}")
        print(f"{start}{marker}{end}\n")

    def section(self, title: str, data: Optional[Dict[str, Any]] = None):
        self._banner("=" * 80, f"📋 {title.upper()}", data, Colors.BANNER)

    def debug(self, message: str, data: Optional[Dict[str, Any]] = None):
        self.logger.debug(self._with_data(message, data))

    def info(self, message: str, data: Optional[Dict[str, Any]] = None):
        self.logger.info(self._with_data(message, data))

    def warning(self, message: str, data: Optional[Dict[str, Any]] = None):
        self.logger.warning(self._with_data(message, data))

    def error(self, message: str, error: Optional[Exception] = None, data: Optional[Dict[str, Any]] = None):
        if error is not None:
            message = f"{message} Error: {type(error).__name__}: {error}"
        self.logger.error(self._with_data(message, data), exc_info=error)

    def success(self, message: str, data: Optional[Dict[str, Any]] = None):
        self.logger.info(self._with_data(f"✅ {message}", data))

    def request(self, method: str, path: str, user_id: Optional[str] = None, data: Optional[Dict[str, Any]] = None):
        details = {"user_id": user_id[:20] + "..." if user_id and len(user_id) > 20 else user_id}
        details.update(data or {})
        self.logger.info(self._with_data(f"📥 {method} {path}", details))

    def response(self, status: int, path: str, duration: Optional[float] = None, data: Optional[Dict[str, Any]] = None):
        details = {"duration_ms": f"{duration * 1000:.2f}" if duration is not None else None}
        details.update(data or {})
        self.logger.info(self._with_data(f"📤 {status} {path}", details))


def setup_logging(level: int = logging.INFO, use_colors: bool = True) -> logging.Logger:
    """Install the colored console handler on the root logger."""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(use_colors=use_colors))
    root.setLevel(level)
    root.addHandler(handler)

    for noisy in ('asyncio', 'httpx', 'httpcore', 'urllib3', 'requests'):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return root


def get_logger(name: str) -> StructuredLogger:
    return StructuredLogger(name, logging.getLogger(name))
