"""
debug.py - Debug and logging functionality for the c4bot chat bot

This module provides centralized debug and logging capabilities with configurable levels,
per-component filtering, and timing probes used to measure slow chat operations.
"""

import logging
import sys
import time
from contextlib import contextmanager
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional, Set

# Define debug levels as an Enum for type checking
class DebugLevel(Enum):
    NONE = 0
    ERROR = 1
    WARNING = 2
    INFO = 3
    DEBUG = 4
    TRACE = 5

# Mapping to standard logging levels
LEVEL_MAP = {
    DebugLevel.NONE: logging.CRITICAL + 1,
    DebugLevel.ERROR: logging.ERROR,
    DebugLevel.WARNING: logging.WARNING,
    DebugLevel.INFO: logging.INFO,
    DebugLevel.DEBUG: logging.DEBUG,
    DebugLevel.TRACE: logging.DEBUG  # Python logging doesn't have TRACE
}

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
CONSOLE_HANDLER_NAME = "c4bot-console"


class DebugManager:
    """Manages debug and logging functionality for the bot."""

    def __init__(self):
        self._level = DebugLevel.INFO
        self._enabled = True
        self._log_to_file = False
        self._log_file = None
        self._enabled_components: Set[str] = set()  # Empty set means all components
        self._logger = self._setup_logger()
        self._performance_markers: Dict[str, float] = {}

    def _setup_logger(self) -> logging.Logger:
        """Configure and return a logger instance."""
        logger = logging.getLogger("c4bot")
        logger.setLevel(LEVEL_MAP[self._level])

        # Guard against duplicate handlers when the module is reloaded
        if not any(h.get_name() == CONSOLE_HANDLER_NAME for h in logger.handlers):
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S'))
            console_handler.set_name(CONSOLE_HANDLER_NAME)
            logger.addHandler(console_handler)

        return logger

    @property
    def level(self) -> DebugLevel:
        return self._level

    def configure(self, level: DebugLevel = None,
                 enabled: bool = None,
                 log_file: str = None,
                 components: List[str] = None):
        """
        Configure the debug manager settings.

        Args:
            level: Debug level to set
            enabled: Whether debugging is enabled
            log_file: Path to log file ("" disables file logging)
            components: List of components to enable debugging for (empty for all)
        """
        if level is not None:
            self._level = level
            self._logger.setLevel(LEVEL_MAP[level])

        if enabled is not None:
            self._enabled = enabled

        if log_file is not None:
            self._log_file = log_file
            self._log_to_file = bool(log_file)

            # Remove existing file handlers
            for handler in self._logger.handlers[:]:
                if isinstance(handler, logging.FileHandler):
                    self._logger.removeHandler(handler)
                    handler.close()

            if self._log_to_file:
                file_handler = logging.FileHandler(log_file)
                file_handler.setFormatter(
                    logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
                self._logger.addHandler(file_handler)

        if components is not None:
            self._enabled_components = set(components)

    def _should_log(self, level: DebugLevel, component: str = None) -> bool:
        """Determine if a message should be logged based on settings."""
        if not self._enabled:
            return False

        if level.value > self._level.value:
            return False

        if component and self._enabled_components and component not in self._enabled_components:
            return False

        return True

    def log(self, level: DebugLevel, message: str, component: str = None):
        """
        Log a message at the specified level.

        Args:
            level: Debug level for the message
            message: The message to log
            component: Optional component name for filtering
        """
        if not self._should_log(level, component):
            return

        formatted_message = message
        if component:
            formatted_message = f"[{component}] {message}"

        if level == DebugLevel.ERROR:
            self._logger.error(formatted_message)
        elif level == DebugLevel.WARNING:
            self._logger.warning(formatted_message)
        elif level == DebugLevel.INFO:
            self._logger.info(formatted_message)
        elif level == DebugLevel.DEBUG:
            self._logger.debug(formatted_message)
        elif level == DebugLevel.TRACE:
            self._logger.debug(f"TRACE: {formatted_message}")

    # Convenience methods for each level
    def error(self, message: str, component: str = None):
        """Log an error message."""
        self.log(DebugLevel.ERROR, message, component)

    def warning(self, message: str, component: str = None):
        """Log a warning message."""
        self.log(DebugLevel.WARNING, message, component)

    def info(self, message: str, component: str = None):
        """Log an info message."""
        self.log(DebugLevel.INFO, message, component)

    def debug(self, message: str, component: str = None):
        """Log a debug message."""
        self.log(DebugLevel.DEBUG, message, component)

    def trace(self, message: str, component: str = None):
        """Log a trace message."""
        self.log(DebugLevel.TRACE, message, component)

    # Performance tracking methods
    def start_timer(self, marker_name: str):
        """Start a timer for performance tracking."""
        self._performance_markers[marker_name] = time.perf_counter()

    def end_timer(self, marker_name: str, component: str = None) -> Optional[float]:
        """
        End a timer and log the elapsed time.

        Args:
            marker_name: Name of the marker to end
            component: Optional component name for the log entry

        Returns:
            Elapsed time in seconds, or None if marker not found
        """
        if marker_name not in self._performance_markers:
            self.warning(f"Timer '{marker_name}' not started", "debug")
            return None

        elapsed = time.perf_counter() - self._performance_markers.pop(marker_name)
        self.debug(f"Performance [{marker_name}]: {elapsed:.6f} seconds", component)
        return elapsed

    def set_from_string(self, level_str: str):
        """Set debug level from a string (for command line arguments and config files)."""
        level_map = {
            "none": DebugLevel.NONE,
            "error": DebugLevel.ERROR,
            "warning": DebugLevel.WARNING,
            "info": DebugLevel.INFO,
            "debug": DebugLevel.DEBUG,
            "trace": DebugLevel.TRACE
        }

        level_str = level_str.lower()
        if level_str in level_map:
            self.configure(level=level_map[level_str])
            self.info(f"Debug level set to {level_str.upper()}")
        else:
            self.warning(f"Unknown debug level: {level_str}")


class ScopeTime:
    """Start/end instants of a timed scope, filled in by `scope_timer`."""

    def __init__(self):
        self.start: float = time.perf_counter()
        self.end: Optional[float] = None

    @property
    def elapsed(self) -> Optional[float]:
        if self.end is None:
            return None
        return self.end - self.start


@contextmanager
def scope_timer(label: str = "Probe", component: str = None,
                on_exit: Callable[[float, float], None] = None) -> Iterator[ScopeTime]:
    """
    Time the body of a `with` block.

    The duration is logged at INFO level as "<label> duration: <seconds>s" when the
    block exits, including when it exits with an exception. Passing `on_exit`
    replaces the log line with a call to `on_exit(start, end)`.

    Example:
        with scope_timer("Render", "chat"):
            await message.edit_text(text)
    """
    probe = ScopeTime()
    try:
        yield probe
    finally:
        probe.end = time.perf_counter()
        if on_exit is not None:
            on_exit(probe.start, probe.end)
        else:
            debug.info(f"{label} duration: {probe.elapsed:.6f}s", component)


# Create a singleton instance
debug = DebugManager()
