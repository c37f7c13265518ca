"""
TES Thermal Network Simulator - Logging System
==============================================
Logging with levels, optional console/file output and performance tracking.

The package only attaches a ``NullHandler``. Console and file output are
switched on by whoever reports to the user, through ``initialize_logger``.

Author: TES Thermal Network Simulator
Version: 1.0.0
"""

import logging
import os
import sys
import time
import threading
from contextlib import contextmanager
from datetime import datetime
from functools import wraps
from typing import Optional, Dict, Any, Callable

LOGGER_NAME = 'tes_thermal'


def _safe_isatty(stream) -> bool:
    """Return True if stream looks like a tty; never raise."""
    isatty = getattr(stream, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except (ValueError, OSError):
        # closed or detached stream
        return False


class ThermalNetworkFormatter(logging.Formatter):
    """Custom formatter with color support and detailed formatting."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m',
    }

    def __init__(self, use_colors: bool = True, stream=None):
        super().__init__()
        self.use_colors = bool(use_colors and stream is not None and _safe_isatty(stream))

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
        level = record.levelname
        location = f"[{record.module}.{record.funcName}:{record.lineno}]"
        message = record.getMessage()

        thread_name = threading.current_thread().name
        thread_info = f"[{thread_name}]" if thread_name != 'MainThread' else ""

        if self.use_colors:
            color = self.COLORS.get(level, '')
            reset = self.COLORS['RESET']
            formatted = f"{timestamp} {color}{level:8s}{reset} {thread_info}{location} {message}"
        else:
            formatted = f"{timestamp} {level:8s} {thread_info}{location} {message}"

        if record.exc_info:
            formatted += '\n' + self.formatException(record.exc_info)

        return formatted


class PerformanceTracker:
    """Tracks wall-clock timings of solver operations."""

    def __init__(self):
        self.timings: Dict[str, list] = {}
        self.lock = threading.Lock()

    def record_timing(self, operation: str, duration_s: float):
        with self.lock:
            self.timings.setdefault(operation, []).append(duration_s)

    def get_stats(self, operation: str) -> Dict[str, float]:
        """Get statistics for an operation."""
        with self.lock:
            times = self.timings.get(operation)
            if not times:
                return {'count': 0, 'total': 0, 'mean': 0, 'min': 0, 'max': 0}
            return {
                'count': len(times),
                'total': sum(times),
                'mean': sum(times) / len(times),
                'min': min(times),
                'max': max(times)
            }

    def get_all_stats(self) -> Dict[str, Dict[str, float]]:
        return {op: self.get_stats(op) for op in list(self.timings)}

    def clear(self):
        with self.lock:
            self.timings.clear()


class ThermalNetworkLogger:
    """Main logger class for the simulator."""

    _instance = None
    _lock = threading.Lock()

    def __new__(cls, *args, **kwargs):
        """Singleton pattern for global logger access."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._initialized = False
            return cls._instance

    def __init__(self,
                 log_dir: Optional[str] = None,
                 log_level: int = logging.DEBUG,
                 console: bool = False,
                 console_level: int = logging.INFO,
                 enable_performance_tracking: bool = True):
        if self._initialized:
            return

        self._initialized = True
        self.log_dir = log_dir
        self.log_level = log_level
        self.console_level = console_level
        self.current_log_file: Optional[str] = None

        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(log_level)
        self.logger.handlers = []
        self.logger.addHandler(logging.NullHandler())

        if console:
            stream = sys.stderr
            console_handler = logging.StreamHandler(stream)
            console_handler.setLevel(console_level)
            console_handler.setFormatter(ThermalNetworkFormatter(use_colors=True, stream=stream))
            self.logger.addHandler(console_handler)

        if log_dir:
            self._setup_file_handler()

        self.performance = PerformanceTracker() if enable_performance_tracking else None

        # Run state
        self.run_id: Optional[str] = None
        self.run_start_time: Optional[float] = None

    def _setup_file_handler(self):
        os.makedirs(self.log_dir, exist_ok=True)

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        log_file = os.path.join(self.log_dir, f'tes_thermal_{timestamp}.log')

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(self.log_level)
        file_handler.setFormatter(ThermalNetworkFormatter(use_colors=False))
        self.logger.addHandler(file_handler)

        self.current_log_file = log_file
        self.logger.info(f"Log file created: {log_file}")

    def set_log_level(self, level: int):
        self.logger.setLevel(level)
        self.log_level = level

    def close(self):
        """Detach and close every handler except the NullHandler."""
        for handler in list(self.logger.handlers):
            if not isinstance(handler, logging.NullHandler):
                self.logger.removeHandler(handler)
                handler.close()

    # Logging methods
    def debug(self, message: str, *args, **kwargs):
        self.logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs):
        self.logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs):
        self.logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs):
        self.logger.error(message, *args, **kwargs)

    # Run lifecycle logging
    def start_run(self, run_id: str, params: Dict[str, Any]):
        """Log simulation start with parameters."""
        self.run_id = run_id
        self.run_start_time = time.time()

        self.info("=" * 60)
        self.info(f"RUN STARTED: {run_id}")
        for key, value in params.items():
            self.info(f"  {key}: {value}")
        self.info("-" * 60)

    def end_run(self, success: bool = True, message: str = ""):
        """Log simulation end with summary."""
        duration = time.time() - self.run_start_time if self.run_start_time else 0.0

        status = "COMPLETED" if success else "FAILED"
        self.info(f"RUN {status}: {self.run_id} ({duration:.3f}s)")
        if message:
            self.info(f"Message: {message}")

        if self.performance:
            for op, s in self.performance.get_all_stats().items():
                self.debug(f"  {op}: {s['count']} calls, total={s['total']:.3f}s, mean={s['mean']:.3f}s")
            self.performance.clear()

        self.info("=" * 60)
        self.run_id = None
        self.run_start_time = None


# Global logger instance
_logger: Optional[ThermalNetworkLogger] = None


def get_logger() -> ThermalNetworkLogger:
    """Get the global logger instance."""
    global _logger
    if _logger is None:
        _logger = ThermalNetworkLogger()
    return _logger


def initialize_logger(log_dir: Optional[str] = None,
                      log_level: int = logging.DEBUG,
                      console: bool = True,
                      console_level: int = logging.INFO) -> ThermalNetworkLogger:
    """Re-create the global logger with output handlers."""
    global _logger
    with ThermalNetworkLogger._lock:
        if ThermalNetworkLogger._instance is not None:
            ThermalNetworkLogger._instance.close()
        ThermalNetworkLogger._instance = None
    _logger = ThermalNetworkLogger(
        log_dir=log_dir,
        log_level=log_level,
        console=console,
        console_level=console_level,
    )
    return _logger


def timed_function(operation_name: Optional[str] = None):
    """Decorator to time function execution."""
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger()
            op_name = operation_name or func.__name__
            start = time.time()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(f"{op_name} failed after {time.time() - start:.3f}s: {e}")
                raise
            duration = time.time() - start
            if logger.performance:
                logger.performance.record_timing(op_name, duration)
            logger.debug(f"{op_name} completed in {duration:.3f}s")
            return result
        return wrapper
    return decorator


@contextmanager
def log_section(section_name: str):
    """Context manager for logging a section of code."""
    logger = get_logger()
    logger.info(f"--- {section_name} ---")
    start = time.time()
    try:
        yield
    except Exception as e:
        logger.error(f"--- {section_name} failed after {time.time() - start:.3f}s: {e} ---")
        raise
    logger.info(f"--- {section_name} completed in {time.time() - start:.3f}s ---")


__all__ = [
    'LOGGER_NAME',
    'ThermalNetworkLogger',
    'ThermalNetworkFormatter',
    'PerformanceTracker',
    'get_logger',
    'initialize_logger',
    'timed_function',
    'log_section',
]
