"""
Unified Logging Configuration for TextLab

This module provides a centralized logging system that combines:
- Console output with timestamps
- File output to debug_flow.txt (DEBUG_MODE only)
- File output to logs/processing.log (DEBUG_MODE only)
- Performance timing via Timer context manager

All modules should import logging functions from this module:
    from textlab.logging_config import debug_log, info, warning, error, Timer

The module respects DEBUG_MODE from config:
- DEBUG_MODE=True: All messages shown on console, verbose timing
- DEBUG_MODE=False: Only warnings/errors shown on console

Log Levels:
- debug_log(): File and console output only in DEBUG_MODE
- info(): Standard information messages
- warning(): Warning messages (always shown)
- error(): Error messages with optional exception info
- critical(): Critical errors (always shown with traceback)
"""

import logging
import sys
import threading
import time
from datetime import datetime

from textlab.config import DEBUG_LOG_FILE, DEBUG_MODE, LOG_DATE_FORMAT, LOG_FILE, LOG_FORMAT

# =============================================================================
# File Logger Setup (debug_flow.txt for debugging sessions)
# =============================================================================

class _DebugFileLogger:
    """
    Manages the debug_flow.txt file for detailed debugging output.

    Only active in DEBUG_MODE; otherwise writes are dropped without touching
    the filesystem. The file is opened on first write. Telemetry is recorded
    from many threads, so writes are serialized with a lock.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._log_file = None
            cls._instance._disabled = False
            cls._instance._lock = threading.Lock()
        return cls._instance

    def _open(self):
        """Create and initialize the debug log file."""
        try:
            DEBUG_LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
            self._log_file = open(DEBUG_LOG_FILE, 'w', encoding='utf-8')
        except OSError:
            # Read-only home directories still get console/standard logging
            self._disabled = True
            return
        self._log_file.write("=== TextLab Debug Log ===\n")
        self._log_file.write(f"Started: {datetime.now().isoformat()}\n")
        self._log_file.write(f"DEBUG_MODE: {DEBUG_MODE}\n")
        self._log_file.write("=" * 60 + "\n\n")
        self._log_file.flush()

    def write(self, message: str):
        """Write message to the debug log file (DEBUG_MODE only)."""
        if not DEBUG_MODE:
            return
        with self._lock:
            if self._log_file is None and not self._disabled:
                self._open()
            if self._log_file:
                timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
                self._log_file.write(f"[{timestamp}] {message}\n")
                self._log_file.flush()

    def close(self):
        """Close the debug log file gracefully."""
        with self._lock:
            if self._log_file:
                self._log_file.write(f"\n{'=' * 60}\n")
                self._log_file.write(f"Ended: {datetime.now().isoformat()}\n")
                self._log_file.close()
                self._log_file = None


# Global debug file logger instance
_debug_file_logger = _DebugFileLogger()


# =============================================================================
# Standard Python Logging Setup
# =============================================================================

def _setup_standard_logging() -> logging.Logger:
    """
    Configure the standard Python logging framework.

    Returns:
        Configured logger instance for TextLab
    """
    logger = logging.getLogger('TextLab')
    logger.setLevel(logging.DEBUG if DEBUG_MODE else logging.INFO)

    # Prevent duplicate handlers if called multiple times
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    if DEBUG_MODE:
        # File handler; the file is created on the first record
        try:
            LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(LOG_FILE, encoding='utf-8', delay=True)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except OSError:
            pass  # Log directory not writable; keep console output only

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG)
    else:
        # Outside DEBUG_MODE only warnings and errors are shown, on stderr
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


# Global standard logger instance
_logger = _setup_standard_logging()


# =============================================================================
# Timer Context Manager
# =============================================================================

class Timer:
    """
    Context manager for timing code blocks with automatic logging.

    Usage:
        with Timer("ReadabilityScoring"):
            # code to time
            pass

    Output (DEBUG_MODE=True):
        [14:32:01.120] Starting ReadabilityScoring...
        [14:32:01.962] ReadabilityScoring took 842 ms

    Attributes:
        operation_name: Name of the operation being timed
        duration_ms: Duration in milliseconds (available after exit)
    """

    def __init__(self, operation_name: str, auto_log: bool = True):
        """
        Initialize the timer.

        Args:
            operation_name: Descriptive name for the operation
            auto_log: If True, automatically log start/end (respects DEBUG_MODE for console)
        """
        self.operation_name = operation_name
        self.auto_log = auto_log
        self.start_time: float | None = None
        self.end_time: float | None = None
        self.duration_ms: float | None = None

    def __enter__(self):
        if self.auto_log:
            debug_log(f"Starting {self.operation_name}...")
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.perf_counter()
        self.duration_ms = (self.end_time - self.start_time) * 1000

        if self.auto_log:
            debug_timing(self.operation_name, self.duration_ms / 1000)

        return False  # Don't suppress exceptions

    def get_duration_ms(self) -> float:
        """
        Get the measured duration in milliseconds.

        Returns:
            Duration in milliseconds

        Raises:
            ValueError: If timer has not completed yet
        """
        if self.duration_ms is None:
            raise ValueError("Timer has not been completed yet")
        return self.duration_ms


# =============================================================================
# Public Logging Functions
# =============================================================================

def debug_log(message: str):
    """
    Log a debug message to both file and console (if DEBUG_MODE).

    Args:
        message: The message to log (prefix with [COMPONENT] for clarity)

    Example:
        debug_log("[SELECTOR] Base strategy 'fast' for length=42")
        debug_log("[TELEMETRY] Recorded calculate_readability (call #12)")
    """
    _debug_file_logger.write(message)

    if DEBUG_MODE:
        timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
        formatted = f"[{timestamp}] {message}"
        try:
            print(formatted)
            sys.stdout.flush()
        except UnicodeEncodeError:
            sys.stdout.buffer.write((formatted + "\n").encode('utf-8', errors='replace'))
            sys.stdout.buffer.flush()


def debug(message: str):
    """Log a debug-level message (alias for debug_log)."""
    debug_log(message)


def info(message: str):
    """
    Log an informational message.

    Args:
        message: The message to log
    """
    _debug_file_logger.write(f"[INFO] {message}")
    _logger.info(message)


def warning(message: str):
    """
    Log a warning message.

    Warnings are always written to both file and console regardless of DEBUG_MODE.

    Args:
        message: The warning message to log
    """
    _debug_file_logger.write(f"[WARNING] {message}")
    _logger.warning(message)


def error(message: str, exc_info: bool = False):
    """
    Log an error message with optional exception traceback.

    Args:
        message: The error message to log
        exc_info: If True, include exception traceback (only in DEBUG_MODE)
    """
    _debug_file_logger.write(f"[ERROR] {message}")
    _logger.error(message, exc_info=exc_info and DEBUG_MODE)


def critical(message: str, exc_info: bool = True):
    """
    Log a critical error with exception traceback.

    Args:
        message: The critical error message
        exc_info: If True, include exception traceback
    """
    _debug_file_logger.write(f"[CRITICAL] {message}")
    _logger.critical(message, exc_info=exc_info and DEBUG_MODE)


def debug_timing(operation: str, elapsed_seconds: float):
    """
    Log operation timing information in human-readable format.

    Args:
        operation: Description of the operation that was timed
        elapsed_seconds: Elapsed time in seconds (float)

    Example:
        cost = probe.finalize()
        debug_timing("calculate_readability", cost.elapsed_seconds)
        # Output: "[14:32:01] calculate_readability took 3 ms"
    """
    if elapsed_seconds < 1:
        time_str = f"{elapsed_seconds*1000:.0f} ms"
    elif elapsed_seconds < 60:
        time_str = f"{elapsed_seconds:.2f}s"
    else:
        time_str = f"{elapsed_seconds/60:.1f}m"
    debug_log(f"{operation} took {time_str}")


def close_debug_log():
    """
    Close the debug log file gracefully.

    Call this at application shutdown to ensure all logs are flushed.
    """
    _debug_file_logger.close()


__all__ = [
    'debug_log',
    'debug',
    'debug_timing',
    'info',
    'warning',
    'error',
    'critical',
    'close_debug_log',
    'Timer',
    'DEBUG_MODE',
]
