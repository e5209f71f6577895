"""
Run logging for the runner tools.

Each tool logs to its own file, ~/.runner-tools/logs/<tool>.log, or under
$RUNNER_TOOLS_LOG_DIR when that is set. Lines carry a timestamp, the level
and the tool name. The console only sees errors, plus everything else when
debug is on.
"""

import os
import sys
from datetime import datetime
from pathlib import Path

LOG_DIR_ENV = "RUNNER_TOOLS_LOG_DIR"
DEFAULT_TOOL = "runner-tools"


def log_dir() -> Path:
    override = os.environ.get(LOG_DIR_ENV)
    if override:
        return Path(override)
    return Path.home() / ".runner-tools" / "logs"


class Logger:
    """Writes tool log lines to stderr and to the tool's log file."""

    def __init__(self, tool: str = DEFAULT_TOOL, debug: bool = False,
                 log_to_file: bool = True):
        self.tool = tool
        self.debug_enabled = debug
        self.log_to_file = log_to_file
        self.file_failed = False

    @property
    def log_path(self) -> Path:
        return log_dir() / f"{self.tool}.log"

    def format(self, level: str, message: str) -> str:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        return f"[{timestamp}] [{level}] [{self.tool}] {message}"

    def _write(self, level: str, message: str) -> None:
        line = self.format(level, message)

        # Always write errors to stderr
        if level == "ERROR" or self.debug_enabled:
            print(line, file=sys.stderr)

        if self.log_to_file and not self.file_failed:
            self._append(line)

    def _append(self, line: str) -> None:
        path = self.log_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'a', encoding='utf-8') as f:
                f.write(line + "\n")
        except OSError as e:
            # Stop trying after the first failure; report it once in debug mode
            self.file_failed = True
            if self.debug_enabled:
                print(f"Logging to {path} disabled: {e}", file=sys.stderr)

    def debug(self, message: str) -> None:
        """Log debug message (only if debug is enabled)."""
        if self.debug_enabled:
            self._write("DEBUG", message)

    def info(self, message: str) -> None:
        self._write("INFO", message)

    def warning(self, message: str) -> None:
        self._write("WARN", message)

    def error(self, message: str) -> None:
        self._write("ERROR", message)


_logger: Logger | None = None


def configure_logger(tool: str, debug: bool = False,
                     log_to_file: bool = True) -> Logger:
    """Replace the process-wide logger with one for the given tool."""
    global _logger
    _logger = Logger(tool=tool, debug=debug, log_to_file=log_to_file)
    return _logger


def get_logger(debug: bool = False) -> Logger:
    """Get the process-wide logger, creating a default one if needed."""
    global _logger
    if _logger is None:
        _logger = Logger(debug=debug)
    elif debug:
        _logger.debug_enabled = True
    return _logger
