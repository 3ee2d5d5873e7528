"""Environment-driven settings.

TEMPEST_VIEWS_MAX_FILE_SIZE: largest file (bytes) the CLI will parse
TEMPEST_VIEWS_LOG_LEVEL: default logging level name for the CLI
"""

import logging
import os
from pathlib import Path

# tree-sitter memory usage is ~10-200x file size
DEFAULT_MAX_FILE_SIZE = 5_000_000  # 5MB
MAX_FILE_SIZE = int(os.environ.get("TEMPEST_VIEWS_MAX_FILE_SIZE", DEFAULT_MAX_FILE_SIZE))

DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVEL = os.environ.get("TEMPEST_VIEWS_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()

PHP_EXTENSIONS = {".php"}


class FileTooLargeError(Exception):
    """Raised when a file exceeds MAX_FILE_SIZE."""
    def __init__(self, file_path: Path, size: int, limit: int):
        self.file_path = file_path
        self.size = size
        self.limit = limit
        super().__init__(
            f"File {file_path} is {size:,} bytes, exceeds limit of {limit:,} bytes. "
            f"Set TEMPEST_VIEWS_MAX_FILE_SIZE environment variable to increase limit."
        )


def resolve_log_level(verbosity: int = 0) -> int:
    """Map -v/-vv to INFO/DEBUG, otherwise use TEMPEST_VIEWS_LOG_LEVEL."""
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    level = logging.getLevelName(LOG_LEVEL)
    return level if isinstance(level, int) else logging.WARNING
