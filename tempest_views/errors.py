"""Exceptions raised by the view analysis engine.

Leaf-level failures (one argument, one call, one use statement) are caught
where they happen and only cause that item to be skipped. A ParseError that
escapes the node enumeration itself aborts the analysis of the whole document.
"""

from typing import Optional


class ViewAnalysisError(Exception):
    """Base class for all view analysis failures."""


class ParseError(ViewAnalysisError):
    """Raised when the supplied syntax tree cannot be analyzed."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Parse error: {message}")


class TextExtractionError(ViewAnalysisError):
    """Raised when a node's byte span cannot be decoded against the source."""
    def __init__(self, start_byte: int, end_byte: int, reason: Optional[str] = None):
        self.start_byte = start_byte
        self.end_byte = end_byte
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(
            f"Failed to extract text from node [{start_byte}, {end_byte}){detail}"
        )


class InvalidImportFormat(ViewAnalysisError):
    """Raised when a use statement has an unrecognized or incomplete shape."""
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Invalid import format: {detail}")
