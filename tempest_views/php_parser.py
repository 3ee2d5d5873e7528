"""Tree-sitter PHP parser with incremental reparse support.

Key components:
- PhpParser: thread-safe wrapper around a tree-sitter Parser for PHP
- EditRange: Describes a text edit in byte offsets and row/column points
- calculate_edit_range: Finds the changed window between two document versions
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

TREE_SITTER_PHP_AVAILABLE = False
try:
    from tree_sitter import Language, Parser, Tree
    import tree_sitter_php

    TREE_SITTER_PHP_AVAILABLE = True
except ImportError:
    pass


class PhpParserError(Exception):
    """Base class for parser failures."""


class UnableToInitialize(PhpParserError):
    """Raised when the PHP grammar cannot be loaded."""
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Parser initialization error: {reason}")


class UnableToParse(PhpParserError):
    """Raised when tree-sitter returns no tree."""
    def __init__(self):
        super().__init__("Unable to parse source code")


@dataclass
class EditRange:
    """Describes a text edit for incremental parsing.

    Tree-sitter's edit() method requires both byte offsets and row/column points.
    """

    start_byte: int
    old_end_byte: int
    new_end_byte: int
    start_point: tuple[int, int]  # (row, column)
    old_end_point: tuple[int, int]
    new_end_point: tuple[int, int]


def _byte_offset_to_point(content: bytes, byte_offset: int) -> tuple[int, int]:
    """Convert byte offset to a 0-indexed (row, column) point."""
    byte_offset = min(byte_offset, len(content))
    prefix = content[:byte_offset]

    row = prefix.count(b"\n")
    last_newline = prefix.rfind(b"\n")
    if last_newline == -1:
        column = byte_offset
    else:
        column = byte_offset - last_newline - 1

    return (row, column)


def calculate_edit_range(old_content: bytes, new_content: bytes) -> Optional[EditRange]:
    """Calculate the edit range between old and new content.

    Finds the common prefix and suffix; everything between them is the edit.

    Args:
        old_content: Previous document content
        new_content: New document content

    Returns:
        EditRange describing the change, or None if content is identical
    """
    if old_content == new_content:
        return None

    start_byte = 0
    min_len = min(len(old_content), len(new_content))
    while start_byte < min_len and old_content[start_byte] == new_content[start_byte]:
        start_byte += 1

    old_end_offset = 0
    new_end_offset = 0
    while (
        old_end_offset < len(old_content) - start_byte
        and new_end_offset < len(new_content) - start_byte
        and old_content[-(old_end_offset + 1)] == new_content[-(new_end_offset + 1)]
    ):
        old_end_offset += 1
        new_end_offset += 1

    old_end_byte = max(len(old_content) - old_end_offset, start_byte)
    new_end_byte = max(len(new_content) - new_end_offset, start_byte)

    return EditRange(
        start_byte=start_byte,
        old_end_byte=old_end_byte,
        new_end_byte=new_end_byte,
        start_point=_byte_offset_to_point(old_content, start_byte),
        old_end_point=_byte_offset_to_point(old_content, old_end_byte),
        new_end_point=_byte_offset_to_point(new_content, new_end_byte),
    )


def apply_edit(tree: Any, edit_range: EditRange) -> None:
    """Tell a previously parsed tree about an edit so it can be reused."""
    tree.edit(
        start_byte=edit_range.start_byte,
        old_end_byte=edit_range.old_end_byte,
        new_end_byte=edit_range.new_end_byte,
        start_point=edit_range.start_point,
        old_end_point=edit_range.old_end_point,
        new_end_point=edit_range.new_end_point,
    )


class PhpParser:
    """Tree-sitter parser for PHP documents.

    The underlying Parser is not thread-safe, so parse() holds a lock. One
    instance can be shared by every open document.
    """

    def __init__(self):
        if not TREE_SITTER_PHP_AVAILABLE:
            raise UnableToInitialize("tree-sitter-php not available")

        try:
            # language_php() handles PHP with embedded HTML
            php_lang = Language(tree_sitter_php.language_php())
            self._parser = Parser(php_lang)
        except (TypeError, ValueError) as e:
            raise UnableToInitialize(f"Unable to create parser for PHP: {e}") from e

        self._lock = threading.Lock()

    def parse(self, source: str | bytes, old_tree: Optional["Tree"] = None) -> "Tree":
        """
        Parse PHP source.

        Args:
            source: PHP source code (may include <?php tag)
            old_tree: Previous tree, already edited with apply_edit(), to
                reuse unchanged subtrees

        Returns:
            Parsed tree-sitter Tree

        Raises:
            UnableToParse: If tree-sitter produced no tree
        """
        data = source.encode("utf-8") if isinstance(source, str) else source

        with self._lock:
            if old_tree is not None:
                tree = self._parser.parse(data, old_tree)
            else:
                tree = self._parser.parse(data)

        if tree is None:
            raise UnableToParse()
        return tree

    def reparse(self, old_tree: "Tree", old_source: str | bytes, new_source: str | bytes) -> "Tree":
        """Parse a new version of a document, reusing the previous tree."""
        old_data = old_source.encode("utf-8") if isinstance(old_source, str) else old_source
        new_data = new_source.encode("utf-8") if isinstance(new_source, str) else new_source

        edit_range = calculate_edit_range(old_data, new_data)
        if edit_range is None:
            return old_tree

        # Edit a copy so the caller's tree stays valid for old_source if parsing fails
        edited = old_tree.copy()
        apply_edit(edited, edit_range)
        logger.debug(
            f"Incremental reparse of bytes {edit_range.start_byte}-{edit_range.new_end_byte}"
        )
        return self.parse(new_data, edited)
