"""Kind-based traversal primitives over tree-sitter syntax trees.

These helpers know nothing about PHP. They work on anything shaped like a
tree-sitter ``Tree`` or ``Node`` (``type``, ``children``, ``start_byte``,
``end_byte``), which keeps them usable with hand-built nodes in tests.
"""

from typing import Any, Callable, Optional

from .errors import ParseError, TextExtractionError


def as_bytes(source: str | bytes) -> bytes:
    """Return the UTF-8 bytes that node offsets index into."""
    if isinstance(source, bytes):
        return source
    return source.encode("utf-8")


def _root_node(tree: Any) -> Any:
    root = getattr(tree, "root_node", tree)
    if root is None or not hasattr(root, "type") or not hasattr(root, "children"):
        raise ParseError("syntax tree has no walkable root node")
    return root


def find_nodes_by_kind(tree: Any, kind: str) -> list[Any]:
    """
    Collect every node of the given kind, root included.

    Nodes come back in pre-order: a parent before its children, siblings
    left to right. That is structural order, which is not always ascending
    line order.

    Args:
        tree: A tree-sitter Tree, or a Node to start from
        kind: Node type to match, e.g. "function_call_expression"

    Returns:
        List of matching nodes

    Raises:
        ParseError: If the tree cannot be walked
    """
    root = _root_node(tree)
    nodes = []
    stack = [root]

    while stack:
        node = stack.pop()
        if node.type == kind:
            nodes.append(node)
        stack.extend(reversed(node.children))

    return nodes


def find_child_by_kind(node: Any, kind: str) -> Optional[Any]:
    """Return the first direct child of the given kind, or None."""
    for child in node.children:
        if child.type == kind:
            return child
    return None


def traverse_children(node: Any, visit: Callable[[Any], None]) -> None:
    """Call ``visit`` once per direct child, left to right. Does not recurse."""
    for child in node.children:
        visit(child)


def extract_text(node: Any, source: str | bytes) -> str:
    """
    Return the source text covered by a node.

    Args:
        node: Node whose byte span to decode
        source: The exact text (or its UTF-8 bytes) the tree was parsed from

    Raises:
        TextExtractionError: If the span is out of range or splits a
            multi-byte character
    """
    data = as_bytes(source)
    start, end = node.start_byte, node.end_byte

    if start < 0 or end < start or end > len(data):
        raise TextExtractionError(start, end, f"span outside source of {len(data)} bytes")

    try:
        return data[start:end].decode("utf-8")
    except UnicodeDecodeError as e:
        raise TextExtractionError(start, end, e.reason) from e
