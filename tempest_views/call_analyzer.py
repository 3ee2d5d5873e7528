"""
Find function calls in a PHP tree and decompose their arguments.

Every function_call_expression is reported, whatever it calls; deciding which
of them are Tempest view() calls is left to the caller.
"""

import logging
import string
from typing import Any

from .ast_traversal import as_bytes, extract_text, find_nodes_by_kind
from .errors import ParseError, TextExtractionError
from .models import ViewCall, ViewParameter

logger = logging.getLogger(__name__)


def find_function_calls(tree: Any, source: str | bytes) -> list[ViewCall]:
    """
    Extract every function call in tree order.

    A call whose callee or text cannot be read is dropped; the scan goes on.

    Args:
        tree: Parsed PHP tree
        source: Text the tree was parsed from

    Returns:
        List of ViewCall, one per function_call_expression

    Raises:
        ParseError: If the tree cannot be walked
    """
    data = as_bytes(source)
    calls = []

    for node in find_nodes_by_kind(tree, "function_call_expression"):
        try:
            calls.append(extract_call_info(node, data))
        except (ParseError, TextExtractionError) as e:
            logger.debug(f"Dropping call on line {node.start_point[0] + 1}: {e}")

    return calls


def extract_call_info(node: Any, source: bytes) -> ViewCall:
    """Build a ViewCall from one function_call_expression node."""
    function_node = node.child_by_field_name("function")
    if function_node is None:
        raise ParseError("Function call missing function field")

    return ViewCall(
        function_name=extract_text(function_node, source),
        line=node.start_point[0] + 1,
        text=extract_text(node, source),
        parameters=parse_function_parameters(node, source),
    )


def parse_function_parameters(node: Any, source: bytes) -> list[ViewParameter]:
    """Decompose the call's argument list; unreadable arguments are skipped."""
    parameters: list[ViewParameter] = []

    arguments = node.child_by_field_name("arguments")
    if arguments is None:
        return parameters

    for child in arguments.children:
        if child.type != "argument":
            continue
        try:
            parameters.append(parse_single_argument(child, source))
        except TextExtractionError as e:
            logger.debug(f"Dropping argument at byte {child.start_byte}: {e}")

    return parameters


def parse_single_argument(node: Any, source: bytes) -> ViewParameter:
    """
    Parse a positional (``expr``) or named (``name: expr``) argument.

    For named arguments the value is rebuilt from the argument's children,
    leaving out the name, the colon and bare punctuation tokens, joined with
    single spaces.
    """
    raw_text = extract_text(node, source)

    name_node = node.child_by_field_name("name")
    if name_node is None:
        return ViewParameter(value=raw_text, raw_text=raw_text)

    name = extract_text(name_node, source)
    value_parts = []

    for child in node.children:
        if child == name_node or not _is_value_token(child):
            continue
        try:
            value_parts.append(extract_text(child, source))
        except TextExtractionError as e:
            logger.debug(f"Skipping part of named argument '{name}': {e}")

    return ViewParameter(value=" ".join(value_parts), raw_text=raw_text, name=name)


def _is_value_token(node: Any) -> bool:
    kind = node.type
    if ":" in kind:
        return False
    # Separator tokens are leaves whose type is nothing but punctuation
    if node.child_count == 0 and all(c in string.punctuation for c in kind):
        return False
    return True
