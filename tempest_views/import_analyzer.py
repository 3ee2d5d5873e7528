"""
Resolve the local spellings under which Tempest's view() function is callable.

Handles:
- Qualified calls with no import: Tempest\\view(...), \\Tempest\\view(...)
- Function import: use function Tempest\\view;
- Aliased import: use function Tempest\\view as render;
- Grouped import: use function Tempest\\{root_path, view};

Class and constant imports are ignored. A malformed use statement is skipped
without affecting the others.
"""

import logging
from typing import Any

from .ast_traversal import (
    as_bytes,
    extract_text,
    find_child_by_kind,
    find_nodes_by_kind,
    traverse_children,
)
from .errors import InvalidImportFormat, TextExtractionError
from .models import (
    DirectNamespace,
    FunctionImport,
    FunctionImportWithAlias,
    ImportClassification,
    ImportInfo,
)

logger = logging.getLogger(__name__)

TRACKED_NAMESPACE = "Tempest"
TRACKED_FUNCTION = "view"
NAMESPACE_SEPARATOR = "\\"

# Spellings that reach the function without any use statement
DIRECT_NAMESPACE_SPELLINGS = (
    f"{NAMESPACE_SEPARATOR}{TRACKED_NAMESPACE}{NAMESPACE_SEPARATOR}{TRACKED_FUNCTION}",
    f"{TRACKED_NAMESPACE}{NAMESPACE_SEPARATOR}{TRACKED_FUNCTION}",
)


def analyze_imports(tree: Any, source: str | bytes) -> dict[str, ImportClassification]:
    """
    Map every callable spelling of Tempest\\view to how it was made visible.

    The two qualified spellings are always present. Imports are registered in
    tree order; when two statements claim the same local name the later one
    replaces the earlier.

    Args:
        tree: Parsed PHP tree
        source: Text the tree was parsed from

    Returns:
        Dict mapping local call spelling to its ImportClassification

    Raises:
        ParseError: If the use statements cannot be enumerated at all
    """
    data = as_bytes(source)
    imports: dict[str, ImportClassification] = {}

    _add_direct_namespace_imports(imports)

    for import_info in extract_import_statements(tree, data):
        if import_info.namespace != TRACKED_NAMESPACE or import_info.function_name != TRACKED_FUNCTION:
            logger.debug(
                f"Ignoring import of {import_info.namespace}\\{import_info.function_name}"
            )
            continue

        if import_info.alias is not None:
            key = import_info.alias
            classification: ImportClassification = FunctionImportWithAlias(import_info.alias)
        else:
            key = import_info.function_name
            classification = FunctionImport()

        if key in imports:
            logger.debug(f"Import '{key}' registered again, keeping the later one")
        imports[key] = classification

    return imports


def _add_direct_namespace_imports(imports: dict[str, ImportClassification]) -> None:
    for spelling in DIRECT_NAMESPACE_SPELLINGS:
        imports[spelling] = DirectNamespace()


def extract_import_statements(tree: Any, source: str | bytes) -> list[ImportInfo]:
    """Parse every function use statement in the tree, skipping invalid ones."""
    data = as_bytes(source)
    import_infos = []

    for node in find_nodes_by_kind(tree, "namespace_use_declaration"):
        try:
            import_infos.append(parse_use_declaration(node, data))
        except (InvalidImportFormat, TextExtractionError) as e:
            logger.debug(f"Skipping use statement on line {node.start_point[0] + 1}: {e}")

    return import_infos


def parse_use_declaration(node: Any, source: bytes) -> ImportInfo:
    """
    Extract the import carried by one namespace_use_declaration.

    Raises:
        InvalidImportFormat: If this is not a function import or its shape
            is not recognized
    """
    if not is_function_use_declaration(node, source):
        raise InvalidImportFormat("Not a function import")

    clause = find_child_by_kind(node, "namespace_use_clause")
    if clause is not None:
        return parse_single_use_clause(clause, source)

    group = find_child_by_kind(node, "namespace_use_group")
    if group is not None:
        return parse_grouped_use_clauses(group, source, declaration=node)

    raise InvalidImportFormat("No valid use clause found")


def is_function_use_declaration(node: Any, source: bytes) -> bool:
    """True for ``use function ...`` statements."""
    if find_child_by_kind(node, "function") is not None:
        return True

    clause = find_child_by_kind(node, "namespace_use_clause")
    if clause is not None:
        try:
            clause_text = extract_text(clause, source)
        except TextExtractionError:
            return False
        return clause_text.lstrip().startswith("function")

    return False


def parse_single_use_clause(node: Any, source: bytes) -> ImportInfo:
    """Parse ``Ns\\Sub\\name [as alias]`` into an ImportInfo."""
    parts: list[str] = []
    alias = None

    for child in node.children:
        if child.type == "qualified_name":
            parts = qualified_name_parts(child, source)
        elif child.type == "name":
            alias = extract_text(child, source)

    if len(parts) < 2:
        raise InvalidImportFormat("Invalid qualified name")

    function_name = parts.pop()
    return ImportInfo(
        namespace=NAMESPACE_SEPARATOR.join(parts),
        function_name=function_name,
        alias=alias,
    )


def parse_grouped_use_clauses(group: Any, source: bytes, declaration: Any = None) -> ImportInfo:
    """
    Parse ``Ns\\{a, b, view}``.

    Only a group that lists ``view`` yields an import, and only that one name
    is kept; the other grouped names are never tracked.
    """
    namespace = ""
    found_view = False

    for child in group.children:
        if child.type == "qualified_name":
            parts = qualified_name_parts(child, source)
            if parts:
                namespace = parts[0]
        elif child.type == "namespace_use_clause":
            bare_name = find_child_by_kind(child, "name")
            if bare_name is not None and extract_text(bare_name, source) == TRACKED_FUNCTION:
                found_view = True

    if not found_view:
        raise InvalidImportFormat("view function not found in grouped import")

    # The shared prefix sits beside the group: use function Tempest\{...};
    if not namespace and declaration is not None:
        prefix = find_child_by_kind(declaration, "namespace_name")
        if prefix is not None:
            segments = namespace_parts(prefix, source)
            if segments:
                namespace = segments[0]

    return ImportInfo(
        namespace=namespace or TRACKED_NAMESPACE,
        function_name=TRACKED_FUNCTION,
        alias=None,
    )


def qualified_name_parts(node: Any, source: bytes) -> list[str]:
    """Split a qualified_name node into its segments, in order."""
    parts: list[str] = []

    def visit(child):
        if child.type == "namespace_name":
            parts.extend(namespace_parts(child, source))
        elif child.type == "namespace_name_as_prefix":
            # Older grammars wrap the prefix: namespace_name_as_prefix(namespace_name '\')
            traverse_children(child, visit)
        elif child.type == "name":
            parts.append(extract_text(child, source))

    traverse_children(node, visit)
    return parts


def namespace_parts(node: Any, source: bytes) -> list[str]:
    """Return the name segments of a namespace_name node."""
    parts: list[str] = []

    def visit(child):
        if child.type == "name":
            parts.append(extract_text(child, source))

    traverse_children(node, visit)
    return parts
