"""Pytest configuration and fixtures."""

from dataclasses import dataclass, field
from typing import Any, Optional

import pytest


@dataclass(eq=False)
class FakeNode:
    """Minimal stand-in for a tree-sitter Node, for grammar-free tests."""

    type: str
    start_byte: int = 0
    end_byte: int = 0
    children: list = field(default_factory=list)
    fields: dict = field(default_factory=dict)
    start_point: tuple = (0, 0)

    @property
    def child_count(self) -> int:
        return len(self.children)

    def child_by_field_name(self, name: str) -> Optional[Any]:
        return self.fields.get(name)


@pytest.fixture
def make_node():
    """Factory for FakeNode instances."""
    return FakeNode


@pytest.fixture(scope="session")
def php_parser():
    """Shared PHP parser; skips the test when tree-sitter-php is missing."""
    pytest.importorskip("tree_sitter_php")
    from tempest_views.php_parser import PhpParser

    return PhpParser()


@pytest.fixture
def parse_php(php_parser):
    """Parse PHP source, returning (tree, source)."""
    def _parse(code: str):
        return php_parser.parse(code), code

    return _parse
