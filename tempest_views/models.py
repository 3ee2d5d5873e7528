"""Data model for view analysis results.

The import classification is a closed sum type: exactly one of
``DirectNamespace``, ``FunctionImport`` or ``FunctionImportWithAlias``.
Consumers dispatch on it with ``isinstance`` and raise on anything else, so a
new variant has to be handled everywhere it is matched.
"""

from dataclasses import dataclass, field
from typing import ClassVar, Optional, Union


@dataclass(frozen=True)
class DirectNamespace:
    """The function is called through its qualified name, no import needed."""

    description: ClassVar[str] = "direct namespace"


@dataclass(frozen=True)
class FunctionImport:
    """Imported with ``use function Tempest\\view;``."""

    description: ClassVar[str] = "function import"


@dataclass(frozen=True)
class FunctionImportWithAlias:
    """Imported and renamed with ``use function Tempest\\view as alias;``."""

    alias: str
    description: ClassVar[str] = "function import with alias"


ImportClassification = Union[DirectNamespace, FunctionImport, FunctionImportWithAlias]


@dataclass
class ImportInfo:
    """Semantic content of one parsed use statement."""

    namespace: str
    function_name: str
    alias: Optional[str] = None


@dataclass
class ViewParameter:
    """One argument of a call.

    ``raw_text`` is the untouched source of the whole argument. For named
    arguments ``value`` is the expression without the ``name:`` prefix, with
    whitespace between tokens collapsed to single spaces.
    """

    value: str
    raw_text: str
    name: Optional[str] = None


@dataclass
class ViewCall:
    """A function call site; ``function_name`` is the callee exactly as written."""

    function_name: str
    line: int  # 1-based
    text: str
    parameters: list[ViewParameter] = field(default_factory=list)


@dataclass
class ViewAnalysisResult:
    """Import spellings visible in a document and the calls made through them."""

    imports: dict[str, ImportClassification] = field(default_factory=dict)
    calls: list[ViewCall] = field(default_factory=list)

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def has_view_usage(self) -> bool:
        """True when the document imports the function or calls it."""
        if self.calls:
            return True
        return any(
            not isinstance(kind, DirectNamespace) for kind in self.imports.values()
        )
