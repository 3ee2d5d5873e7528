"""Tempest view intelligence: find Tempest\\view() calls in PHP source."""

__version__ = "0.1.0"

from .errors import InvalidImportFormat, ParseError, TextExtractionError, ViewAnalysisError
from .models import (
    DirectNamespace,
    FunctionImport,
    FunctionImportWithAlias,
    ImportClassification,
    ImportInfo,
    ViewAnalysisResult,
    ViewCall,
    ViewParameter,
)
from .call_analyzer import find_function_calls
from .import_analyzer import analyze_imports
from .view_intelligence import analyze, find_view_calls
from .php_parser import PhpParser, PhpParserError
from .documents import Document, DocumentStore

__all__ = [
    "__version__",
    "analyze",
    "analyze_imports",
    "find_function_calls",
    "find_view_calls",
    "DirectNamespace",
    "Document",
    "DocumentStore",
    "FunctionImport",
    "FunctionImportWithAlias",
    "ImportClassification",
    "ImportInfo",
    "InvalidImportFormat",
    "ParseError",
    "PhpParser",
    "PhpParserError",
    "TextExtractionError",
    "ViewAnalysisError",
    "ViewAnalysisResult",
    "ViewCall",
    "ViewParameter",
]
