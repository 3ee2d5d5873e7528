"""
Tempest view() analysis for a single parsed PHP document.

Runs import resolution and call extraction over the same tree and keeps only
the calls whose callee, exactly as written, is a resolved spelling of
Tempest\\view. The match is purely lexical: a local function that happens to be
called ``view`` is not reported unless ``view`` was imported from Tempest.

Usage:
    from tempest_views import PhpParser, analyze

    source = Path("HomeController.php").read_text()
    tree = PhpParser().parse(source)
    result = analyze(tree, source)
    for call in result.calls:
        print(call.line, call.function_name, [p.value for p in call.parameters])
"""

from typing import Any

from .call_analyzer import find_function_calls
from .import_analyzer import analyze_imports
from .models import ImportClassification, ViewAnalysisResult, ViewCall


def correlate(
    imports: dict[str, ImportClassification], calls: list[ViewCall]
) -> list[ViewCall]:
    """Keep the calls made through a resolved spelling, preserving order."""
    return [call for call in calls if call.function_name in imports]


def analyze(tree: Any, source: str | bytes) -> ViewAnalysisResult:
    """
    Full analysis of one document: visible spellings plus the calls using them.

    Raises:
        ParseError: If the tree cannot be walked; no partial result is returned
    """
    imports = analyze_imports(tree, source)
    all_calls = find_function_calls(tree, source)

    return ViewAnalysisResult(imports=imports, calls=correlate(imports, all_calls))


def find_view_calls(tree: Any, source: str | bytes) -> list[ViewCall]:
    """Return only the Tempest view() calls of a document."""
    return analyze(tree, source).calls
