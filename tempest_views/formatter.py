"""Render analysis results as human-readable report lines.

A sink is any callable taking a ``logging`` level and a message. The default
sink writes to this module's logger, so reports follow whatever logging
configuration the application sets up.
"""

import logging
from typing import Any, Callable

from .models import (
    DirectNamespace,
    FunctionImport,
    FunctionImportWithAlias,
    ImportClassification,
    ViewAnalysisResult,
    ViewCall,
)

logger = logging.getLogger(__name__)

Sink = Callable[[int, str], None]


def logging_sink(level: int, message: str) -> None:
    logger.log(level, message)


def kind_label(classification: ImportClassification) -> str:
    """Short label for a classification: direct, imported or aliased."""
    if isinstance(classification, DirectNamespace):
        return "direct"
    if isinstance(classification, FunctionImport):
        return "imported"
    if isinstance(classification, FunctionImportWithAlias):
        return "aliased"
    raise TypeError(f"Unknown import classification: {classification!r}")


def format_import_entry(name: str, classification: ImportClassification) -> str:
    if isinstance(classification, FunctionImportWithAlias):
        return f"{classification.alias} (alias for view)"
    if isinstance(classification, (DirectNamespace, FunctionImport)):
        return f"{name} ({classification.description})"
    raise TypeError(f"Unknown import classification: {classification!r}")


def format_import_summary(imports: dict[str, ImportClassification]) -> str:
    return ", ".join(
        format_import_entry(name, imports[name]) for name in sorted(imports)
    )


def format_parameter(index: int, call: ViewCall) -> str:
    param = call.parameters[index]
    if param.name is not None:
        param_info = f"named parameter '{param.name}' = {param.value}"
    else:
        param_info = f"positional parameter [{index}] = {param.value}"
    return f"  Parameter: {param_info} (raw: '{param.raw_text}')"


def format_call_summary(result: ViewAnalysisResult) -> str:
    details = []
    for call in result.calls:
        classification = result.imports.get(call.function_name)
        label = kind_label(classification) if classification is not None else "unknown"
        details.append(f"  - Line {call.line}: {call.text} ({label})")

    return f"Found {result.call_count} Tempest view() calls:\n" + "\n".join(details)


def log_analysis_results(result: ViewAnalysisResult, uri: str, sink: Sink = logging_sink) -> None:
    """Emit the full report for one analyzed document."""
    if result.imports:
        sink(
            logging.INFO,
            f"Available Tempest view functions in {uri}: {format_import_summary(result.imports)}",
        )

    for call in result.calls:
        classification = result.imports.get(call.function_name)
        description = classification.description if classification is not None else "unknown"
        sink(
            logging.INFO,
            f"Found Tempest view call - name: '{call.function_name}', type: {description}, "
            f"line: {call.line}, text: '{call.text}'",
        )

        for i in range(len(call.parameters)):
            sink(logging.INFO, format_parameter(i, call))

        if not call.parameters:
            sink(logging.INFO, "  No parameters found")

    if result.call_count > 0:
        sink(logging.INFO, format_call_summary(result))


def report_failure(uri: str, error: Exception, sink: Sink = logging_sink) -> None:
    """Report a document that could not be analyzed."""
    sink(logging.ERROR, f"View analysis failed for {uri}: {error}")


def result_to_dict(result: ViewAnalysisResult) -> dict[str, Any]:
    """JSON-ready rendering of a result."""
    imports = {}
    for name in sorted(result.imports):
        classification = result.imports[name]
        entry = {"type": kind_label(classification), "description": classification.description}
        if isinstance(classification, FunctionImportWithAlias):
            entry["alias"] = classification.alias
        imports[name] = entry

    return {
        "imports": imports,
        "calls": [
            {
                "name": call.function_name,
                "line": call.line,
                "text": call.text,
                "parameters": [
                    {"name": p.name, "value": p.value, "raw_text": p.raw_text}
                    for p in call.parameters
                ],
            }
            for call in result.calls
        ],
    }
