"""Open-document tracking for editor integrations.

DocumentStore keeps the text, parsed tree and version of every open PHP
document, and reports a fresh Tempest view() analysis whenever a document is
opened or changed. The analysis itself is stateless; only the store remembers
anything between calls.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Iterator, Optional

from .errors import ViewAnalysisError
from .formatter import Sink, log_analysis_results, logging_sink, report_failure
from .models import ViewAnalysisResult
from .php_parser import PhpParser, PhpParserError
from .view_intelligence import analyze

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGE_IDS = {"php", "tempest-view"}


@dataclass
class Document:
    """One open document and the tree parsed from its current text."""

    uri: str
    text: str
    tree: Any
    version: int
    language_id: str = "php"


class DocumentStore:
    """Registry of open documents, keyed by URI."""

    def __init__(self, parser: Optional[PhpParser] = None, sink: Sink = logging_sink):
        """
        Args:
            parser: Shared PHP parser. Created on first use if omitted.
            sink: Where analysis reports go (defaults to logging)
        """
        self._parser = parser
        self._sink = sink
        self._documents: dict[str, Document] = {}
        self._lock = threading.Lock()

    @property
    def parser(self) -> PhpParser:
        if self._parser is None:
            self._parser = PhpParser()
        return self._parser

    def register(
        self, uri: str, text: str, version: int = 0, language_id: str = "php"
    ) -> Optional[ViewAnalysisResult]:
        """
        Parse, analyze and start tracking a document.

        Returns:
            The analysis result, or None if the document was skipped, could not
            be parsed, or could not be analyzed
        """
        if language_id not in SUPPORTED_LANGUAGE_IDS:
            self._sink(logging.WARNING, f"Skipping non-PHP document: {uri}")
            return None

        try:
            tree = self.parser.parse(text)
        except PhpParserError as e:
            self._sink(logging.ERROR, f"Could not parse document: {uri} ({e})")
            return None

        document = Document(uri=uri, text=text, tree=tree, version=version, language_id=language_id)
        self._sink(logging.INFO, f"Registered document {uri}")
        if tree is not None:
            logger.debug(f"Registered document {uri}, parsed as:\n\n {tree.root_node}")

        result = self._analyze(document)

        with self._lock:
            self._documents[uri] = document
        return result

    def update(self, uri: str, text: str, version: int) -> Optional[ViewAnalysisResult]:
        """
        Replace a document's text, reparsing incrementally from its old tree.

        Versions that are not newer than the stored one are ignored.

        Raises:
            KeyError: If the document was never registered
        """
        # Held from lookup to store so concurrent updates apply in version order
        with self._lock:
            document = self._documents[uri]

            if version <= document.version:
                logger.debug(f"Ignoring stale version {version} of {uri} (have {document.version})")
                return None

            try:
                tree = self.parser.reparse(document.tree, document.text, text)
            except PhpParserError as e:
                self._sink(logging.ERROR, f"Could not parse document: {uri} ({e})")
                return None

            updated = Document(
                uri=uri, text=text, tree=tree, version=version, language_id=document.language_id
            )
            result = self._analyze(updated)
            self._documents[uri] = updated
        return result

    def unregister(self, uri: str) -> None:
        """Stop tracking a document. Unknown URIs are ignored."""
        with self._lock:
            self._documents.pop(uri, None)
        self._sink(logging.INFO, f"Unregistered document {uri}")

    def get(self, uri: str) -> Optional[Document]:
        with self._lock:
            return self._documents.get(uri)

    def uris(self) -> list[str]:
        with self._lock:
            return sorted(self._documents)

    def __contains__(self, uri: object) -> bool:
        with self._lock:
            return uri in self._documents

    def __len__(self) -> int:
        with self._lock:
            return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        with self._lock:
            return iter(list(self._documents.values()))

    def _analyze(self, document: Document) -> Optional[ViewAnalysisResult]:
        try:
            result = analyze(document.tree, document.text)
        except ViewAnalysisError as e:
            report_failure(document.uri, e, self._sink)
            return None

        log_analysis_results(result, document.uri, self._sink)
        return result
