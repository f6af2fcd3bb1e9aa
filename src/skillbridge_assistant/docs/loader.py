"""Document loading and the process-wide document cache."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Protocol

from skillbridge_assistant.docs.parser import ParserRegistry
from skillbridge_assistant.errors import DocumentLoadError
from skillbridge_assistant.types import DocumentRecord

logger = logging.getLogger(__name__)


class DocumentLoader(Protocol):
    def load_all(self) -> list[DocumentRecord]:
        """Return every readable document; unreadable ones are skipped."""


class DirectoryDocumentLoader:
    """Loads every supported file of one folder, sorted by file name."""

    def __init__(self, root: str | Path, parser_registry: ParserRegistry | None = None) -> None:
        self.root = Path(root)
        self._parser_registry = parser_registry or ParserRegistry()

    def load_all(self) -> list[DocumentRecord]:
        if not self.root.is_dir():
            logger.warning("Document folder not found: %s", self.root)
            return []

        paths = sorted(
            path
            for path in self.root.iterdir()
            if path.is_file() and self._parser_registry.supports(path)
        )
        if not paths:
            logger.warning("No supported documents in %s", self.root)
            return []

        docs: list[DocumentRecord] = []
        for path in paths:
            try:
                docs.append(self._parser_registry.parse_path(path))
            except DocumentLoadError as exc:
                logger.warning("Skipping document %s: %s", path.name, exc)
                continue
            logger.debug("Loaded document %s", path.name)

        logger.info("Loaded %d of %d document(s) from %s", len(docs), len(paths), self.root)
        return docs


class DocumentCache:
    """Loads documents once per process and shares them across requests."""

    def __init__(self, loader: DocumentLoader) -> None:
        self._loader = loader
        self._lock = threading.Lock()
        self._documents: tuple[DocumentRecord, ...] = ()
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def get(self) -> tuple[DocumentRecord, ...]:
        if self._loaded:
            return self._documents
        with self._lock:
            if not self._loaded:
                self._documents = tuple(self._loader.load_all())
                self._loaded = True
        return self._documents

    def invalidate(self) -> None:
        with self._lock:
            self._documents = ()
            self._loaded = False
