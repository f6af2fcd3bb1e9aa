"""Parsers turning project documentation files into plain text."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from skillbridge_assistant.errors import DocumentLoadError
from skillbridge_assistant.types import DocumentRecord


class Parser(ABC):
    """Base parser interface used by the document loader."""

    extensions: tuple[str, ...] = ()

    @abstractmethod
    def parse(self, path: Path) -> DocumentRecord:
        """Parse a file into a named document."""


class PdfParser(Parser):
    """Extracts page text from PDF files."""

    extensions = (".pdf",)

    def parse(self, path: Path) -> DocumentRecord:
        try:
            reader = PdfReader(str(path))
            pages = [page.extract_text() or "" for page in reader.pages]
        except (OSError, ValueError, PdfReadError) as exc:
            raise DocumentLoadError(f"Cannot read PDF {path.name}: {exc}") from exc
        return DocumentRecord(name=path.name, text="\n".join(pages))


class TextParser(Parser):
    """Parser for plain text documents."""

    extensions = (".txt",)

    def parse(self, path: Path) -> DocumentRecord:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentLoadError(f"Cannot read {path.name}: {exc}") from exc
        return DocumentRecord(name=path.name, text=text)


class MarkdownParser(TextParser):
    """Parser for markdown documents, kept verbatim."""

    extensions = (".md", ".markdown")


class ParserRegistry:
    """Maps file extension to parser implementation."""

    def __init__(self, parsers: list[Parser] | None = None) -> None:
        self._parsers: dict[str, Parser] = {}
        for parser in parsers or [PdfParser(), TextParser(), MarkdownParser()]:
            self.register(parser)

    def register(self, parser: Parser) -> None:
        for extension in parser.extensions:
            self._parsers[extension.lower()] = parser

    def supports(self, path: Path) -> bool:
        return path.suffix.lower() in self._parsers

    def parse_path(self, path: str | Path) -> DocumentRecord:
        file_path = Path(path)
        parser = self._parsers.get(file_path.suffix.lower())
        if parser is None:
            raise DocumentLoadError(f"No parser registered for extension: {file_path.suffix}")
        return parser.parse(file_path)
