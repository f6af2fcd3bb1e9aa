from skillbridge_assistant.docs.loader import DirectoryDocumentLoader, DocumentCache
from skillbridge_assistant.docs.parser import ParserRegistry, TextParser
from skillbridge_assistant.types import DocumentRecord


class _CountingLoader:
    def __init__(self, documents: list[DocumentRecord]) -> None:
        self.documents = documents
        self.calls = 0

    def load_all(self) -> list[DocumentRecord]:
        self.calls += 1
        return list(self.documents)


def test_loader_reads_supported_files_sorted_and_skips_broken(tmp_path) -> None:
    (tmp_path / "b.txt").write_text("Manual do SkillBridge.", encoding="utf-8")
    (tmp_path / "a.md").write_text("# Visão geral", encoding="utf-8")
    (tmp_path / "dados.csv").write_text("id,nome", encoding="utf-8")
    (tmp_path / "broken.pdf").write_bytes(b"")

    docs = DirectoryDocumentLoader(tmp_path).load_all()

    assert [doc.name for doc in docs] == ["a.md", "b.txt"]
    assert docs[1].text == "Manual do SkillBridge."


def test_loader_missing_folder_returns_empty(tmp_path) -> None:
    assert DirectoryDocumentLoader(tmp_path / "nao-existe").load_all() == []


def test_loader_uses_custom_registry(tmp_path) -> None:
    (tmp_path / "notas.txt").write_text("texto", encoding="utf-8")
    (tmp_path / "leia.md").write_text("markdown", encoding="utf-8")

    docs = DirectoryDocumentLoader(tmp_path, ParserRegistry([TextParser()])).load_all()

    assert [doc.name for doc in docs] == ["notas.txt"]


def test_cache_loads_once_until_invalidated() -> None:
    loader = _CountingLoader([DocumentRecord(name="a.pdf", text="conteúdo")])
    cache = DocumentCache(loader)

    assert not cache.loaded
    first = cache.get()
    second = cache.get()

    assert first == second == (DocumentRecord(name="a.pdf", text="conteúdo"),)
    assert loader.calls == 1

    cache.invalidate()
    cache.get()
    assert loader.calls == 2


def test_cache_remembers_empty_batches() -> None:
    loader = _CountingLoader([])
    cache = DocumentCache(loader)

    assert cache.get() == ()
    assert cache.get() == ()
    assert loader.calls == 1


def test_document_text_never_none() -> None:
    assert DocumentRecord(name="x.pdf", text=None).text == ""
