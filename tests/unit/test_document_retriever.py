from skillbridge_assistant.agent.synthesizer import LOCAL_SUFFIX, ResponseSynthesizer
from skillbridge_assistant.config import RetrievalConfig
from skillbridge_assistant.retrieval.retriever import (
    GREETING_PHRASES,
    DocumentRetriever,
    choose_greeting,
    score_document,
    tokenize,
)
from skillbridge_assistant.types import DocumentRecord

_PROJECT_TEXT = (
    "SkillBridge é uma plataforma que conecta pessoas a vagas de tecnologia. "
    "O sistema recomenda trilhas de estudo para cada requisito. "
    "Empresas publicam vagas e acompanham candidaturas."
)


def _retriever(config: RetrievalConfig | None = None) -> DocumentRetriever:
    return DocumentRetriever(ResponseSynthesizer(provider=None), config)


def test_empty_cache_returns_empty_string() -> None:
    assert _retriever().answer("o que diz o pdf?", []) == ""


def test_no_token_occurrence_returns_empty_string() -> None:
    docs = [DocumentRecord(name="vazio.pdf", text=""), DocumentRecord(name="z.pdf", text="zzz")]

    assert _retriever().answer("pdf", docs) == ""


def test_best_scoring_document_answers_with_name_and_greeting() -> None:
    docs = [
        DocumentRecord(name="z.pdf", text="zzz"),
        DocumentRecord(name="skillbridge.pdf", text=_PROJECT_TEXT),
    ]

    answer = _retriever().retrieve("o que é o skillbridge no pdf?", docs)

    assert answer.document_name == "skillbridge.pdf"
    assert answer.score > 0
    assert answer.synthesis_mode == "extractive"
    assert answer.text.startswith(choose_greeting("o que é o skillbridge no pdf?"))
    assert "Sobre o projeto (trecho de `skillbridge.pdf`):" in answer.text
    assert answer.text.endswith(LOCAL_SUFFIX)


def test_ties_keep_first_document() -> None:
    docs = [
        DocumentRecord(name="primeiro.pdf", text=_PROJECT_TEXT),
        DocumentRecord(name="segundo.pdf", text=_PROJECT_TEXT),
    ]

    assert _retriever().retrieve("pdf", docs).document_name == "primeiro.pdf"


def test_score_counts_non_overlapping_occurrences() -> None:
    assert score_document("aaaa", ["aa"]) == 2
    assert score_document("Java JAVA java", ["java", "scala"]) == 3


def test_tokenize_discards_empty_tokens() -> None:
    assert tokenize("  Olá, PDF!  ") == ["olá", "pdf"]


def test_snippet_window_around_token() -> None:
    text = "a" * 300 + "TOKEN" + "b" * 400

    snippet = _retriever().extract_snippet(text, "token")

    assert snippet == text[100:600]
    assert "TOKEN" in snippet


def test_snippet_clamped_and_fallback_when_token_absent() -> None:
    retriever = _retriever()

    assert retriever.extract_snippet("token no início", "token") == "token no início"
    assert retriever.extract_snippet("c" * 900, "ausente") == "c" * 500


def test_clean_snippet_strips_artifacts_and_caps_length() -> None:
    retriever = _retriever()

    assert retriever.clean_snippet("  a■■b   c\n\nd ") == "a b c d"
    assert retriever.clean_snippet("x" * 1600) == "x" * 1500 + "..."


def test_greeting_choice_is_stable_per_question() -> None:
    first = choose_greeting("me explique o pdf")

    assert first == choose_greeting("me explique o pdf")
    assert first in GREETING_PHRASES
    assert {choose_greeting(f"pergunta {i}") for i in range(100)} == set(GREETING_PHRASES)


def test_match_without_usable_snippet_returns_empty_string() -> None:
    # Leading whitespace fills the fallback window; "sistema" never occurs.
    docs = [DocumentRecord(name="blank.pdf", text=" " * 600 + "pdf")]

    answer = _retriever().retrieve("o que diz o pdf?", docs)

    assert answer.text == ""
    assert answer.document_name is None
