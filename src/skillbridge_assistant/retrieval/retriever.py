"""Lexical document retrieval with snippet extraction."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from hashlib import blake2b

from skillbridge_assistant.agent.synthesizer import SYSTEM_PROMPT, ResponseSynthesizer
from skillbridge_assistant.config import RetrievalConfig
from skillbridge_assistant.types import DocumentRecord

logger = logging.getLogger(__name__)

GREETING_PHRASES: tuple[str, ...] = (
    "Olá, aqui vai um resumo.",
    "Segue uma explicação:",
    "Resumo encontrado:",
    "Posso ajudar com isso, veja abaixo:",
)

_WORD_SPLIT = re.compile(r"\W+")
_MULTISPACE = re.compile(r"\s{2,}")


@dataclass(frozen=True, slots=True)
class DocumentAnswer:
    text: str
    document_name: str | None = None
    score: int = 0
    synthesis_mode: str | None = None


class DocumentRetriever:
    """Scores cached documents by token occurrences and answers from the best one.

    Tokens come from the system guidance plus the question, so the guidance
    vocabulary also weighs in the ranking. The snippet is centred on the
    first token of that list.
    """

    def __init__(
        self,
        synthesizer: ResponseSynthesizer,
        config: RetrievalConfig | None = None,
        *,
        guidance: str = SYSTEM_PROMPT,
    ) -> None:
        self.synthesizer = synthesizer
        self.config = config or RetrievalConfig()
        self.guidance = guidance

    def answer(self, text: str, documents: Sequence[DocumentRecord]) -> str:
        return self.retrieve(text, documents).text

    def retrieve(self, text: str, documents: Sequence[DocumentRecord]) -> DocumentAnswer:
        tokens = tokenize(f"{self.guidance}\n\nPergunta: {text}")
        if not tokens or not documents:
            return DocumentAnswer(text="")

        best_doc: DocumentRecord | None = None
        best_score = 0
        for doc in documents:
            score = score_document(doc.text, tokens)
            if score > best_score:
                best_doc, best_score = doc, score

        if best_doc is None:
            logger.info("No document matched the question")
            return DocumentAnswer(text="")

        snippet = self.clean_snippet(self.extract_snippet(best_doc.text, tokens[0]))
        synthesis = self.synthesizer.synthesize_detailed(snippet, text)
        if not synthesis.text:
            logger.info("Best match %s has no usable text near the question", best_doc.name)
            return DocumentAnswer(text="")
        logger.info(
            "Answered from %s (score=%d, mode=%s)", best_doc.name, best_score, synthesis.mode
        )
        reply = (
            f"{choose_greeting(text)} Sobre o projeto (trecho de `{best_doc.name}`):\n\n"
            f"{synthesis.text}"
        )
        return DocumentAnswer(
            text=reply,
            document_name=best_doc.name,
            score=best_score,
            synthesis_mode=synthesis.mode,
        )

    def extract_snippet(self, text: str, token: str) -> str:
        idx = text.lower().find(token.lower())
        if idx < 0:
            return text[: self.config.snippet_fallback_chars]
        start = max(0, idx - self.config.snippet_chars_before)
        end = min(len(text), idx + self.config.snippet_chars_after)
        return text[start:end]

    def clean_snippet(self, text: str) -> str:
        for artifact in self.config.artifact_chars:
            text = text.replace(artifact, " ")
        text = _MULTISPACE.sub(" ", text).strip()
        if len(text) <= self.config.snippet_max_chars:
            return text
        return text[: self.config.snippet_max_chars] + "..."


def tokenize(text: str) -> list[str]:
    return [token for token in _WORD_SPLIT.split(text.lower()) if token]


def score_document(text: str, tokens: Sequence[str]) -> int:
    """Total non-overlapping occurrences of every token in the lowercased text."""

    lowered = text.lower()
    return sum(lowered.count(token) for token in tokens)


def choose_greeting(question: str) -> str:
    """Pick a greeting phrase from a stable hash of the question."""

    digest = blake2b(question.encode("utf-8"), digest_size=8).digest()
    return GREETING_PHRASES[int.from_bytes(digest, "big") % len(GREETING_PHRASES)]
