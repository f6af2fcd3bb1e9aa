"""Free-text job search over the job store."""

from __future__ import annotations

import logging
import re

from skillbridge_assistant.config import MatcherConfig
from skillbridge_assistant.jobs.store import JobStore
from skillbridge_assistant.types import JobMatch, JobRecord

logger = logging.getLogger(__name__)

_AFTER_JOB_WORD = re.compile(
    r"\b(?:vagas?|empregos?|oportunidades?)\b\s*(?:(?:de|para)\s+)?(.+)$",
    flags=re.DOTALL,
)
_AFTER_LEAD_IN = re.compile(
    r"(?:me\s+fa[lc]e(?:\s+sobre)?|fale\s+sobre|me\s+diga\s+sobre|o\s+que\s+[eé])\s*"
    r"(?:(?:a|o)\s+)?(?:vagas?\s*(?:(?:de|para)\s+)?)?(.+)$",
    flags=re.DOTALL,
)
_STOPWORDS = re.compile(
    r"\b(?:vagas?|procuro|busca|buscando|me\s+conte|me|sobre|fale|diga|por\s+favor|porfavor)\b"
)
_NON_WORD = re.compile(r"[^\w\s]|_")
_MULTISPACE = re.compile(r"\s{2,}")


class JobMatcher:
    """Extracts a search term and merges title and company lookups."""

    def __init__(self, store: JobStore, config: MatcherConfig | None = None) -> None:
        self.store = store
        self.config = config or MatcherConfig()

    def search(self, text: str) -> list[JobMatch]:
        """Return at most `max_matches` jobs, title hits before company-only hits.

        Store failures propagate to the caller.
        """

        term = extract_search_term(text)
        logger.info("Job search query=%r term=%r", text, term)
        if not term:
            return []

        by_title = self.store.find_by_title_contains_ignore_case(term)
        by_company = self.store.find_by_company_contains_ignore_case(term)

        merged: dict[int, JobRecord] = {}
        for record in [*by_title, *by_company]:
            if record.id is None:
                continue
            merged.setdefault(record.id, record)

        selected = list(merged.values())[: self.config.max_matches]
        logger.info("Job search term=%r matches=%d", term, len(selected))
        return [self._to_match(record) for record in selected]

    def _to_match(self, record: JobRecord) -> JobMatch:
        return JobMatch(
            id=record.id,
            title=record.title or "",
            company=record.company or "",
            location=record.location or "",
            requirements=shorten(record.requirements, self.config.requirements_max_chars),
        )


def extract_search_term(text: str) -> str:
    """Pull the searchable part out of a free-text job question.

    Rules are tried in order and the first non-blank candidate wins:
    1. whatever follows a job word ("vagas de java" -> "java");
    2. whatever follows a lead-in such as "fale sobre";
    3. the whole text without punctuation and stopwords.
    """

    if text is None:
        return ""
    lower = text.lower().strip()

    for pattern in (_AFTER_JOB_WORD, _AFTER_LEAD_IN):
        match = pattern.search(lower)
        if match:
            candidate = _normalize(match.group(1))
            if candidate:
                return candidate

    without_punctuation = _NON_WORD.sub(" ", lower)
    cleaned = _MULTISPACE.sub(" ", _STOPWORDS.sub(" ", without_punctuation)).strip()
    return cleaned or without_punctuation.strip()


def shorten(text: str | None, max_length: int) -> str:
    if text is None:
        return ""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def _normalize(text: str) -> str:
    return _MULTISPACE.sub(" ", _NON_WORD.sub(" ", text)).strip()
