"""Pattern-based intent classification."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from skillbridge_assistant.config import IntentConfig
from skillbridge_assistant.types import IntentFacets


class Facet(str, Enum):
    GREETING = "greeting"
    JOB_QUERY = "job_query"
    DOC_QUERY = "doc_query"
    TEACH_QUERY = "teach_query"
    REFERENCES_PREVIOUS = "references_previous"


_GREETING = re.compile(
    r"^(?:oi|ol[aá]|bom dia|boa tarde|boa noite|e a[ií]|ei)(?:\W.*)?$",
    flags=re.DOTALL,
)
_JOB_VOCABULARY = re.compile(
    r"\b(?:vagas?|empregos?|oportunidades?|contrata(?:-se)?|empresas?|t[ií]tulo"
    r"|analista|desenvolvedor(?:a|es)?|pleno|j[uú]nior|s[eê]nior)\b"
    r"|\b(?:sr|jr)\."
)
_TEACH_VOCABULARY = re.compile(
    r"\b(?:(?:me\s+)?ensin[ea]|(?:me\s+)?explique|como|aprenda|o que s[aã]o|o que [eé])\b"
    r"|requisitos"
)
_ANAPHORA = re.compile(
    r"\b(?:esse|essa|esses|essas|estes|estas|aqueles|aquelas|isso|aquilo|eles|elas"
    r"|os requisitos)\b"
)


@dataclass(frozen=True, slots=True)
class IntentRule:
    """One (facet, predicate) entry; predicates see lowercased text."""

    facet: Facet
    predicate: Callable[[str], bool]


def _matches(pattern: re.Pattern[str]) -> Callable[[str], bool]:
    return lambda text: pattern.search(text) is not None


def build_rules(config: IntentConfig | None = None) -> tuple[IntentRule, ...]:
    """Return the ordered rule table used by `IntentClassifier`.

    The greeting rule comes first because the orchestrator answers a greeting
    before looking at any other facet. The remaining facets are independent.
    """

    config = config or IntentConfig()
    doc_markers = tuple(marker.lower() for marker in config.document_markers)
    project_names = tuple(name.lower() for name in config.project_names)

    def _is_doc_query(text: str) -> bool:
        return any(marker in text for marker in doc_markers) or any(
            name in text for name in project_names
        )

    return (
        IntentRule(Facet.GREETING, lambda text: _GREETING.match(text.strip()) is not None),
        IntentRule(Facet.JOB_QUERY, _matches(_JOB_VOCABULARY)),
        IntentRule(Facet.DOC_QUERY, _is_doc_query),
        IntentRule(Facet.TEACH_QUERY, _matches(_TEACH_VOCABULARY)),
        IntentRule(Facet.REFERENCES_PREVIOUS, _matches(_ANAPHORA)),
    )


class IntentClassifier:
    """Maps raw text to independent facets via an ordered rule table."""

    def __init__(
        self,
        config: IntentConfig | None = None,
        *,
        rules: tuple[IntentRule, ...] | None = None,
    ) -> None:
        self.rules = rules if rules is not None else build_rules(config)

    def active_facets(self, text: str) -> list[Facet]:
        if text is None or not text.strip():
            raise ValueError("Cannot classify blank text")
        normalized = text.lower()
        return [rule.facet for rule in self.rules if rule.predicate(normalized)]

    def classify(self, text: str) -> IntentFacets:
        active = set(self.active_facets(text))
        return IntentFacets(
            is_greeting=Facet.GREETING in active,
            is_job_query=Facet.JOB_QUERY in active,
            is_doc_query=Facet.DOC_QUERY in active,
            is_teach_query=Facet.TEACH_QUERY in active,
            references_previous=Facet.REFERENCES_PREVIOUS in active,
        )
