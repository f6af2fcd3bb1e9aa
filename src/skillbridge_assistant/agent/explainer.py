"""Canned explanations for the requirements listed in job matches."""

from __future__ import annotations

import re
from collections.abc import Sequence

from skillbridge_assistant.types import JobMatch

NO_MATCHES_MESSAGE = "Nenhuma vaga para extrair requisitos."
NO_REQUIREMENTS_MESSAGE = "As vagas não possuem requisitos detalhados."
HEADER = "Posso explicar os principais requisitos encontrados nas vagas:"
CLOSING = "Diga se quer exemplos práticos, exercícios ou links de estudo."
GENERIC_EXPLANATION = (
    "Conceito comum na vaga; consulte a documentação oficial e pratique com pequenos projetos."
)

# First entry whose keyword is contained in the requirement wins.
REQUIREMENT_GLOSSARY: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("java",),
        "Java 11+ é uma versão LTS; foque em recursos modernos (var, streams, API de "
        "Date/Time), boas práticas de OOP, Maven/Gradle e entendimento da JVM.",
    ),
    (
        ("spring boot", "springboot", "spring"),
        "Spring Boot é o framework para criar aplicações Java rapidamente; entenda injeção "
        "de dependência, controllers, Spring Data JPA, profiles e configuração automática.",
    ),
    (
        ("rest", "api", "restful"),
        "REST trata do design de APIs HTTP: endpoints (GET/POST/PUT/DELETE), códigos de "
        "status, JSON, autenticação/autorização e documentação (OpenAPI/Swagger).",
    ),
    (
        ("sql", "database", "banco"),
        "SQL cobre consultas relacionais (SELECT, JOIN, GROUP BY), índices e transações; "
        "importante para performance e integridade dos dados.",
    ),
    (
        ("python",),
        "Python é muito usado em análise de dados; pratique com bibliotecas como pandas "
        "e scripts de ETL.",
    ),
    (
        ("power bi", "powerbi"),
        "Power BI é uma ferramenta de visualização; crie dashboards e relatórios "
        "conectados a fontes de dados.",
    ),
)

_REQUIREMENT_SEPARATOR = re.compile(r"[,;]")


class RequirementExplainer:
    def __init__(
        self,
        glossary: tuple[tuple[tuple[str, ...], str], ...] = REQUIREMENT_GLOSSARY,
    ) -> None:
        self.glossary = glossary

    def explain(self, matches: Sequence[JobMatch]) -> str:
        if not matches:
            return NO_MATCHES_MESSAGE

        terms = collect_requirements(matches)
        if not terms:
            return NO_REQUIREMENTS_MESSAGE

        lines = [HEADER, ""]
        for term in terms:
            lines.append(f"- {term[:1].upper()}{term[1:]}: {self.explanation_for(term)}")
        lines.extend(["", CLOSING])
        return "\n".join(lines)

    def explanation_for(self, term: str) -> str:
        for keywords, explanation in self.glossary:
            if any(keyword in term for keyword in keywords):
                return explanation
        return GENERIC_EXPLANATION


def collect_requirements(matches: Sequence[JobMatch]) -> list[str]:
    """Lowercased requirement terms across matches, first-seen order, no repeats."""

    seen: dict[str, None] = {}
    for match in matches:
        if not match.requirements or not match.requirements.strip():
            continue
        for part in _REQUIREMENT_SEPARATOR.split(match.requirements):
            term = part.strip().lower()
            if term:
                seen.setdefault(term, None)
    return list(seen)
