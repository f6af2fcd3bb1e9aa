"""Two-tier reply synthesis: generative provider first, extractive fallback."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from skillbridge_assistant.agent.provider import TextProvider
from skillbridge_assistant.config import SynthesisConfig
from skillbridge_assistant.types import ProviderResult

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "Sistema: responda de forma natural, curta e útil. "
    "Quando a pergunta for sobre vagas, liste e explique as vagas encontradas. "
    "Quando a pergunta for sobre o documento (PDF), retorne um resumo claro e dirigido "
    "à pergunta do usuário, sem reproduzir o documento integral. "
    "Se o usuário pede para ensinar ou explorar requisitos, explique os termos técnicos "
    "com exemplos práticos. "
    "Se a entrada for um cumprimento curto, responda cordialmente sem trazer conteúdo do PDF. "
    "Use o documento apenas quando o usuário mencionar o PDF ou o projeto SkillBridge."
)

FALLBACK_LEAD_IN = "Resposta breve: "
GENERATED_SUFFIX = "\n\n(Resposta elaborada com apoio de IA generativa a partir do documento.)"
LOCAL_SUFFIX = "\n\n(Resumo gerado localmente a partir do documento.)"

MODE_GENERATIVE = "generative"
MODE_EXTRACTIVE = "extractive"

_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")


@dataclass(frozen=True, slots=True)
class Synthesis:
    text: str
    mode: str
    failure_reason: str | None = None


class ResponseSynthesizer:
    """Phrases a document snippet as an answer to the user's question.

    The extractive fallback is computed before the provider is called, so a
    reply is always available whatever the provider does.
    """

    def __init__(
        self,
        provider: TextProvider | None = None,
        config: SynthesisConfig | None = None,
        *,
        system_prompt: str = SYSTEM_PROMPT,
    ) -> None:
        self.provider = provider
        self.config = config or SynthesisConfig()
        self.system_prompt = system_prompt

    def synthesize(self, snippet: str, question: str) -> str:
        return self.synthesize_detailed(snippet, question).text

    def synthesize_detailed(self, snippet: str, question: str) -> Synthesis:
        if not snippet:
            return Synthesis(text="", mode=MODE_EXTRACTIVE)

        fallback = extractive_summary(snippet, self.config)
        if self.provider is None:
            return Synthesis(text=fallback, mode=MODE_EXTRACTIVE, failure_reason="no provider")

        result = self._call_provider(snippet, question)
        if result.ok:
            return Synthesis(text=result.text.strip() + GENERATED_SUFFIX, mode=MODE_GENERATIVE)

        reason = result.failure_reason or "blank response"
        logger.warning("Falling back to extractive summary: %s", reason)
        return Synthesis(text=fallback, mode=MODE_EXTRACTIVE, failure_reason=reason)

    def _call_provider(self, snippet: str, question: str) -> ProviderResult:
        try:
            return self.provider.complete(self.system_prompt, build_user_prompt(question, snippet))
        except Exception as exc:  # third-party providers may still raise
            logger.warning("Provider raised %s: %s", type(exc).__name__, exc)
            return ProviderResult.failure(f"{type(exc).__name__}: {exc}")


def build_user_prompt(question: str, snippet: str) -> str:
    return (
        f"Pergunta do usuário: {question}\n\n"
        f"Trecho do documento:\n{snippet}\n\n"
        "Responda à pergunta usando apenas o trecho acima."
    )


def extractive_summary(snippet: str, config: SynthesisConfig | None = None) -> str:
    """Deterministic summary built from the first sentences of the snippet."""

    config = config or SynthesisConfig()
    if not snippet:
        return ""

    sentences = [part.strip() for part in _SENTENCE_SPLIT.split(snippet) if part.strip()]
    summary = (FALLBACK_LEAD_IN + " ".join(sentences[: config.max_sentences])).strip()
    if len(summary) < config.min_summary_chars:
        if len(snippet) > config.verbatim_chars:
            summary = snippet[: config.verbatim_chars] + "..."
        else:
            summary = snippet
    return summary + LOCAL_SUFFIX
