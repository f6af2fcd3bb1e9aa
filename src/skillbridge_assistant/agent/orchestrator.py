"""Top-level query routing: classify, gather evidence, assemble the reply."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from skillbridge_assistant.agent.context import ConversationContext
from skillbridge_assistant.agent.explainer import RequirementExplainer
from skillbridge_assistant.agent.provider import TextProvider
from skillbridge_assistant.agent.synthesizer import ResponseSynthesizer
from skillbridge_assistant.config import AssistantConfig
from skillbridge_assistant.docs.loader import DocumentCache, DocumentLoader
from skillbridge_assistant.intent.classifier import IntentClassifier
from skillbridge_assistant.jobs.matcher import JobMatcher
from skillbridge_assistant.jobs.store import JobStore
from skillbridge_assistant.obs.tracing import Timer, TraceStore
from skillbridge_assistant.retrieval.retriever import DocumentAnswer, DocumentRetriever
from skillbridge_assistant.types import DocumentRecord, IntentFacets, JobMatch

logger = logging.getLogger(__name__)

BLANK_MESSAGE = "Por favor, digite uma pergunta."
GREETING_MESSAGE = (
    "Olá! Em que posso ajudar? Posso falar sobre vagas cadastradas ou sobre o "
    "projeto/documentação."
)
NO_MATCHES_MESSAGE = "Não encontrei vagas correspondentes."
LISTING_HEADER = "Encontrei as seguintes vagas:"
NO_DOCUMENTS_MESSAGE = (
    "Nenhum documento carregado. Verifique a pasta de documentos configurada."
)
NO_DOCUMENT_ANSWER_MESSAGE = (
    "Não encontrei resposta específica nos documentos. Tente reformular a pergunta."
)
HINT_MESSAGE = (
    "Não entendi a pergunta. Posso listar vagas (ex.: \"vagas de java\"), explicar os "
    "requisitos da última busca ou responder sobre o projeto SkillBridge (mencione \"pdf\")."
)
ERROR_MESSAGE = "Desculpe, não consegui processar sua pergunta agora. Tente novamente."


@dataclass(frozen=True, slots=True)
class AssistantReply:
    """Reply text plus the context to pass into the next turn."""

    text: str
    context: ConversationContext
    trace_id: str | None = None


@dataclass(slots=True)
class _Turn:
    context: ConversationContext
    facets: IntentFacets | None = None
    parts: list[str] = field(default_factory=list)
    route: list[str] = field(default_factory=list)
    matched_job_ids: list[int] = field(default_factory=list)
    document_name: str | None = None
    synthesis_mode: str | None = None

    def append(self, text: str, separator: str = "\n") -> None:
        if self.parts:
            self.parts.append(separator)
        self.parts.append(text)

    def finish(self, text: str, route: str) -> "_Turn":
        self.parts = [text]
        self.route.append(route)
        return self

    @property
    def text(self) -> str:
        return "".join(self.parts).strip()


class Orchestrator:
    """Routes one question through jobs, explanations and documents.

    Handling order is fixed: blank input, greeting, job search (with the
    explain-previous shortcut), explain-previous outside the job branch, and
    finally document lookup. `ask` never raises; failures of the job store,
    the document loader or the retriever degrade to a textual note.
    """

    def __init__(
        self,
        *,
        classifier: IntentClassifier,
        matcher: JobMatcher,
        explainer: RequirementExplainer,
        retriever: DocumentRetriever,
        document_cache: DocumentCache | None = None,
        trace_store: TraceStore | None = None,
    ) -> None:
        self.classifier = classifier
        self.matcher = matcher
        self.explainer = explainer
        self.retriever = retriever
        self.document_cache = document_cache
        self.trace_store = trace_store

    def ask(self, text: str, context: ConversationContext | None = None) -> AssistantReply:
        context = context or ConversationContext()
        with Timer() as timer:
            try:
                turn = self._route(text, context)
            except Exception:
                logger.exception("Unexpected failure while answering %r", text)
                turn = _Turn(context=context).finish(ERROR_MESSAGE, "error")
        reply_text = turn.text or HINT_MESSAGE
        if not turn.route:
            turn.route.append("hint")

        trace_id = None
        if self.trace_store is not None:
            record = self.trace_store.create_record(
                question=text or "",
                answer=reply_text,
                facets=turn.facets,
                route="+".join(turn.route),
                latency_ms=timer.elapsed_ms,
                matched_job_ids=turn.matched_job_ids,
                document_name=turn.document_name,
                synthesis_mode=turn.synthesis_mode,
            )
            trace_id = record.trace_id
        return AssistantReply(text=reply_text, context=turn.context, trace_id=trace_id)

    def _route(self, text: str, context: ConversationContext) -> _Turn:
        turn = _Turn(context=context)
        if text is None or not text.strip():
            return turn.finish(BLANK_MESSAGE, "blank")

        facets = self.classifier.classify(text)
        turn.facets = facets
        if facets.is_greeting:
            return turn.finish(GREETING_MESSAGE, "greeting")

        wants_previous = facets.is_teach_query and facets.references_previous

        if facets.is_job_query:
            matches = self._search_jobs(text)
            if not matches:
                if wants_previous and context.has_prior_matches:
                    return self._explain(turn, context.last_job_matches, "explain_previous")
                turn.append(NO_MATCHES_MESSAGE)
                turn.route.append("jobs_empty")
            else:
                turn.context = turn.context.with_matches(matches)
                turn.matched_job_ids = [match.id for match in matches]
                if facets.is_teach_query:
                    return self._explain(turn, matches, "explain_jobs")
                turn.append(format_listing(matches))
                turn.route.append("jobs")
        elif wants_previous and context.has_prior_matches:
            return self._explain(turn, context.last_job_matches, "explain_previous")

        if facets.is_doc_query:
            self._answer_from_documents(turn, text)

        return turn

    def _search_jobs(self, text: str) -> list[JobMatch]:
        try:
            return self.matcher.search(text)
        except Exception:
            logger.exception("Job search failed; treating as no matches")
            return []

    def _explain(self, turn: _Turn, matches: Sequence[JobMatch], route: str) -> _Turn:
        return turn.finish(self.explainer.explain(matches), route)

    def _answer_from_documents(self, turn: _Turn, text: str) -> None:
        documents = self._documents(turn)
        if not documents:
            turn.append(NO_DOCUMENTS_MESSAGE)
            turn.route.append("documents_missing")
            return

        try:
            answer = self.retriever.retrieve(text, documents)
        except Exception:
            logger.exception("Document retrieval failed")
            answer = DocumentAnswer(text="")

        if answer.text:
            turn.append(answer.text, separator="\n\n")
            turn.route.append("documents")
            turn.document_name = answer.document_name
            turn.synthesis_mode = answer.synthesis_mode
        else:
            turn.append(NO_DOCUMENT_ANSWER_MESSAGE, separator="\n\n")
            turn.route.append("documents_empty")

    def _documents(self, turn: _Turn) -> tuple[DocumentRecord, ...]:
        if turn.context.loaded_documents:
            return turn.context.loaded_documents
        if self.document_cache is None:
            return ()
        try:
            documents = self.document_cache.get()
        except Exception:
            logger.exception("Loading documents failed")
            return ()
        turn.context = turn.context.with_documents(documents)
        return turn.context.loaded_documents


def format_listing(matches: Sequence[JobMatch]) -> str:
    lines = [LISTING_HEADER]
    for match in matches:
        line = f"- {match.title}"
        if match.company.strip():
            line += f" — {match.company}"
        if match.location.strip():
            line += f" ({match.location})"
        lines.append(line)
        lines.append(f"  Requisitos: {match.requirements}")
    return "\n".join(lines)


def build_orchestrator(
    job_store: JobStore,
    document_loader: DocumentLoader | None = None,
    *,
    provider: TextProvider | None = None,
    config: AssistantConfig | None = None,
    trace_store: TraceStore | None = None,
) -> Orchestrator:
    """Wire the default component graph around the given collaborators."""

    config = config or AssistantConfig()
    synthesizer = ResponseSynthesizer(provider, config.synthesis)
    return Orchestrator(
        classifier=IntentClassifier(config.intent),
        matcher=JobMatcher(job_store, config.matcher),
        explainer=RequirementExplainer(),
        retriever=DocumentRetriever(synthesizer, config.retrieval),
        document_cache=DocumentCache(document_loader) if document_loader is not None else None,
        trace_store=trace_store,
    )
