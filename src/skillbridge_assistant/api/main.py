"""FastAPI entrypoint for chat, trace and metrics endpoints."""

from __future__ import annotations

import os
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from skillbridge_assistant.agent.context import SessionStore
from skillbridge_assistant.agent.orchestrator import build_orchestrator
from skillbridge_assistant.agent.provider import ChatModelProvider, create_chat_model
from skillbridge_assistant.config import AssistantConfig
from skillbridge_assistant.docs.loader import DirectoryDocumentLoader
from skillbridge_assistant.jobs.store import InMemoryJobStore, SqliteJobStore, seed_sample_jobs
from skillbridge_assistant.obs.logs import configure_logging
from skillbridge_assistant.obs.tracing import TraceStore

configure_logging()


def _create_job_store() -> InMemoryJobStore | SqliteJobStore:
    db_path = os.getenv("SKILLBRIDGE_JOBS_DB")
    store: InMemoryJobStore | SqliteJobStore = (
        SqliteJobStore(db_path) if db_path else InMemoryJobStore()
    )
    if os.getenv("SKILLBRIDGE_SEED_JOBS", "1") != "0":
        seed_sample_jobs(store)
    return store


class ChatRequest(BaseModel):
    message: str = Field(default="", max_length=4000)
    session_id: str | None = None


class ChatResponse(BaseModel):
    reply: str
    session_id: str
    trace_id: str | None = None


@asynccontextmanager
async def _lifespan(_: FastAPI) -> AsyncIterator[None]:
    yield
    if _provider is not None:
        _provider.close()


app = FastAPI(title="SkillBridge Assistant", version="0.1.0", lifespan=_lifespan)

_config = AssistantConfig()
_llm = create_chat_model(timeout_seconds=_config.synthesis.provider_timeout_seconds)
_provider = (
    ChatModelProvider(_llm, timeout_seconds=_config.synthesis.provider_timeout_seconds)
    if _llm is not None
    else None
)

_trace_store = TraceStore()
_sessions = SessionStore(max_sessions=int(os.getenv("SKILLBRIDGE_MAX_SESSIONS", "1000")))
_orchestrator = build_orchestrator(
    _create_job_store(),
    DirectoryDocumentLoader(os.getenv("SKILLBRIDGE_DOCS_DIR", "doc")),
    provider=_provider,
    config=_config,
    trace_store=_trace_store,
)


@app.get("/health")
def health() -> dict[str, Any]:
    return {
        "status": "ok",
        "llm_configured": _llm is not None,
        "synthesis_mode": "generative" if _provider is not None else "extractive",
        "active_sessions": len(_sessions),
        "documents_loaded": (
            _orchestrator.document_cache.loaded if _orchestrator.document_cache else False
        ),
    }


@app.post("/chat", response_model=ChatResponse)
def chat(request: ChatRequest) -> ChatResponse:
    session_id = request.session_id or str(uuid.uuid4())
    reply = _orchestrator.ask(request.message, _sessions.get(session_id))
    _sessions.save(session_id, reply.context)
    return ChatResponse(reply=reply.text, session_id=session_id, trace_id=reply.trace_id)


@app.get("/traces")
def traces(limit: int = 20) -> dict[str, Any]:
    records = [asdict(record) for record in _trace_store.list_recent(limit=limit)]
    return {"items": records}


@app.get("/traces/{trace_id}")
def trace_detail(trace_id: str) -> dict[str, Any]:
    try:
        record = _trace_store.get(trace_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return asdict(record)


@app.get("/metrics")
def metrics() -> dict[str, Any]:
    return _trace_store.summary()
