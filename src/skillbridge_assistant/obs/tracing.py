"""Per-turn tracing and aggregate metrics."""

from __future__ import annotations

import threading
import time
import uuid
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone

from skillbridge_assistant.types import IntentFacets


@dataclass(slots=True)
class TurnRecord:
    trace_id: str
    timestamp_utc: str
    question: str
    answer: str
    facets: IntentFacets | None
    route: str
    latency_ms: float
    matched_job_ids: list[int] = field(default_factory=list)
    document_name: str | None = None
    synthesis_mode: str | None = None


class TraceStore:
    """In-memory turn storage for API-level observability."""

    def __init__(self, max_records: int = 1000) -> None:
        self._records: dict[str, TurnRecord] = {}
        self._max_records = max_records
        self._lock = threading.Lock()

    def create_record(
        self,
        *,
        question: str,
        answer: str,
        facets: IntentFacets | None,
        route: str,
        latency_ms: float,
        matched_job_ids: list[int] | None = None,
        document_name: str | None = None,
        synthesis_mode: str | None = None,
    ) -> TurnRecord:
        record = TurnRecord(
            trace_id=str(uuid.uuid4()),
            timestamp_utc=datetime.now(timezone.utc).isoformat(),
            question=question,
            answer=answer,
            facets=facets,
            route=route,
            latency_ms=latency_ms,
            matched_job_ids=list(matched_job_ids or []),
            document_name=document_name,
            synthesis_mode=synthesis_mode,
        )
        with self._lock:
            self._records[record.trace_id] = record
            while len(self._records) > self._max_records:
                del self._records[next(iter(self._records))]
        return record

    def get(self, trace_id: str) -> TurnRecord:
        with self._lock:
            record = self._records.get(trace_id)
        if record is None:
            raise KeyError(f"Trace not found: {trace_id}")
        return record

    def list_recent(self, limit: int = 20) -> list[TurnRecord]:
        with self._lock:
            return list(self._records.values())[-limit:]

    def summary(self) -> dict[str, object]:
        """Aggregate turn metrics for dashboard display."""
        with self._lock:
            records = list(self._records.values())
        total = len(records)
        if total == 0:
            return {
                "total_turns": 0,
                "avg_latency_ms": 0.0,
                "p95_latency_ms": 0.0,
                "routes": {},
                "synthesis_modes": {},
            }

        latencies = sorted(record.latency_ms for record in records)
        p95_index = max(0, int((len(latencies) * 0.95) - 1))
        return {
            "total_turns": total,
            "avg_latency_ms": sum(latencies) / total,
            "p95_latency_ms": latencies[p95_index],
            "routes": dict(Counter(record.route for record in records)),
            "synthesis_modes": dict(
                Counter(record.synthesis_mode for record in records if record.synthesis_mode)
            ),
        }


class Timer:
    """Simple context timer used by the orchestrator."""

    def __init__(self) -> None:
        self._start = 0.0
        self.elapsed_ms = 0.0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000.0
