"""Shared domain models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class JobRecord:
    """A job listing as owned by the job store."""

    id: int | None
    title: str
    company: str
    location: str
    requirements: str


@dataclass(frozen=True, slots=True)
class JobMatch:
    """A job listing projected for chat display."""

    id: int
    title: str
    company: str
    location: str
    requirements: str


@dataclass(frozen=True, slots=True)
class DocumentRecord:
    """A loaded document; `text` is never None."""

    name: str
    text: str = ""

    def __post_init__(self) -> None:
        if self.text is None:
            object.__setattr__(self, "text", "")


@dataclass(frozen=True, slots=True)
class IntentFacets:
    """Independent boolean classifications of one query."""

    is_greeting: bool = False
    is_job_query: bool = False
    is_doc_query: bool = False
    is_teach_query: bool = False
    references_previous: bool = False


@dataclass(frozen=True, slots=True)
class ProviderResult:
    """Outcome of one generative-text provider call."""

    text: str = ""
    failure_reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.failure_reason is None and bool(self.text.strip())

    @classmethod
    def success(cls, text: str) -> "ProviderResult":
        return cls(text=text)

    @classmethod
    def failure(cls, reason: str) -> "ProviderResult":
        return cls(failure_reason=reason)
