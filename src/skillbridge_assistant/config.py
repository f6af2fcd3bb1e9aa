"""Configuration models for the assistant."""

from __future__ import annotations

from pydantic import BaseModel, Field


class IntentConfig(BaseModel):
    """Vocabulary that marks a query as being about the project documents."""

    project_names: tuple[str, ...] = ("skillbridge", "skill bridge")
    document_markers: tuple[str, ...] = ("pdf",)


class MatcherConfig(BaseModel):
    """Configures job search size limits."""

    max_matches: int = Field(default=5, ge=1)
    requirements_max_chars: int = Field(default=400, ge=1)


class RetrievalConfig(BaseModel):
    """Configures snippet extraction around the best document match."""

    snippet_chars_before: int = Field(default=200, ge=0)
    snippet_chars_after: int = Field(default=300, ge=1)
    snippet_fallback_chars: int = Field(default=500, ge=1)
    snippet_max_chars: int = Field(default=1500, ge=1)
    artifact_chars: tuple[str, ...] = ("■",)


class SynthesisConfig(BaseModel):
    """Configures generative synthesis and the extractive fallback."""

    max_sentences: int = Field(default=2, ge=1)
    min_summary_chars: int = Field(default=30, ge=0)
    verbatim_chars: int = Field(default=400, ge=1)
    provider_timeout_seconds: float = Field(default=15.0, gt=0.0)


class AssistantConfig(BaseModel):
    """Aggregates every component configuration."""

    intent: IntentConfig = Field(default_factory=IntentConfig)
    matcher: MatcherConfig = Field(default_factory=MatcherConfig)
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    synthesis: SynthesisConfig = Field(default_factory=SynthesisConfig)
