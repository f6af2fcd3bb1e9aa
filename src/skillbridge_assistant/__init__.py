"""SkillBridge conversational assistant package."""

from .config import AssistantConfig, MatcherConfig, RetrievalConfig, SynthesisConfig

__all__ = ["AssistantConfig", "MatcherConfig", "RetrievalConfig", "SynthesisConfig"]
