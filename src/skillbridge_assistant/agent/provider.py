"""Generative-text provider boundary."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Protocol

from langchain_core.prompts import ChatPromptTemplate

from skillbridge_assistant.types import ProviderResult

logger = logging.getLogger(__name__)

_PROMPT = ChatPromptTemplate.from_messages(
    [
        ("system", "{system_prompt}"),
        ("human", "{user_prompt}"),
    ]
)


class TextProvider(Protocol):
    """Prompt in, text out. Implementations report failures in the result."""

    def complete(self, system_prompt: str, user_prompt: str) -> ProviderResult:
        """Generate text for one prompt pair."""


class ChatModelProvider:
    """Wraps a LangChain chat model and bounds each call with a timeout.

    The worker pool is shared across calls; a call that exceeds the timeout
    keeps running in its worker but its result is discarded.
    """

    def __init__(self, llm: Any, *, timeout_seconds: float = 15.0, max_workers: int = 4) -> None:
        self.llm = llm
        self.timeout_seconds = timeout_seconds
        self._chain = _PROMPT | llm
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="provider")

    def complete(self, system_prompt: str, user_prompt: str) -> ProviderResult:
        future = self._pool.submit(
            self._chain.invoke,
            {"system_prompt": system_prompt, "user_prompt": user_prompt},
        )
        try:
            message = future.result(timeout=self.timeout_seconds)
        except FutureTimeoutError:
            future.cancel()
            logger.warning("Provider call timed out after %.1fs", self.timeout_seconds)
            return ProviderResult.failure(f"timeout after {self.timeout_seconds:.1f}s")
        except Exception as exc:  # provider SDKs raise many unrelated types
            logger.warning("Provider call failed: %s", exc)
            return ProviderResult.failure(f"{type(exc).__name__}: {exc}")

        text = _message_text(message).strip()
        if not text:
            return ProviderResult.failure("empty response")
        return ProviderResult.success(text)

    def close(self) -> None:
        self._pool.shutdown(wait=False, cancel_futures=True)


def create_chat_model(timeout_seconds: float = 15.0) -> Any:
    """Return an OpenAI chat model when `OPENAI_API_KEY` is set, else None."""

    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        return None

    from langchain_openai import ChatOpenAI

    return ChatOpenAI(
        model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        temperature=0.2,
        timeout=timeout_seconds,
        max_retries=1,
    )


def _message_text(message: Any) -> str:
    content = getattr(message, "content", message)
    if isinstance(content, list):
        parts: list[str] = []
        for item in content:
            if isinstance(item, dict) and "text" in item:
                parts.append(str(item["text"]))
            elif isinstance(item, str):
                parts.append(item)
        return " ".join(parts)
    return str(content or "")
