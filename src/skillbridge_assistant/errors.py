"""Exception types raised at collaborator boundaries."""

from __future__ import annotations


class AssistantError(Exception):
    """Base class for assistant failures."""


class JobStoreError(AssistantError):
    """The backing job store could not answer a lookup."""


class DocumentLoadError(AssistantError):
    """A single document could not be read or parsed."""
