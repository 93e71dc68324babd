"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class SynonymPolicy(StrEnum):
    """How a fresh translation is folded into an existing synonym set."""

    REPLACE = "replace"
    SMART_MERGE = "smart-merge"
    DELETE = "delete"

    @property
    def requires_translation(self) -> bool:
        return self is not SynonymPolicy.DELETE


class RunState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in {RunState.COMPLETED, RunState.CANCELLED, RunState.FAILED}


class TranslationTier(StrEnum):
    FREE = "free"
    PRO = "pro"
