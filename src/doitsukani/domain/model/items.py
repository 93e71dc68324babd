"""Study items and their remote study-material records."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class StudyItem:
    """A subject (radical) as seen at session start.

    ``label`` is the primary English meaning that gets translated;
    ``current_synonyms`` are the learner's meaning synonyms on the remote
    service in their stored order.
    """

    id: int
    label: str
    level: int
    current_synonyms: tuple[str, ...] = ()
    characters: str | None = None
    meaning_mnemonic: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class StudyMaterialRef:
    """Reference to an existing remote study material."""

    id: int
    subject_id: int
    synonyms: tuple[str, ...] = ()
