"""Merge policies for meaning synonym sets.

Synonyms are compared case-insensitively after trimming surrounding
whitespace. Output keeps the casing of the first occurrence of each synonym;
later duplicates are dropped regardless of their casing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, assert_never

from doitsukani.domain.errors import ValidationError
from doitsukani.domain.model import SynonymPolicy

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


@dataclass(frozen=True, slots=True)
class MergeResult:
    next_synonyms: tuple[str, ...]
    changed: bool


def synonym_key(value: str) -> str:
    return value.strip().lower()


def dedupe_synonyms(values: Iterable[str]) -> tuple[str, ...]:
    """Drop blank and repeated synonyms, keeping first-seen order and casing."""

    first_seen: dict[str, str] = {}
    for value in values:
        stripped = value.strip()
        if not stripped:
            continue
        first_seen.setdefault(stripped.lower(), stripped)
    return tuple(first_seen.values())


def synonyms_equal(left: Sequence[str], right: Sequence[str]) -> bool:
    """Compare two synonym sequences ignoring order, case and padding."""

    return sorted(synonym_key(value) for value in left) == sorted(
        synonym_key(value) for value in right
    )


def contains_synonym(synonyms: Iterable[str], candidate: str) -> bool:
    key = synonym_key(candidate)
    return any(synonym_key(value) == key for value in synonyms)


def merge_synonyms(
    current: Sequence[str],
    translated: str | None,
    policy: SynonymPolicy,
) -> MergeResult:
    """Compute the synonym set ``policy`` produces and whether it needs a write."""

    match policy:
        case SynonymPolicy.REPLACE:
            replacement = dedupe_synonyms([_require_translation(translated, policy)])
            return MergeResult(
                next_synonyms=replacement,
                changed=not synonyms_equal(current, replacement),
            )
        case SynonymPolicy.SMART_MERGE:
            candidate = _require_translation(translated, policy)
            if not candidate.strip() or contains_synonym(current, candidate):
                return MergeResult(next_synonyms=tuple(current), changed=False)
            return MergeResult(
                next_synonyms=dedupe_synonyms([*current, candidate]),
                changed=True,
            )
        case SynonymPolicy.DELETE:
            # An already-empty set must never cost a write.
            return MergeResult(next_synonyms=(), changed=len(current) > 0)
        case _:
            assert_never(policy)


def _require_translation(translated: str | None, policy: SynonymPolicy) -> str:
    if translated is None:
        raise ValidationError(f"Policy {policy.value!r} requires a translated synonym")
    return translated
