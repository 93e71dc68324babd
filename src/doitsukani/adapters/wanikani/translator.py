"""Translate WaniKani payloads into domain items."""

from __future__ import annotations

from collections.abc import Mapping

from doitsukani.domain.model import StudyItem, StudyMaterialRef

from .schema import StudyMaterialResource, SubjectResource


def parse_study_item(
    payload: Mapping[str, object] | SubjectResource,
    *,
    current_synonyms: tuple[str, ...] = (),
) -> StudyItem:
    resource = (
        payload if isinstance(payload, SubjectResource) else SubjectResource.model_validate(payload)
    )
    label = resource.data.primary_meaning
    if label is None:
        raise ValueError(f"Subject {resource.id} has no meanings")
    return StudyItem(
        id=resource.id,
        label=label,
        level=resource.data.level,
        current_synonyms=current_synonyms,
        characters=resource.data.characters,
        meaning_mnemonic=resource.data.meaning_mnemonic,
    )


def parse_study_material(
    payload: Mapping[str, object] | StudyMaterialResource,
) -> StudyMaterialRef:
    resource = (
        payload
        if isinstance(payload, StudyMaterialResource)
        else StudyMaterialResource.model_validate(payload)
    )
    return StudyMaterialRef(
        id=resource.id,
        subject_id=resource.data.subject_id,
        synonyms=tuple(resource.data.meaning_synonyms),
    )
