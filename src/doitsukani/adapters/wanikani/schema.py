"""Pydantic models describing the WaniKani v2 payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class WaniKaniBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Meaning(WaniKaniBaseModel):
    meaning: str
    primary: bool = False
    accepted_answer: bool = True


class RadicalData(WaniKaniBaseModel):
    level: int
    characters: str | None = None
    meanings: list[Meaning] = Field(default_factory=list["Meaning"])
    meaning_mnemonic: str | None = None
    hidden_at: str | None = None

    @property
    def primary_meaning(self) -> str | None:
        for meaning in self.meanings:
            if meaning.primary:
                return meaning.meaning
        return self.meanings[0].meaning if self.meanings else None


class SubjectResource(WaniKaniBaseModel):
    id: int
    object: str
    data: RadicalData


class StudyMaterialData(WaniKaniBaseModel):
    subject_id: int
    subject_type: str | None = None
    meaning_synonyms: list[str] = Field(default_factory=list[str])
    meaning_note: str | None = None


class StudyMaterialResource(WaniKaniBaseModel):
    id: int
    object: str = "study_material"
    data: StudyMaterialData


class Pages(WaniKaniBaseModel):
    next_url: str | None = None
    previous_url: str | None = None
    per_page: int | None = None


class SubjectCollection(WaniKaniBaseModel):
    object: str = "collection"
    total_count: int = 0
    pages: Pages = Field(default_factory=Pages)
    data: list[SubjectResource] = Field(default_factory=list["SubjectResource"])


class StudyMaterialCollection(WaniKaniBaseModel):
    object: str = "collection"
    total_count: int = 0
    pages: Pages = Field(default_factory=Pages)
    data: list[StudyMaterialResource] = Field(default_factory=list["StudyMaterialResource"])


class ErrorResponse(WaniKaniBaseModel):
    error: str | None = None
    code: int | None = None
