"""Pydantic models describing the DeepL v2 payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class DeepLBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TranslationPayload(DeepLBaseModel):
    text: str
    detected_source_language: str | None = None


class TranslateResponse(DeepLBaseModel):
    translations: list[TranslationPayload] = Field(min_length=1)


class UsageResponse(DeepLBaseModel):
    character_count: int = 0
    character_limit: int = 0

    @property
    def remaining(self) -> int:
        return max(self.character_limit - self.character_count, 0)

    @property
    def percent_used(self) -> float:
        if self.character_limit <= 0:
            return 0.0
        return self.character_count / self.character_limit * 100


class ErrorResponse(DeepLBaseModel):
    message: str | None = None
