"""Port for translating radical meanings."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from doitsukani.domain.model import TranslationTier


@runtime_checkable
class Translator(Protocol):
    """Translate a single English meaning into ``target_language``.

    Implementations raise :class:`~doitsukani.domain.errors.AuthError`,
    :class:`~doitsukani.domain.errors.QuotaExceededError` or
    :class:`~doitsukani.domain.errors.NetworkError`.
    """

    async def translate(
        self,
        text: str,
        *,
        target_language: str,
        tier: TranslationTier | None = None,
        retries: int | None = None,
        context: str | None = None,
    ) -> str: ...


__all__ = ["Translator"]
