"""Public interface for the DeepL adapter."""

from __future__ import annotations

from .client import DeepLClient, TranslationAPIError
from .schema import TranslateResponse, UsageResponse

__all__ = [
    "DeepLClient",
    "TranslateResponse",
    "TranslationAPIError",
    "UsageResponse",
]
