"""Derive short translation context from WaniKani meaning mnemonics."""

from __future__ import annotations

import re

MIN_CONTEXT_LENGTH = 20
MAX_CONTEXT_LENGTH = 200

_TAG_PATTERN = re.compile(r"<[^>]*>")
_WHITESPACE_PATTERN = re.compile(r"\s+")


def clean_mnemonic(mnemonic: str) -> str:
    """Remove markup such as ``<radical>...</radical>`` and collapse whitespace."""

    return _WHITESPACE_PATTERN.sub(" ", _TAG_PATTERN.sub("", mnemonic)).strip()


def extract_context(mnemonic: str | None, meaning: str | None) -> str | None:
    """Return a context snippet for translating ``meaning``, or ``None``.

    Mnemonics shorter than :data:`MIN_CONTEXT_LENGTH` carry too little
    signal. Longer ones are trimmed to :data:`MAX_CONTEXT_LENGTH`, preferring
    a sentence end past the first 100 characters, then a word boundary past
    the first 50.
    """

    if not mnemonic or not meaning:
        return None

    cleaned = clean_mnemonic(mnemonic)
    if len(cleaned) < MIN_CONTEXT_LENGTH:
        return None
    if len(cleaned) <= MAX_CONTEXT_LENGTH:
        return cleaned

    sentence_end = cleaned.rfind(".", 0, MAX_CONTEXT_LENGTH)
    if sentence_end > 100:
        return cleaned[: sentence_end + 1]
    word_end = cleaned.rfind(" ", 0, MAX_CONTEXT_LENGTH + 1)
    return cleaned[: word_end if word_end > 50 else MAX_CONTEXT_LENGTH]
