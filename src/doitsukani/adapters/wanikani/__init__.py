"""Public interface for the WaniKani adapter."""

from __future__ import annotations

from .client import WaniKaniAPIError, WaniKaniClient, is_radical_collection
from .schema import StudyMaterialResource, SubjectCollection, SubjectResource
from .translator import parse_study_item, parse_study_material

__all__ = [
    "StudyMaterialResource",
    "SubjectCollection",
    "SubjectResource",
    "WaniKaniAPIError",
    "WaniKaniClient",
    "is_radical_collection",
    "parse_study_item",
    "parse_study_material",
]
