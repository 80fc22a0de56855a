"""Models for AI text enhancement requests."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class EnhanceKind(str, Enum):
    ENHANCE_EXPERIENCE = "enhance_experience"
    SUGGEST_SKILLS = "suggest_skills"
    OPTIMIZE_EDUCATION = "optimize_education"
    GENERATE_SUMMARY = "generate_summary"
    IMPROVE_QUALIFICATIONS = "improve_qualifications"


class EnhanceContext(BaseModel):
    """Hints sent alongside the text being enhanced."""

    age: int | None = None
    experience: str = ""
    education: str = ""
    skills: str = ""
