"""Data models for the resume builder."""

from resume_builder.models.enhancement import EnhanceContext, EnhanceKind
from resume_builder.models.form import EducationEntry, ExperienceEntry, FormData
from resume_builder.models.milestones import AgeMilestones
from resume_builder.models.resume import LIST_FIELDS, SCALAR_FIELDS, ResumeRecord

__all__ = [
    "AgeMilestones",
    "EducationEntry",
    "EnhanceContext",
    "EnhanceKind",
    "ExperienceEntry",
    "FormData",
    "LIST_FIELDS",
    "ResumeRecord",
    "SCALAR_FIELDS",
]
