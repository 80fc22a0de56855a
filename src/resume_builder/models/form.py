"""Pydantic models for the input form."""

from __future__ import annotations

from pydantic import BaseModel, Field


class EducationEntry(BaseModel):
    year: str = ""
    school: str = ""
    department: str = ""


class ExperienceEntry(BaseModel):
    start_year: str = ""
    end_year: str = ""  # empty means 現在
    company: str = ""
    position: str = ""
    description: str = ""


class FormData(BaseModel):
    """Everything the input step collects, before classification."""

    name: str = ""
    age: int | None = None
    birth_date: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    education: list[EducationEntry] = Field(default_factory=list)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    qualifications: str = ""
    skills: str = ""
    summary: str = ""  # 自己PR
