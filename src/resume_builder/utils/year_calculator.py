"""Derive graduation/employment years from an age.

Offsets assume the standard Japanese timeline: high school at 18, university
and first job at 22, with 23 (浪人・院進学) and 24 (修士卒) as alternates.
"""

from __future__ import annotations

from resume_builder.models.milestones import AgeMilestones

HIGH_SCHOOL_OFFSET = 18
UNIVERSITY_OFFSET = 22
EMPLOYMENT_OFFSET = 22
ALTERNATE_OFFSET = 23
GRADUATE_OFFSET = 24


def compute_milestones(age: int, reference_year: int) -> AgeMilestones:
    """Return milestone years for someone ``age`` years old in ``reference_year``.

    Pure arithmetic: any integer age is accepted, including zero or negative.
    """
    birth_year = reference_year - age
    return AgeMilestones(
        birth_year=birth_year,
        high_school_grad_year=birth_year + HIGH_SCHOOL_OFFSET,
        university_grad_year=birth_year + UNIVERSITY_OFFSET,
        employment_start_year=birth_year + EMPLOYMENT_OFFSET,
        alternate_start_year=birth_year + ALTERNATE_OFFSET,
        graduate_start_year=birth_year + GRADUATE_OFFSET,
    )


def birth_year_label(m: AgeMilestones, age: int) -> str:
    return f"{m.birth_year}年生まれ（{age}歳）"


def education_year_options(m: AgeMilestones) -> list[tuple[int, str]]:
    """(year, label) choices for an education row.

    Suggested milestones first, then ten years around university graduation.
    """
    options = [
        (m.high_school_grad_year, f"{m.high_school_grad_year}年（高校）"),
        (m.university_grad_year, f"{m.university_grad_year}年（大学）"),
        (m.graduate_start_year, f"{m.graduate_start_year}年（大学院）"),
    ]
    start = m.university_grad_year - 5
    options.extend((y, f"{y}年") for y in range(start, start + 10))
    return options


def employment_start_options(m: AgeMilestones) -> list[tuple[int, str]]:
    options = [
        (m.employment_start_year, f"{m.employment_start_year}年（新卒）"),
        (m.alternate_start_year, f"{m.alternate_start_year}年"),
    ]
    options.extend(
        (y, f"{y}年") for y in range(m.employment_start_year, m.employment_start_year + 15)
    )
    return options


def employment_end_options(m: AgeMilestones) -> list[tuple[int, str]]:
    first = m.employment_start_year + 1
    return [(y, f"{y}年") for y in range(first, first + 15)]
