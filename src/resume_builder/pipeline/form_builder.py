"""Turn the input form into the ordered answer list the classifier scans."""

from __future__ import annotations

from resume_builder.models.form import EducationEntry, ExperienceEntry, FormData
from resume_builder.models.milestones import AgeMilestones


def default_entries(m: AgeMilestones) -> tuple[list[EducationEntry], list[ExperienceEntry]]:
    """Rows pre-filled when an age is entered: HS + university, first job."""
    education = [
        EducationEntry(year=str(m.high_school_grad_year)),
        EducationEntry(year=str(m.university_grad_year)),
    ]
    experience = [ExperienceEntry(start_year=str(m.employment_start_year))]
    return education, experience


def format_education(entry: EducationEntry) -> str:
    """'2015年 ○○大学 経済学部', or '' when no school is given."""
    if not entry.school.strip():
        return ""
    year = f"{entry.year}年" if entry.year else ""
    return " ".join(p for p in (year, entry.school.strip(), entry.department.strip()) if p)


def format_experience(entry: ExperienceEntry) -> str:
    """Period and company on the first line, then position and description."""
    if not entry.company.strip():
        return ""
    start = f"{entry.start_year}年" if entry.start_year else ""
    end = f"〜{entry.end_year}年" if entry.end_year else "〜現在"
    lines = [f"{start}{end} {entry.company.strip()}"]
    lines.extend(p.strip() for p in (entry.position, entry.description) if p.strip())
    return "\n".join(lines)


def submit_form(form: FormData) -> list[tuple[str, str]]:
    """Return ordered (key, text) answers for classification.

    Keys are positions "1".."10" over the fixed field order, so the name is
    always key "1". Education rows are joined into one answer with "\\n" and
    work rows with a blank line, so a row lacking a keyword of its own still
    travels with the others. Blank fields are left out.
    """
    education = "\n".join(t for t in map(format_education, form.education) if t)
    experience = "\n\n".join(t for t in map(format_experience, form.experience) if t)
    candidates: list[str] = [
        form.name,
        form.birth_date,
        form.address,
        form.phone,
        form.email,
        education,
        experience,
        form.qualifications,
        form.skills,
        form.summary,
    ]
    return [
        (str(i), text.strip())
        for i, text in enumerate(candidates, 1)
        if text and text.strip()
    ]
