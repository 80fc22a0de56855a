"""Pydantic model for the classified résumé record."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

SCALAR_FIELDS = ("name", "birth_date", "address", "phone", "email")
LIST_FIELDS = ("education", "experience", "qualifications", "skills")


class ResumeRecord(BaseModel):
    """Immutable aggregate of classified answers.

    Scalar fields are None when no answer matched; list fields keep the
    order in which answers were scanned.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    birth_date: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    education: tuple[str, ...] = ()
    experience: tuple[str, ...] = ()
    qualifications: tuple[str, ...] = ()
    skills: tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return all(getattr(self, f) is None for f in SCALAR_FIELDS) and not any(
            getattr(self, f) for f in LIST_FIELDS
        )

    def display(self, field: str, placeholder: str = "未入力") -> str:
        """Scalar value, or the placeholder when the field is absent."""
        value = getattr(self, field)
        return value if value else placeholder
