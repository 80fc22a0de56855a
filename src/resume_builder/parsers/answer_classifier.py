"""Bucket free-text answers into résumé fields by keyword matching.

Every rule is checked against every answer, so one answer can land in
several categories. Scalar categories keep the last match; list categories
append in scan order. Answers matching no rule are dropped.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

from resume_builder.models.resume import ResumeRecord

FIRST_QUESTION_KEY = "1"

Answers = Mapping[str, str] | Iterable[tuple[str, str]]


@dataclass(frozen=True)
class ClassificationRule:
    """One row of the rule table."""
    category: str                          # ResumeRecord field name
    matches: Callable[[str, str], bool]    # (key, text) -> bool
    multi: bool = False                    # append to list instead of overwrite
    transform: Callable[[str], str] = lambda text: text


def _contains_any(*keywords: str) -> Callable[[str, str], bool]:
    return lambda key, text: any(k in text for k in keywords)


def _contains_all(*keywords: str) -> Callable[[str, str], bool]:
    return lambda key, text: all(k in text for k in keywords)


def _strip_marker(pattern: str) -> Callable[[str], str]:
    marker = re.compile(pattern)
    return lambda text: marker.sub("", text).strip()


_PHONE_PATTERN = re.compile(r"\d{2,4}-\d{2,4}-\d{4}", re.ASCII)


def build_rules(first_question_key: str = FIRST_QUESTION_KEY) -> tuple[ClassificationRule, ...]:
    """Return the ordered rule table."""
    return (
        ClassificationRule(
            "name",
            lambda key, text: "名前" in text or key == first_question_key,
            transform=_strip_marker(r"名前は?"),
        ),
        ClassificationRule("birth_date", _contains_all("年", "月", "日")),
        ClassificationRule(
            "address",
            _contains_any("住所", "県", "市"),
            transform=_strip_marker(r"住所は?"),
        ),
        ClassificationRule("phone", lambda key, text: _PHONE_PATTERN.search(text) is not None),
        ClassificationRule("email", _contains_any("@")),
        ClassificationRule("education", _contains_any("大学", "学校", "卒業"), multi=True),
        ClassificationRule("experience", _contains_any("会社", "勤務", "職歴"), multi=True),
        ClassificationRule("qualifications", _contains_any("資格", "検定", "免許"), multi=True),
        ClassificationRule("skills", _contains_any("スキル", "技術", "得意"), multi=True),
    )


DEFAULT_RULES = build_rules()


def matching_categories(
    key: str,
    text: str,
    rules: tuple[ClassificationRule, ...] = DEFAULT_RULES,
) -> list[str]:
    """Categories a single answer would be assigned to."""
    return [r.category for r in rules if r.matches(str(key), text)]


@dataclass(frozen=True)
class ClassifiedAnswer:
    key: str
    text: str
    labels: tuple[str, ...]


def label_answers(
    answers: Answers,
    rules: tuple[ClassificationRule, ...] = DEFAULT_RULES,
) -> list[ClassifiedAnswer]:
    """Tag each answer with its matching categories, unmatched ones included."""
    items = answers.items() if isinstance(answers, Mapping) else answers
    return [
        ClassifiedAnswer(str(key), text, tuple(matching_categories(key, text, rules)))
        for key, text in items
    ]


def unclassified_answers(
    answers: Answers,
    rules: tuple[ClassificationRule, ...] = DEFAULT_RULES,
) -> list[ClassifiedAnswer]:
    """Answers no rule matched; classify() drops these."""
    return [a for a in label_answers(answers, rules) if not a.labels]


def classify(
    answers: Answers,
    rules: tuple[ClassificationRule, ...] = DEFAULT_RULES,
) -> ResumeRecord:
    """Build a ResumeRecord from (key, text) answers in input order."""
    items = answers.items() if isinstance(answers, Mapping) else answers

    scalars: dict[str, str] = {}
    lists: dict[str, list[str]] = {}
    for key, text in items:
        key = str(key)
        for rule in rules:
            if not rule.matches(key, text):
                continue
            value = rule.transform(text)
            if rule.multi:
                lists.setdefault(rule.category, []).append(value)
            else:
                scalars[rule.category] = value

    return ResumeRecord(
        **scalars,
        **{category: tuple(values) for category, values in lists.items()},
    )
