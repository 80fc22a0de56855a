"""Markdown/HTML preview of a ResumeRecord (履歴書 + 職務経歴書)."""

from __future__ import annotations

import html
from pathlib import Path

import markdown
from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from resume_builder.models.resume import ResumeRecord

TEMPLATE_DIR = Path(__file__).parent


def _lines(items: tuple[str, ...]) -> str:
    """Each entry's non-blank lines as a bullet list."""
    out = []
    for item in items:
        for line in item.splitlines():
            if line.strip():
                out.append(f"- {line.strip()}")
    return "\n".join(out)


def render_resume_markdown(record: ResumeRecord) -> str:
    """履歴書 view. Missing fields render as '<label>未入力'."""
    parts = [
        f"## {record.name or '氏名未入力'}",
        "",
        f"- 生年月日：{record.birth_date or '生年月日未入力'}",
        f"- 住所：{record.address or '住所未入力'}",
        f"- 電話番号：{record.phone or '電話番号未入力'}",
        f"- メールアドレス：{record.email or 'メールアドレス未入力'}",
        "",
        "### 学歴",
        _lines(record.education) or "学歴未入力",
        "",
        "### 職歴",
        _lines(record.experience) or "職歴未入力",
    ]
    if record.qualifications:
        parts += ["", "### 資格・免許", _lines(record.qualifications)]
    if record.skills:
        parts += ["", "### スキル・特技", _lines(record.skills)]
    return "\n".join(parts) + "\n"


def render_career_markdown(record: ResumeRecord) -> str:
    """職務経歴書 view: work history first, education last."""
    parts = [
        f"## {record.name or '氏名未入力'}",
        "",
        f"{record.email or 'メールアドレス未入力'} | {record.phone or '電話番号未入力'}",
        "",
        "### 職務経歴",
        _lines(record.experience) or "職歴未入力",
    ]
    if record.skills:
        parts += ["", "### 保有スキル・技術", _lines(record.skills)]
    if record.qualifications:
        parts += ["", "### 保有資格", _lines(record.qualifications)]
    parts += ["", "### 学歴", _lines(record.education) or "学歴未入力"]
    return "\n".join(parts) + "\n"


def _escaped(record: ResumeRecord) -> ResumeRecord:
    """Copy with HTML-escaped values; Markdown passes raw HTML through."""
    update = {}
    for field, value in record.model_dump().items():
        if isinstance(value, str):
            update[field] = html.escape(value)
        elif isinstance(value, tuple):
            update[field] = tuple(html.escape(v) for v in value)
    return record.model_copy(update=update)


def render_preview_html(record: ResumeRecord, title: str = "履歴書プレビュー") -> str:
    """Both documents side by side in one HTML page."""
    record = _escaped(record)
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=True,
    )
    template = env.get_template("preview.html")
    resume_html = markdown.markdown(render_resume_markdown(record), extensions=["nl2br"])
    career_html = markdown.markdown(render_career_markdown(record), extensions=["nl2br"])
    return template.render(
        title=title,
        resume=Markup(resume_html),
        career=Markup(career_html),
    )


def save_html(html_content: str, output_path: str | Path) -> Path:
    """Save HTML content to file."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(html_content, encoding="utf-8")
    return path
