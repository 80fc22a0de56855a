"""Streamlit Web UI for resume-builder.

Three steps, all state in st.session_state:
  1) 入力フォーム   : basic info, education/work rows, AI suggestions
  2) プレビュー     : 履歴書 and 職務経歴書 side by side
  3) エクスポート   : Excel (two sheets) or CSV download
"""

from __future__ import annotations

import asyncio
import logging
import os
from datetime import date

logger = logging.getLogger(__name__)

import nest_asyncio
import streamlit as st
from dotenv import load_dotenv

load_dotenv()
nest_asyncio.apply()

# Streamlit Cloud: sync st.secrets → os.environ so the LLM client can read them
if "ANTHROPIC_API_KEY" not in os.environ:
    try:
        os.environ["ANTHROPIC_API_KEY"] = st.secrets["ANTHROPIC_API_KEY"]
    except Exception:
        pass

from resume_builder.clients.llm_client import LLMClient
from resume_builder.config import load_config
from resume_builder.export.tabular import ExportError, export_record
from resume_builder.models.enhancement import EnhanceContext, EnhanceKind
from resume_builder.models.form import EducationEntry, ExperienceEntry, FormData
from resume_builder.parsers.answer_classifier import (
    build_rules,
    classify,
    unclassified_answers,
)
from resume_builder.pipeline.enhancer import (
    LIST_KINDS,
    AIEnhancer,
    EnhancementError,
    TextEnhancer,
    split_suggestions,
)
from resume_builder.pipeline.form_builder import (
    default_entries,
    format_education,
    format_experience,
    submit_form,
)
from resume_builder.templates.renderer import (
    render_career_markdown,
    render_resume_markdown,
)
from resume_builder.utils.year_calculator import (
    birth_year_label,
    compute_milestones,
    education_year_options,
    employment_end_options,
    employment_start_options,
)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="AI履歴書・職務経歴書作成ツール",
    page_icon=":page_facing_up:",
    layout="wide",
)

CONFIG = load_config()
STEPS = ("AI入力フォーム", "プレビュー", "エクスポート")

# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------


def _init_state() -> None:
    ss = st.session_state
    ss.setdefault("step", 1)
    ss.setdefault("next_row_id", 0)
    ss.setdefault("edu_rows", [])
    ss.setdefault("exp_rows", [])
    ss.setdefault("suggestions", {})
    ss.setdefault("exported_files", [])
    ss.setdefault("f_age", None)
    # Streamlit drops widget values whose widget was not rendered this run;
    # re-assigning keeps the form intact while the preview/export steps show.
    for key in list(ss.keys()):
        if key.startswith(("f_", "edu_", "exp_")) and not key.endswith("_rows"):
            ss[key] = ss[key]
    if not ss.edu_rows:
        _add_education_row()
    if not ss.exp_rows:
        _add_experience_row()


def _new_row_id() -> int:
    st.session_state.next_row_id += 1
    return st.session_state.next_row_id


def _add_education_row(entry: EducationEntry | None = None) -> None:
    rid = _new_row_id()
    entry = entry or EducationEntry()
    st.session_state[f"edu_{rid}_year"] = entry.year
    st.session_state[f"edu_{rid}_school"] = entry.school
    st.session_state[f"edu_{rid}_dept"] = entry.department
    st.session_state.edu_rows.append(rid)


def _add_experience_row(entry: ExperienceEntry | None = None) -> None:
    rid = _new_row_id()
    entry = entry or ExperienceEntry()
    st.session_state[f"exp_{rid}_start"] = entry.start_year
    st.session_state[f"exp_{rid}_end"] = entry.end_year
    st.session_state[f"exp_{rid}_company"] = entry.company
    st.session_state[f"exp_{rid}_position"] = entry.position
    st.session_state[f"exp_{rid}_desc"] = entry.description
    st.session_state.exp_rows.append(rid)


def _remove_row(rows_key: str, rid: int) -> None:
    st.session_state[rows_key] = [r for r in st.session_state[rows_key] if r != rid]


def _current_age() -> int:
    return st.session_state.get("f_age") or CONFIG.form.default_age


def _on_age_change() -> None:
    """Re-seed education/work rows with the years for the new age."""
    age = st.session_state.get("f_age")
    if not age or age <= 0:
        return
    education, experience = default_entries(compute_milestones(age, date.today().year))
    st.session_state.edu_rows = []
    st.session_state.exp_rows = []
    for e in education:
        _add_education_row(e)
    for e in experience:
        _add_experience_row(e)


def _set_age(age: int) -> None:
    st.session_state.f_age = age
    _on_age_change()


def _apply_suggestion(target_key: str) -> None:
    st.session_state[target_key] = st.session_state.suggestions.pop(target_key)


def _dismiss_suggestion(target_key: str) -> None:
    st.session_state.suggestions.pop(target_key, None)


def _collect_form() -> FormData:
    ss = st.session_state
    return FormData(
        name=ss.get("f_name", ""),
        age=ss.get("f_age"),
        birth_date=ss.get("f_birth_date", ""),
        email=ss.get("f_email", ""),
        phone=ss.get("f_phone", ""),
        address=ss.get("f_address", ""),
        education=[
            EducationEntry(
                year=ss.get(f"edu_{r}_year", ""),
                school=ss.get(f"edu_{r}_school", ""),
                department=ss.get(f"edu_{r}_dept", ""),
            )
            for r in ss.edu_rows
        ],
        experience=[
            ExperienceEntry(
                start_year=ss.get(f"exp_{r}_start", ""),
                end_year=ss.get(f"exp_{r}_end", ""),
                company=ss.get(f"exp_{r}_company", ""),
                position=ss.get(f"exp_{r}_position", ""),
                description=ss.get(f"exp_{r}_desc", ""),
            )
            for r in ss.exp_rows
        ],
        qualifications=ss.get("f_qualifications", ""),
        skills=ss.get("f_skills", ""),
        summary=ss.get("f_summary", ""),
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_enhancer() -> TextEnhancer:
    try:
        llm = LLMClient(timeout=CONFIG.llm.timeout, max_retries=CONFIG.llm.max_retries)
    except Exception as e:
        raise RuntimeError(f"LLM クライアントの初期化に失敗しました: ANTHROPIC_API_KEY を確認してください: {e}") from e
    return AIEnhancer(llm, model=CONFIG.llm.model, max_tokens=CONFIG.llm.max_tokens)


def _ai_context(form: FormData) -> EnhanceContext:
    return EnhanceContext(
        age=form.age,
        experience="\n\n".join(t for t in map(format_experience, form.experience) if t),
        education="\n".join(t for t in map(format_education, form.education) if t),
        skills=form.skills,
    )


def _ai_button(label: str, kind: EnhanceKind, text: str, target_key: str) -> None:
    """Button that asks the model for a replacement of ``target_key``."""
    if st.button(label, key=f"ai_{target_key}", disabled=not text.strip()):
        form = _collect_form()
        with st.spinner("AIが考えています..."):
            try:
                enhancer = _get_enhancer()
                suggestion = asyncio.run(enhancer.enhance(kind, text, _ai_context(form)))
            except (EnhancementError, RuntimeError):
                logger.exception("AI enhancement failed")
                st.error("AI処理でエラーが発生しました。再度お試しください。")
                return
        if kind in LIST_KINDS:
            suggestion = "\n".join(split_suggestions(suggestion))
        st.session_state.suggestions[target_key] = suggestion

    suggestion = st.session_state.suggestions.get(target_key)
    if suggestion:
        with st.container(border=True):
            st.markdown("**AI提案**")
            st.info(suggestion)
            c1, c2 = st.columns(2)
            c1.button(
                "この提案を適用",
                key=f"apply_{target_key}",
                on_click=_apply_suggestion,
                args=(target_key,),
            )
            c2.button(
                "閉じる",
                key=f"dismiss_{target_key}",
                on_click=_dismiss_suggestion,
                args=(target_key,),
            )


def _year_select(label: str, options: list[tuple[int, str]], key: str, blank: str) -> None:
    """Selectbox over unique years; first label wins for duplicates."""
    labels: dict[str, str] = {"": blank}
    for year, text in options:
        labels.setdefault(str(year), text)
    if st.session_state.get(key, "") not in labels:
        st.session_state[key] = ""
    st.selectbox(label, list(labels), key=key, format_func=labels.__getitem__)


# ---------------------------------------------------------------------------
# Step 1: Form
# ---------------------------------------------------------------------------


def _step_form() -> None:
    st.header("✨ AI履歴書作成フォーム")
    st.markdown("各項目を入力し、AIボタンで内容を自動改善できます")

    age = _current_age()
    m = compute_milestones(age, date.today().year)

    st.subheader("基本情報")
    col1, col2 = st.columns(2)
    with col1:
        st.text_input("氏名", key="f_name", placeholder="山田太郎")
        st.text_input("メールアドレス", key="f_email", placeholder="yamada@example.com")
        st.text_input("住所", key="f_address", placeholder="東京都渋谷区...")
    with col2:
        st.number_input(
            "年齢",
            min_value=CONFIG.form.min_age,
            max_value=CONFIG.form.max_age,
            step=1,
            key="f_age",
            on_change=_on_age_change,
            placeholder="28",
        )
        preset_cols = st.columns(len(CONFIG.form.age_presets))
        for col, preset in zip(preset_cols, CONFIG.form.age_presets):
            col.button(f"{preset}歳", key=f"age_{preset}", on_click=_set_age, args=(preset,))
        st.text_input("生年月日", key="f_birth_date", placeholder=birth_year_label(m, age))
        st.text_input("電話番号", key="f_phone", placeholder="090-1234-5678")

    with st.expander("年齢から自動計算された年", expanded=bool(st.session_state.get("f_age"))):
        c1, c2, c3 = st.columns(3)
        c1.metric("高校卒業", f"{m.high_school_grad_year}年")
        c2.metric("大学卒業", f"{m.university_grad_year}年")
        c3.metric("就職開始", f"{m.employment_start_year}年")
        st.caption(
            f"生まれ年：{m.birth_year}年 ／ 浪人・院進学：{m.alternate_start_year}年4月（23歳）"
            f" ／ 修士卒業：{m.graduate_start_year}年4月（24歳）"
        )

    st.subheader("学歴")
    edu_options = education_year_options(m)
    for rid in list(st.session_state.edu_rows):
        c1, c2, c3, c4 = st.columns([2, 3, 3, 1])
        with c1:
            _year_select("卒業年", edu_options, f"edu_{rid}_year", "年を選択")
        c2.text_input("学校名", key=f"edu_{rid}_school", placeholder="○○大学")
        c3.text_input("学部・学科", key=f"edu_{rid}_dept", placeholder="経済学部")
        c4.button("削除", key=f"del_edu_{rid}", on_click=_remove_row, args=("edu_rows", rid))
    st.button("学歴を追加", key="add_edu", on_click=_add_education_row)

    st.subheader("職歴")
    start_options = employment_start_options(m)
    end_options = employment_end_options(m)
    for rid in list(st.session_state.exp_rows):
        with st.container(border=True):
            c1, c2, c3, c4 = st.columns([2, 2, 3, 1])
            with c1:
                _year_select("入社年", start_options, f"exp_{rid}_start", "年を選択")
            with c2:
                _year_select("退社年", end_options, f"exp_{rid}_end", "現在")
            c3.text_input("会社名", key=f"exp_{rid}_company", placeholder="株式会社○○")
            c4.button("削除", key=f"del_exp_{rid}", on_click=_remove_row, args=("exp_rows", rid))
            st.text_input("役職・職種", key=f"exp_{rid}_position", placeholder="営業")
            st.text_area("業務内容", key=f"exp_{rid}_desc", height=100)
            _ai_button(
                "AIで職歴を改善",
                EnhanceKind.ENHANCE_EXPERIENCE,
                st.session_state.get(f"exp_{rid}_desc", ""),
                f"exp_{rid}_desc",
            )
    st.button("職歴を追加", key="add_exp", on_click=_add_experience_row)

    st.subheader("資格・スキル")
    st.text_area("資格・免許", key="f_qualifications", placeholder="普通自動車免許\n日商簿記2級")
    _ai_button(
        "AIでおすすめ資格を提案",
        EnhanceKind.IMPROVE_QUALIFICATIONS,
        st.session_state.get("f_qualifications", ""),
        "f_qualifications",
    )
    st.text_area("スキル・特技", key="f_skills", placeholder="得意なこと、技術スキルなど")
    experience_text = _ai_context(_collect_form()).experience
    _ai_button(
        "職歴からAIでスキルを提案",
        EnhanceKind.SUGGEST_SKILLS,
        experience_text,
        "f_skills",
    )

    st.subheader("自己PR")
    st.text_area("自己PR・職務要約", key="f_summary", height=150)
    _ai_button(
        "AIで自己PRを生成",
        EnhanceKind.GENERATE_SUMMARY,
        experience_text or st.session_state.get("f_summary", ""),
        "f_summary",
    )

    st.divider()
    if st.button("プレビューへ", type="primary"):
        form = _collect_form()
        answers = submit_form(form)
        st.session_state.answers = answers
        st.session_state.record = classify(
            answers, rules=build_rules(CONFIG.form.first_question_key)
        )
        st.session_state.step = 2
        st.rerun()


# ---------------------------------------------------------------------------
# Step 2: Preview
# ---------------------------------------------------------------------------


def _step_preview() -> None:
    st.header("プレビュー確認")
    st.markdown("内容を確認してください。修正がある場合は「フォームに戻る」をクリックしてください。")

    record = st.session_state.record
    dropped = unclassified_answers(
        st.session_state.answers, rules=build_rules(CONFIG.form.first_question_key)
    )
    if dropped:
        st.warning(
            "次の入力はどの項目にも分類されず、プレビューとエクスポートに含まれません。"
            "住所なら都道府県・市区町村を含めるなど、表現を見直してください。"
        )
        for answer in dropped:
            st.text(answer.text)

    col_resume, col_career = st.columns(2)
    with col_resume:
        with st.container(border=True):
            st.subheader("履歴書")
            st.markdown(render_resume_markdown(record))
    with col_career:
        with st.container(border=True):
            st.subheader("職務経歴書")
            st.markdown(render_career_markdown(record))

    st.caption(
        "💡 左が一般的な履歴書形式、右が詳細な職務経歴書形式です。"
        "企業によってどちらか片方、または両方が必要になります。"
    )

    c1, c2 = st.columns(2)
    if c1.button("フォームに戻る"):
        st.session_state.step = 1
        st.rerun()
    if c2.button("エクスポート", type="primary"):
        st.session_state.step = 3
        st.rerun()


# ---------------------------------------------------------------------------
# Step 3: Export
# ---------------------------------------------------------------------------


def _on_downloaded(filename: str) -> None:
    st.session_state.exported_files.append(filename)


def _step_export() -> None:
    st.header("エクスポート")
    st.markdown("履歴書・職務経歴書をダウンロードしてください。")

    record = st.session_state.record
    col_xlsx, col_csv = st.columns(2)
    for col, fmt, label, caption in (
        (col_xlsx, "xlsx", "Excel ダウンロード", "履歴書と職務経歴書を別々のシートとして含むExcel形式"),
        (col_csv, "csv", "CSV ダウンロード", "履歴書情報をCSV形式で。様々なアプリケーションで利用可能"),
    ):
        with col:
            with st.container(border=True):
                st.subheader(f"{fmt.upper()}形式")
                st.caption(caption)
                try:
                    artifact = export_record(record, fmt=fmt, placeholder=CONFIG.export.placeholder)
                except ExportError:
                    logger.exception("Export failed")
                    st.error("エクスポートに失敗しました。再度お試しください。")
                    continue
                st.download_button(
                    label=label,
                    data=artifact.data,
                    file_name=artifact.filename,
                    mime=artifact.mime,
                    type="primary",
                    on_click=_on_downloaded,
                    args=(artifact.filename,),
                )

    if st.session_state.exported_files:
        st.success("ダウンロード完了")
        for name in st.session_state.exported_files:
            st.markdown(f"- ✓ {name}")

    st.divider()
    c1, c2 = st.columns(2)
    if c1.button("プレビューに戻る"):
        st.session_state.step = 2
        st.rerun()
    if c2.button("最初からやり直す"):
        st.session_state.clear()
        st.rerun()


# ---------------------------------------------------------------------------
# Main router
# ---------------------------------------------------------------------------

_init_state()

with st.sidebar:
    st.title("AI履歴書作成")
    st.caption("AIが自動で内容を最適化・補完して、プロフェッショナルな履歴書を作成します")
    st.divider()
    for i, name in enumerate(STEPS, 1):
        marker = "▶" if st.session_state.step == i else "　"
        st.markdown(f"{marker} **{i}. {name}**" if st.session_state.step == i else f"{marker} {i}. {name}")

if st.session_state.step == 1:
    _step_form()
elif st.session_state.step == 2:
    _step_preview()
else:
    _step_export()
