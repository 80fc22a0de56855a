"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
import webbrowser
from datetime import date
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from resume_builder.clients.llm_client import LLMClient
from resume_builder.config import load_config
from resume_builder.export.tabular import ExportError, export_record, save_artifact
from resume_builder.models.enhancement import EnhanceContext, EnhanceKind
from resume_builder.models.resume import ResumeRecord
from resume_builder.parsers.answer_classifier import (
    build_rules,
    classify,
    unclassified_answers,
)
from resume_builder.parsers.answer_file import load_answers_file
from resume_builder.pipeline.enhancer import (
    LIST_KINDS,
    AIEnhancer,
    EnhancementError,
    TextEnhancer,
    split_suggestions,
)
from resume_builder.templates.renderer import render_preview_html, save_html
from resume_builder.utils.year_calculator import birth_year_label, compute_milestones

app = typer.Typer(
    name="resume-builder",
    help="AI履歴書・職務経歴書作成ツール",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="詳細ログを表示"),
) -> None:
    """AI履歴書・職務経歴書作成ツール"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_answers(file: Path) -> list[tuple[str, str]]:
    if not file.exists():
        console.print(f"[red]ファイルが見つかりません: {file}[/red]")
        raise typer.Exit(1)
    try:
        return load_answers_file(file)
    except (ValueError, yaml.YAMLError) as e:
        console.print(f"[red]回答ファイルを読み込めません: {e}[/red]")
        raise typer.Exit(1)


def _load_record(file: Path) -> ResumeRecord:
    rules = build_rules(load_config().form.first_question_key)
    return classify(_load_answers(file), rules=rules)


def _record_panel(record: ResumeRecord, placeholder: str) -> Panel:
    lines = [
        f"氏名: {record.display('name', placeholder)}",
        f"生年月日: {record.display('birth_date', placeholder)}",
        f"住所: {record.display('address', placeholder)}",
        f"電話番号: {record.display('phone', placeholder)}",
        f"メール: {record.display('email', placeholder)}",
    ]
    for label, items in (
        ("学歴", record.education),
        ("職歴", record.experience),
        ("資格・免許", record.qualifications),
        ("スキル・特技", record.skills),
    ):
        if items:
            lines.append(f"\n[bold]{label}[/bold]")
            lines.extend(f"  {i}. {item}" for i, item in enumerate(items, 1))
    return Panel("\n".join(lines), title="分類結果")


@app.command()
def milestones(
    age: int = typer.Argument(help="年齢"),
    year: int = typer.Option(None, "--year", "-y", help="基準年 (省略時は今年)"),
) -> None:
    """年齢から卒業・就職年を計算します。"""
    reference_year = year or date.today().year
    m = compute_milestones(age, reference_year)

    table = Table(title=birth_year_label(m, age))
    table.add_column("項目")
    table.add_column("年", justify="right")
    table.add_row("生まれ年", f"{m.birth_year}年")
    table.add_row("高校卒業（18歳）", f"{m.high_school_grad_year}年3月")
    table.add_row("大学卒業（22歳）", f"{m.university_grad_year}年3月")
    table.add_row("就職開始（新卒）", f"{m.employment_start_year}年4月")
    table.add_row("浪人・院進学（23歳）", f"{m.alternate_start_year}年4月")
    table.add_row("修士卒業（24歳）", f"{m.graduate_start_year}年4月")
    console.print(table)


@app.command("classify")
def classify_cmd(
    file: Path = typer.Argument(help="回答ファイル (YAML/JSON)"),
    as_json: bool = typer.Option(False, "--json", help="JSONで出力"),
) -> None:
    """回答ファイルを履歴書項目に分類します。"""
    config = load_config()
    rules = build_rules(config.form.first_question_key)
    answers = _load_answers(file)
    record = classify(answers, rules=rules)
    if as_json:
        typer.echo(json.dumps(record.model_dump(exclude_none=True), ensure_ascii=False, indent=2))
        return
    if record.is_empty():
        console.print("[yellow]分類できる回答がありませんでした。[/yellow]")
        return
    console.print(_record_panel(record, config.export.placeholder))

    dropped = unclassified_answers(answers, rules)
    if dropped:
        console.print(f"[dim]分類されなかった回答: {', '.join(a.key for a in dropped)}[/dim]")


@app.command()
def export(
    file: Path = typer.Argument(help="回答ファイル (YAML/JSON)"),
    fmt: str = typer.Option("xlsx", "--format", "-f", help="出力形式 (xlsx/csv)"),
    output_dir: Path = typer.Option(None, "--output-dir", "-o", help="出力先ディレクトリ"),
) -> None:
    """履歴書をExcel/CSVファイルに書き出します。"""
    config = load_config()
    record = _load_record(file)
    try:
        artifact = export_record(record, fmt=fmt, placeholder=config.export.placeholder)
    except (ValueError, ExportError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    path = save_artifact(artifact, output_dir or config.export.resolved_output_dir)
    console.print(f"[green]保存しました: {path}[/green]")


@app.command()
def enhance(
    kind: EnhanceKind = typer.Argument(help="改善の種類"),
    text: str = typer.Argument(help="改善したいテキスト"),
    age: int = typer.Option(None, "--age", "-a", help="年齢"),
    context_file: Path = typer.Option(
        None, "--context-file", "-c", help="回答ファイル (職歴・学歴・スキルを文脈として使用)"
    ),
) -> None:
    """AIでテキストを改善します (ANTHROPIC_API_KEY が必要)。"""
    context = EnhanceContext(age=age)
    if context_file:
        record = _load_record(context_file)
        context = EnhanceContext(
            age=age,
            experience="\n".join(record.experience),
            education="\n".join(record.education),
            skills="\n".join(record.skills),
        )

    config = load_config()
    llm = LLMClient(timeout=config.llm.timeout, max_retries=config.llm.max_retries)
    enhancer: TextEnhancer = AIEnhancer(
        llm, model=config.llm.model, max_tokens=config.llm.max_tokens
    )

    with console.status("AIで改善中..."):
        try:
            result = asyncio.run(enhancer.enhance(kind, text, context))
        except EnhancementError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)

    if kind in LIST_KINDS:
        result = "\n".join(f"・{item}" for item in split_suggestions(result))
    console.print(Panel(result, title=f"AI提案 ({kind.value})", border_style="cyan"))

    usage = llm.get_token_summary()
    console.print(f"[dim]トークン使用量: 入力 {usage['input']:,} / 出力 {usage['output']:,}[/dim]")


@app.command()
def preview(
    file: Path = typer.Argument(help="回答ファイル (YAML/JSON)"),
    output: Path = typer.Option(None, "--output", "-o", help="HTML出力パス"),
    open_browser: bool = typer.Option(True, "--open/--no-open", help="ブラウザで開く"),
) -> None:
    """履歴書・職務経歴書をHTMLでプレビューします。"""
    record = _load_record(file)
    html_path = output or file.with_suffix(".html")
    save_html(render_preview_html(record), html_path)
    console.print(f"[green]HTML生成: {html_path}[/green]")
    if open_browser:
        webbrowser.open(str(html_path))


if __name__ == "__main__":
    app()
