"""AI enhancement of free-text résumé fields."""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Protocol

from resume_builder.clients.llm_client import DEFAULT_MODEL, LLMClient
from resume_builder.models.enhancement import EnhanceContext, EnhanceKind

logger = logging.getLogger(__name__)

DEFAULT_AGE = 30

PROMPTS: dict[EnhanceKind, str] = {
    EnhanceKind.ENHANCE_EXPERIENCE: """\
履歴書の職歴を魅力的で具体的に書き直してください。

基本情報：
- 年齢：{age}歳
- 現在年：{current_year}年
- 入力された職歴：{text}

要求：
1. 具体的な成果・数字を含める
2. アクションワードを使用（達成、管理、企画、改善など）
3. 転職市場で評価される表現に変換
4. 年齢に応じた責任レベルを反映
5. 業界標準のキーワードを含める

出力形式：
改善された職歴のみを日本語で返してください。説明は不要です。

例：
入力：「営業をやっていました」
出力：「新規顧客開拓営業として月平均20件の商談を実施。提案営業により売上前年比120%を達成。チームリーダーとして新人3名の指導も担当。」""",
    EnhanceKind.SUGGEST_SKILLS: """\
{age}歳・職歴「{text}」の人に適したスキル・強みを提案してください。

要求：
1. 職歴から推測される実務スキル
2. 年齢に応じたマネジメント・リーダーシップスキル
3. 現在のビジネストレンドに合ったスキル
4. 転職市場で需要の高いスキル
5. 具体的で説得力のある表現

出力形式：
スキル一覧のみを改行区切りで返してください。説明は不要です。

例：
・顧客折衝・営業スキル
・プロジェクトマネジメント
・チームリーダーシップ""",
    EnhanceKind.OPTIMIZE_EDUCATION: """\
学歴「{text}」をより魅力的に表現してください。

要求：
1. 正式な表記で記載
2. 専攻・研究内容があれば具体化
3. 成績・特記事項があれば追加
4. 関連する資格・活動があれば提案

出力形式：
最適化された学歴のみを返してください。

例：
入力：「○○大学卒業」
出力：「○○大学 経済学部経済学科 卒業（ゼミ：国際経済学専攻）」""",
    EnhanceKind.GENERATE_SUMMARY: """\
以下の情報から魅力的な自己PR・職務要約を作成してください。

年齢：{age}歳
職歴：{experience}
学歴：{education}
スキル：{skills}

要求：
1. 3-4行の簡潔な要約
2. 強みと経験を的確に表現
3. 転職市場での価値を明確化
4. 年齢に応じた表現レベル
5. 具体的な数字や成果を含める

出力形式：
自己PR文のみを返してください。""",
    EnhanceKind.IMPROVE_QUALIFICATIONS: """\
資格「{text}」に加えて、{age}歳・職歴「{experience}」の人が取得すべき資格を提案してください。

要求：
1. 現在の職歴・年齢に関連する資格
2. キャリアアップに有効な資格
3. 業界で評価される資格
4. 実用性の高い資格
5. 取得難易度も考慮

出力形式：
おすすめ資格一覧を改行区切りで返してください。理由は簡潔に併記。

例：
・TOEIC 750点以上（国際業務対応力向上）
・基本情報技術者試験（デジタル基礎スキル証明）""",
}


class EnhancementError(RuntimeError):
    """The language model could not produce replacement text."""


class TextEnhancer(Protocol):
    async def enhance(
        self, kind: EnhanceKind | str, text: str, context: EnhanceContext | None = None
    ) -> str: ...


def parse_kind(kind: EnhanceKind | str) -> EnhanceKind:
    try:
        return EnhanceKind(kind)
    except ValueError:
        raise ValueError(f"Invalid enhancement type: {kind}") from None


def build_prompt(
    kind: EnhanceKind | str,
    text: str,
    context: EnhanceContext | None = None,
    current_year: int | None = None,
) -> str:
    """Fill the prompt template for ``kind``."""
    kind = parse_kind(kind)
    context = context or EnhanceContext()
    return PROMPTS[kind].format(
        text=text,
        age=context.age or DEFAULT_AGE,
        current_year=current_year or date.today().year,
        # summary falls back to the input text when no experience is known
        experience=context.experience or (text if kind is EnhanceKind.GENERATE_SUMMARY else ""),
        education=context.education,
        skills=context.skills,
    )


# Kinds whose reply is a bullet list rather than replacement prose
LIST_KINDS = frozenset({EnhanceKind.SUGGEST_SKILLS, EnhanceKind.IMPROVE_QUALIFICATIONS})

_BULLET = re.compile(r"^\s*(?:[・•\-\*]|\d+[.)．])\s*")


def split_suggestions(text: str) -> list[str]:
    """Split a list-style reply ("・A\\n・B") into its items."""
    items = []
    for line in text.splitlines():
        item = _BULLET.sub("", line).strip()
        if item:
            items.append(item)
    return items


class AIEnhancer:
    """TextEnhancer backed by Claude."""

    def __init__(
        self,
        llm: LLMClient,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 1000,
    ):
        self.llm = llm
        self.model = model
        self.max_tokens = max_tokens

    async def enhance(
        self,
        kind: EnhanceKind | str,
        text: str,
        context: EnhanceContext | None = None,
    ) -> str:
        """Return replacement text for ``text``.

        Raises ValueError for an unknown kind and EnhancementError when the
        model call fails or comes back empty.
        """
        prompt = build_prompt(kind, text, context)
        try:
            response = await self.llm.generate(
                prompt=prompt,
                model=self.model,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            logger.exception("Enhancement LLM call failed (%s)", kind)
            raise EnhancementError("AI処理でエラーが発生しました") from e

        enhanced = response.text.strip()
        if not enhanced:
            raise EnhancementError("Unexpected response format")
        return enhanced
