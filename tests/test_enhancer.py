"""Tests for AI text enhancement."""

from unittest.mock import AsyncMock

import pytest

from resume_builder.clients.llm_client import LLMResponse
from resume_builder.models.enhancement import EnhanceContext, EnhanceKind
from resume_builder.pipeline.enhancer import (
    LIST_KINDS,
    PROMPTS,
    AIEnhancer,
    EnhancementError,
    build_prompt,
    parse_kind,
    split_suggestions,
)


class TestBuildPrompt:
    def test_every_kind_has_a_template(self):
        assert set(PROMPTS) == set(EnhanceKind)

    def test_experience_prompt(self):
        prompt = build_prompt(
            "enhance_experience", "営業をやっていました", EnhanceContext(age=35), current_year=2025
        )
        assert "年齢：35歳" in prompt
        assert "現在年：2025年" in prompt
        assert "入力された職歴：営業をやっていました" in prompt

    def test_default_age(self):
        prompt = build_prompt(EnhanceKind.SUGGEST_SKILLS, "営業")
        assert prompt.startswith("30歳・職歴「営業」")

    def test_summary_uses_context(self):
        context = EnhanceContext(
            age=40, experience="株式会社A 営業", education="○○大学", skills="Excel"
        )
        prompt = build_prompt(EnhanceKind.GENERATE_SUMMARY, "", context)
        assert "職歴：株式会社A 営業" in prompt
        assert "学歴：○○大学" in prompt
        assert "スキル：Excel" in prompt

    def test_summary_falls_back_to_text(self):
        prompt = build_prompt(EnhanceKind.GENERATE_SUMMARY, "経理10年")
        assert "職歴：経理10年" in prompt

    def test_qualifications_prompt(self):
        context = EnhanceContext(age=28, experience="SE")
        prompt = build_prompt(EnhanceKind.IMPROVE_QUALIFICATIONS, "普通自動車免許", context)
        assert prompt.startswith("資格「普通自動車免許」に加えて、28歳・職歴「SE」")

    def test_invalid_kind(self):
        with pytest.raises(ValueError, match="Invalid enhancement type: translate"):
            parse_kind("translate")


class TestSplitSuggestions:
    def test_bullets(self):
        text = "・顧客折衝・営業スキル\n\n• プロジェクトマネジメント\n- チームリーダーシップ"
        assert split_suggestions(text) == [
            "顧客折衝・営業スキル",
            "プロジェクトマネジメント",
            "チームリーダーシップ",
        ]

    def test_numbered(self):
        assert split_suggestions("1. TOEIC\n2) 簿記2級") == ["TOEIC", "簿記2級"]

    def test_plain_lines(self):
        assert split_suggestions("Excel\nWord") == ["Excel", "Word"]

    def test_list_kinds(self):
        assert LIST_KINDS == {EnhanceKind.SUGGEST_SKILLS, EnhanceKind.IMPROVE_QUALIFICATIONS}


class TestAIEnhancer:
    async def test_enhance_returns_stripped_text(self, mock_llm_client):
        mock_llm_client.generate.return_value = LLMResponse(
            text="  月平均20件の商談を実施。\n", input_tokens=10, output_tokens=5
        )
        enhancer = AIEnhancer(mock_llm_client, model="claude-test", max_tokens=500)

        result = await enhancer.enhance("enhance_experience", "営業をやっていました")

        assert result == "月平均20件の商談を実施。"
        kwargs = mock_llm_client.generate.call_args.kwargs
        assert kwargs["model"] == "claude-test"
        assert kwargs["max_tokens"] == 500
        assert "営業をやっていました" in kwargs["prompt"]

    async def test_llm_failure_raises_enhancement_error(self, mock_llm_client):
        mock_llm_client.generate = AsyncMock(side_effect=RuntimeError("API down"))
        enhancer = AIEnhancer(mock_llm_client)

        with pytest.raises(EnhancementError, match="AI処理でエラーが発生しました"):
            await enhancer.enhance(EnhanceKind.SUGGEST_SKILLS, "営業")

    async def test_empty_response(self, mock_llm_client):
        mock_llm_client.generate.return_value = LLMResponse(
            text="   ", input_tokens=10, output_tokens=0
        )
        enhancer = AIEnhancer(mock_llm_client)

        with pytest.raises(EnhancementError, match="Unexpected response format"):
            await enhancer.enhance(EnhanceKind.OPTIMIZE_EDUCATION, "○○大学卒業")

    async def test_invalid_kind_does_not_call_llm(self, mock_llm_client):
        enhancer = AIEnhancer(mock_llm_client)

        with pytest.raises(ValueError):
            await enhancer.enhance("translate", "text")

        mock_llm_client.generate.assert_not_called()
