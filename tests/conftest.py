"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from resume_builder.clients.llm_client import LLMClient, LLMResponse
from resume_builder.models.form import EducationEntry, ExperienceEntry, FormData
from resume_builder.models.resume import ResumeRecord


@pytest.fixture
def sample_answers() -> list[tuple[str, str]]:
    return [
        ("1", "山田太郎"),
        ("2", "1995年4月1日"),
        ("3", "住所は大阪府大阪市北区梅田1-1"),
        ("4", "090-1234-5678"),
        ("5", "yamada@example.com"),
        ("6", "2017年 ○○大学 経済学部 卒業"),
        ("7", "2017年〜現在 株式会社A 勤務\n営業"),
        ("8", "普通自動車免許、日商簿記2級"),
        ("9", "Excelが得意です"),
    ]


@pytest.fixture
def sample_record() -> ResumeRecord:
    return ResumeRecord(
        name="山田太郎",
        birth_date="1995年4月1日",
        address="大阪府大阪市北区梅田1-1",
        phone="090-1234-5678",
        email="yamada@example.com",
        education=("2017年 ○○大学 経済学部 卒業",),
        experience=("2017年〜現在 株式会社A 勤務\n営業", "2015年〜2017年 株式会社B 勤務"),
        qualifications=("普通自動車免許",),
        skills=("Excelが得意",),
    )


@pytest.fixture
def sample_form() -> FormData:
    return FormData(
        name="山田太郎",
        age=30,
        birth_date="1995年4月1日",
        email="yamada@example.com",
        phone="090-1234-5678",
        address="大阪府大阪市北区",
        education=[
            EducationEntry(year="2013", school="○○高等学校", department="普通科"),
            EducationEntry(year="2017", school="○○大学", department="経済学部"),
        ],
        experience=[
            ExperienceEntry(
                start_year="2017",
                company="株式会社A",
                position="営業",
                description="新規顧客開拓",
            ),
        ],
        qualifications="普通自動車免許",
        skills="Excelが得意",
        summary="",
    )


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text="改善された文章", input_tokens=100, output_tokens=50)
    )
    return client
