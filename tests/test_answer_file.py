"""Tests for answers file loading."""

import json

import pytest

from resume_builder.parsers.answer_file import load_answers_file, parse_answers


class TestParseAnswers:
    def test_mapping(self):
        assert parse_answers({1: "山田太郎", "2": None}) == [("1", "山田太郎"), ("2", "")]

    def test_list_of_dicts(self):
        data = [{"key": "a", "text": "山田太郎"}, {"text": "東京都"}]
        assert parse_answers(data) == [("a", "山田太郎"), ("2", "東京都")]

    def test_list_of_strings(self):
        assert parse_answers(["山田太郎", "東京都"]) == [("1", "山田太郎"), ("2", "東京都")]

    def test_none(self):
        assert parse_answers(None) == []

    def test_unsupported_entry(self):
        with pytest.raises(ValueError, match="position 2"):
            parse_answers(["ok", 42])

    def test_unsupported_top_level(self):
        with pytest.raises(ValueError, match="str"):
            parse_answers("just text")


class TestLoadAnswersFile:
    def test_yaml(self, tmp_path):
        path = tmp_path / "answers.yaml"
        path.write_text('"1": 山田太郎\n"2": yamada@example.com\n', encoding="utf-8")
        assert load_answers_file(path) == [("1", "山田太郎"), ("2", "yamada@example.com")]

    def test_json(self, tmp_path):
        path = tmp_path / "answers.json"
        path.write_text(
            json.dumps([{"key": "1", "text": "山田太郎"}], ensure_ascii=False),
            encoding="utf-8",
        )
        assert load_answers_file(path) == [("1", "山田太郎")]

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "answers.yml"
        path.write_text("", encoding="utf-8")
        assert load_answers_file(path) == []

    def test_null_text_in_list_is_blank(self, tmp_path):
        path = tmp_path / "answers.yaml"
        path.write_text('- key: "1"\n  text: null\n', encoding="utf-8")
        assert load_answers_file(path) == [("1", "")]
