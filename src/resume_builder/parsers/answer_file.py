"""Load saved form answers from a YAML or JSON file.

Accepted shapes:
  - mapping:  {"1": "山田太郎", "2": "yamada@example.com"}
  - list:     [{"key": "1", "text": "山田太郎"}, ...]
"""

from __future__ import annotations

import json
from pathlib import Path

import yaml


def parse_answers(data) -> list[tuple[str, str]]:
    """Normalize decoded file content into ordered (key, text) pairs."""
    if data is None:
        return []
    if isinstance(data, dict):
        return [(str(k), "" if v is None else str(v)) for k, v in data.items()]
    if isinstance(data, list):
        pairs = []
        for i, item in enumerate(data, 1):
            if isinstance(item, dict):
                text = item.get("text")
                pairs.append((str(item.get("key", i)), "" if text is None else str(text)))
            elif isinstance(item, str):
                pairs.append((str(i), item))
            else:
                raise ValueError(f"Unsupported answer entry at position {i}: {item!r}")
        return pairs
    raise ValueError(f"Expected a mapping or list of answers, got {type(data).__name__}")


def load_answers_file(file_path: str | Path) -> list[tuple[str, str]]:
    """Read answers from .json, .yaml or .yml."""
    path = Path(file_path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    return parse_answers(data)
