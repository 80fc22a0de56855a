"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-haiku-4-5-20251001"
    max_tokens: int = 1000
    max_retries: int = 3
    timeout: int = 60

    def __post_init__(self) -> None:
        if not 1 <= self.timeout <= 600:
            raise ValueError(f"timeout must be between 1 and 600, got {self.timeout}")
        if not 1 <= self.max_retries <= 10:
            raise ValueError(f"max_retries must be between 1 and 10, got {self.max_retries}")
        if self.max_tokens < 1:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")


@dataclass(frozen=True)
class FormConfig:
    default_age: int = 30
    min_age: int = 18
    max_age: int = 80
    age_presets: tuple[int, ...] = (25, 30, 35, 40)
    first_question_key: str = "1"

    def __post_init__(self) -> None:
        if self.min_age > self.max_age:
            raise ValueError(f"min_age ({self.min_age}) must not exceed max_age ({self.max_age})")
        if not self.min_age <= self.default_age <= self.max_age:
            raise ValueError(f"default_age must be within [{self.min_age}, {self.max_age}]")
        # YAML gives us a list and may give an int key
        object.__setattr__(self, "age_presets", tuple(self.age_presets))
        object.__setattr__(self, "first_question_key", str(self.first_question_key))


@dataclass(frozen=True)
class ExportConfig:
    output_dir: str = "./output"
    placeholder: str = "未入力"

    @property
    def resolved_output_dir(self) -> Path:
        return Path(self.output_dir).expanduser()


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    form: FormConfig = field(default_factory=FormConfig)
    export: ExportConfig = field(default_factory=ExportConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        form=FormConfig(**raw.get("form", {})),
        export=ExportConfig(**raw.get("export", {})),
    )
