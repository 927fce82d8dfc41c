# exprparts/config.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator

DEFAULT_CONFIG_PATH = "configs/default.yaml"


class ExtractionConfig(BaseModel):
    step_delay: float = Field(0.0, ge=0.0, description="pause after every character step (seconds)")
    due_time: float = Field(0.0, ge=0.0, description="deferral before a submitted job starts (seconds)")
    max_depth: PositiveInt = Field(64, le=256, description="deepest parenthesis nesting accepted")
    # "first" pairs "(" with the first ")" after it, ignoring nesting
    paren_matching: Literal["nested", "first"] = "nested"
    quote_char: str = '"'

    model_config = ConfigDict(extra="ignore")

    @field_validator("quote_char")
    @classmethod
    def _single_char(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError("quote_char must be exactly one character")
        if v in "()" or v.isspace():
            raise ValueError("quote_char cannot be a parenthesis or whitespace")
        return v


def load_config(path: str | None = DEFAULT_CONFIG_PATH) -> ExtractionConfig:
    data: dict[str, Any] = {}
    if path:
        p = Path(path)
        if p.exists():
            try:
                with p.open("r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise RuntimeError(f"Failed to parse YAML at {path}: {e}") from e
    # allow the settings to sit under an "extraction:" section
    if isinstance(data.get("extraction"), dict):
        data = data["extraction"]
    cfg = ExtractionConfig(**data)
    return apply_env_overrides(cfg)


_ENV_KEYS = {
    "EXPRPARTS_STEP_DELAY": "step_delay",
    "EXPRPARTS_DUE_TIME": "due_time",
    "EXPRPARTS_MAX_DEPTH": "max_depth",
    "EXPRPARTS_PAREN_MATCHING": "paren_matching",
    "EXPRPARTS_QUOTE_CHAR": "quote_char",
}


def apply_env_overrides(cfg: ExtractionConfig) -> ExtractionConfig:
    """
    Override settings from environment variables.
    Supported:
      EXPRPARTS_STEP_DELAY, EXPRPARTS_DUE_TIME, EXPRPARTS_MAX_DEPTH,
      EXPRPARTS_PAREN_MATCHING, EXPRPARTS_QUOTE_CHAR
    Values go through model validation, so bad ones raise ValidationError.
    """
    updates = {field: os.environ[env] for env, field in _ENV_KEYS.items() if env in os.environ}
    if not updates:
        return cfg
    return ExtractionConfig(**{**cfg.model_dump(), **updates})
