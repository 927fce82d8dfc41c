import pytest
from pydantic import ValidationError

from exprparts.config import ExtractionConfig, load_config


def test_defaults_when_file_missing(tmp_path):
    cfg = load_config(str(tmp_path / "missing.yaml"))
    assert cfg == ExtractionConfig()
    assert cfg.step_delay == 0.0
    assert cfg.paren_matching == "nested"
    assert cfg.quote_char == '"'


def test_load_section(tmp_path):
    path = tmp_path / "c.yaml"
    path.write_text("extraction:\n  step_delay: 0.5\n  paren_matching: first\n  unknown: 1\n", encoding="utf-8")
    cfg = load_config(str(path))
    assert cfg.step_delay == 0.5
    assert cfg.paren_matching == "first"


def test_load_flat(tmp_path):
    path = tmp_path / "c.yaml"
    path.write_text("max_depth: 3\n", encoding="utf-8")
    assert load_config(str(path)).max_depth == 3


def test_bad_yaml(tmp_path):
    path = tmp_path / "c.yaml"
    path.write_text("extraction: [unclosed\n", encoding="utf-8")
    with pytest.raises(RuntimeError):
        load_config(str(path))


@pytest.mark.parametrize("field, value", [
    ("step_delay", -1),
    ("max_depth", 0),
    ("max_depth", 10000),
    ("paren_matching", "greedy"),
    ("quote_char", "''"),
    ("quote_char", "("),
])
def test_invalid_values(field, value):
    with pytest.raises(ValidationError):
        ExtractionConfig(**{field: value})


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("EXPRPARTS_MAX_DEPTH", "5")
    monkeypatch.setenv("EXPRPARTS_PAREN_MATCHING", "first")
    cfg = load_config(str(tmp_path / "missing.yaml"))
    assert cfg.max_depth == 5
    assert cfg.paren_matching == "first"


def test_bad_env_override(monkeypatch):
    monkeypatch.setenv("EXPRPARTS_STEP_DELAY", "soon")
    with pytest.raises(ValidationError):
        load_config(None)
