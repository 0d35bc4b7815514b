from __future__ import annotations

import pytest

import coder.config as config_mod


def test_load_defaults_when_missing(tmp_path):
    cfg = config_mod.load(tmp_path / "absent.toml")
    assert cfg["llm"]["connector"] == "anthropic"
    assert cfg["llm"]["max_tokens"] == 1024


def test_load_merges_over_defaults(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[llm]\nmodel = "qwen2.5:7b"\nconnector = "ollama"\n')
    cfg = config_mod.load(path)
    assert cfg["llm"]["model"] == "qwen2.5:7b"
    assert cfg["llm"]["connector"] == "ollama"
    assert cfg["llm"]["max_tokens"] == 1024
    assert cfg["logging"]["level"] == "WARNING"


def test_save_then_load(tmp_path):
    path = tmp_path / "nested" / "config.toml"
    cfg = config_mod.load(path)
    cfg["llm"]["max_tokens"] = 4096
    cfg["llm"]["model"] = 'quoted "name"'
    config_mod.save(cfg, path)
    assert config_mod.load(path) == cfg


def test_dumps_writes_one_table_per_section(tmp_path):
    text = config_mod.dumps({"llm": {"model": "a\tb\n", "max_tokens": 8, "stream": False}})
    assert text.startswith("[llm]\n")
    path = tmp_path / "c.toml"
    path.write_text(text)
    assert config_mod.load(path)["llm"]["model"] == "a\tb\n"
    assert config_mod.load(path)["llm"]["stream"] is False


def test_dumps_rejects_top_level_scalars():
    with pytest.raises(ValueError, match="must be a table"):
        config_mod.dumps({"debug": True})
