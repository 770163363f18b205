"""Tests for configuration loading."""

import pytest

from prgate_core.config import load_config, validate_config


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["automation_identity"] == "github-actions[bot]"
    assert config["dedupe_approvals"] is False
    assert config["reviewer_count"] == 1
    assert config["codeowners_path"] == ".github/CODEOWNERS"
    assert config["stages"] == ["assign", "approve", "check"]


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".gate.yml"
    cfg.write_text("automation_identity: prgate-bot\nreviewer_count: 3\ndedupe_approvals: true\n")
    config = load_config(config_path=str(cfg))
    assert config["automation_identity"] == "prgate-bot"
    assert config["reviewer_count"] == 3
    assert config["dedupe_approvals"] is True


def test_empty_config_file_uses_defaults(tmp_path):
    cfg = tmp_path / ".gate.yml"
    cfg.write_text("")
    config = load_config(config_path=str(cfg))
    assert config["reviewer_count"] == 1


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / ".gate.yml"
    cfg.write_text("reviewer_count: 3\n")
    config = load_config(config_path=str(cfg), cli_overrides={"reviewer_count": 2})
    assert config["reviewer_count"] == 2


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".gate.yml"
    cfg.write_text("reviewer_count: 3\n")
    config = load_config(config_path=str(cfg), cli_overrides={"reviewer_count": None})
    assert config["reviewer_count"] == 3


def test_github_token_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("GITHUB_TOKEN", "gh-token")
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["github_token"] == "gh-token"


def test_stages_list_is_not_shared_reference(tmp_path):
    """Mutating one config's stages list must not affect another."""
    config_a = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_b = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_a["stages"].remove("assign")
    assert config_b["stages"] == ["assign", "approve", "check"]


class TestValidateConfig:
    def _config(self, tmp_path, **overrides):
        config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
        config.update(overrides)
        return config

    def test_defaults_are_valid(self, tmp_path):
        config = self._config(tmp_path)
        assert validate_config(config) is config

    @pytest.mark.parametrize("count", [0, -1, "two", True, None])
    def test_bad_reviewer_count(self, tmp_path, count):
        with pytest.raises(ValueError, match="reviewer_count"):
            validate_config(self._config(tmp_path, reviewer_count=count))

    def test_unknown_stage(self, tmp_path):
        with pytest.raises(ValueError, match="merge"):
            validate_config(self._config(tmp_path, stages=["assign", "merge"]))

    def test_empty_identity(self, tmp_path):
        with pytest.raises(ValueError, match="automation_identity"):
            validate_config(self._config(tmp_path, automation_identity=""))
