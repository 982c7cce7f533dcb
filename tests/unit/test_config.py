"""Unit tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from rpm_importer.config import (
    DEFAULT_CONFIG_FOLDER,
    ImportOptions,
    load_profile,
    resolve_config_dir,
)
from rpm_importer.errors import ConfigError


CONFIG = """\
profile:
  - name: default
    pnc:
      url: https://orch.example.com
    reqour:
      url: https://reqour.example.com
    keycloak:
      url: https://sso.example.com
      realm: pnc-realm
      clientId: importer
      clientSecret: s3cr3t
  - name: stage
    pnc:
      url: https://orch.stage.example.com
"""


@pytest.fixture
def config_dir(tmp_path, monkeypatch) -> Path:
    monkeypatch.delenv("PNC_TOKEN", raising=False)
    (tmp_path / "config.yaml").write_text(CONFIG)
    return tmp_path


# ── resolve_config_dir ────────────────────────────────────────────────────


class TestResolveConfigDir:
    def test_flag_wins(self, monkeypatch):
        monkeypatch.setenv("PNC_CONFIG_PATH", "/from/env")
        assert resolve_config_dir("/from/flag") == Path("/from/flag")

    def test_env(self, monkeypatch):
        monkeypatch.setenv("PNC_CONFIG_PATH", "/from/env")
        assert resolve_config_dir(None) == Path("/from/env")

    def test_default(self, monkeypatch):
        monkeypatch.delenv("PNC_CONFIG_PATH", raising=False)
        assert resolve_config_dir(None) == DEFAULT_CONFIG_FOLDER


# ── load_profile ──────────────────────────────────────────────────────────


class TestLoadProfile:
    def test_default_profile(self, config_dir):
        profile = load_profile(config_dir)
        assert profile.pnc_url == "https://orch.example.com"
        assert profile.reqour_url == "https://reqour.example.com"
        assert profile.keycloak.client_id == "importer"
        assert profile.keycloak.client_secret == "s3cr3t"
        assert profile.keycloak.token_url == (
            "https://sso.example.com/auth/realms/pnc-realm/protocol/openid-connect/token"
        )
        assert profile.token is None

    def test_token_from_env(self, config_dir, monkeypatch):
        monkeypatch.setenv("PNC_TOKEN", "abc")
        assert load_profile(config_dir).token == "abc"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Configuration file not found"):
            load_profile(tmp_path)

    def test_unknown_profile(self, config_dir):
        with pytest.raises(ConfigError, match="Profile 'prod' not found"):
            load_profile(config_dir, "prod")

    def test_missing_reqour(self, config_dir):
        with pytest.raises(ConfigError, match="No reqour configuration"):
            load_profile(config_dir, "stage")

    def test_missing_pnc(self, tmp_path):
        (tmp_path / "config.yaml").write_text("profile:\n  - name: default\n    reqour:\n      url: x\n")
        with pytest.raises(ConfigError, match="No pnc url"):
            load_profile(tmp_path)

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "config.yaml").write_text("profile: [unclosed\n")
        with pytest.raises(ConfigError, match="Unable to parse"):
            load_profile(tmp_path)


# ── ImportOptions ─────────────────────────────────────────────────────────


class TestImportOptions:
    def test_defaults(self, monkeypatch):
        for key in ("RPM_IMPORTER_SYNC_ATTEMPTS", "RPM_IMPORTER_SYNC_INTERVAL", "RPM_IMPORTER_SYNC_TIMEOUT"):
            monkeypatch.delenv(key, raising=False)
        options = ImportOptions(url="u", branch="b")
        assert options.sync_attempts == 5
        assert options.sync_interval == 5.0
        assert options.sync_timeout is None

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("RPM_IMPORTER_SYNC_ATTEMPTS", "2")
        monkeypatch.setenv("RPM_IMPORTER_SYNC_INTERVAL", "0.5")
        monkeypatch.setenv("RPM_IMPORTER_SYNC_TIMEOUT", "3")
        options = ImportOptions(url="u", branch="b")
        assert options.sync_attempts == 2
        assert options.sync_interval == 0.5
        assert options.sync_timeout == 3.0

    @pytest.mark.parametrize("key, value", [
        ("RPM_IMPORTER_SYNC_ATTEMPTS", "five"),
        ("RPM_IMPORTER_SYNC_ATTEMPTS", "2.5"),
        ("RPM_IMPORTER_SYNC_INTERVAL", "soon"),
        ("RPM_IMPORTER_SYNC_TIMEOUT", "1m"),
    ])
    def test_malformed_env_value(self, monkeypatch, key, value):
        monkeypatch.setenv(key, value)
        with pytest.raises(ConfigError, match=f"Invalid value for {key}: '{value}'"):
            ImportOptions(url="u", branch="b")

    def test_missing_branch(self):
        with pytest.raises(ConfigError, match="No branch specified"):
            ImportOptions(url="u", branch="").validate()
