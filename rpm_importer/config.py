"""Importer configuration -- layered: CLI flags > env vars > bacon config.yaml > defaults."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from rpm_importer.errors import ConfigError

logger = logging.getLogger("rpm_importer.config")

CONFIG_ENV = "PNC_CONFIG_PATH"
CONFIG_FILE_NAME = "config.yaml"
DEFAULT_CONFIG_FOLDER = Path.home() / ".config" / "pnc-bacon"
TOKEN_ENV = "PNC_TOKEN"

_REQOUR_HINT = """Configure reqour within the Bacon config file i.e.:
  reqour:
     url: "https://reqour.pnc.<as other URLS...>"
"""


def _env(key: str, default: str = "") -> str:
    """Look up an RPM_IMPORTER_* env var, falling back to *default*."""
    return os.environ.get(key) or default


def _env_number(key: str, cast: type[int] | type[float], default: str = "") -> int | float | None:
    """Numeric RPM_IMPORTER_* env var; None when unset and no *default*."""
    raw = _env(key, default)
    if not raw:
        return None
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"Invalid value for {key}: {raw!r}") from None


@dataclass
class KeycloakConfig:
    """Keycloak settings used to obtain a bearer token for PNC."""

    url: str
    realm: str
    client_id: str = "pnc-bacon"
    client_secret: str | None = None
    username: str | None = None
    password: str | None = None

    @property
    def token_url(self) -> str:
        return f"{self.url.rstrip('/')}/auth/realms/{self.realm}/protocol/openid-connect/token"


@dataclass
class ProfileConfig:
    """One named profile of the bacon configuration file."""

    name: str
    pnc_url: str
    reqour_url: str
    keycloak: KeycloakConfig | None = None
    token: str | None = None


@dataclass
class ImportOptions:
    """Options for a single import run."""

    url: str
    branch: str
    repository: Path | None = None
    skip_sync: bool = False
    overwrite: bool = False
    push: bool = False
    latest_plugin_version: bool = False

    # Mirror sync polling
    sync_attempts: int = field(
        default_factory=lambda: _env_number("RPM_IMPORTER_SYNC_ATTEMPTS", int, default="5")
    )
    sync_interval: float = field(
        default_factory=lambda: _env_number("RPM_IMPORTER_SYNC_INTERVAL", float, default="5.0")
    )
    sync_timeout: float | None = field(
        default_factory=lambda: _env_number("RPM_IMPORTER_SYNC_TIMEOUT", float)
    )

    def validate(self) -> None:
        """Fail fast on preconditions that need no network or filesystem access."""
        if not self.branch:
            logger.warning("No branch specified; unable to proceed")
            raise ConfigError("No branch specified")
        if not self.url:
            raise ConfigError("No external URL specified")


def resolve_config_dir(config_path: str | None) -> Path:
    """Pick the configuration folder: flag > PNC_CONFIG_PATH > default."""
    if config_path:
        source, location = "flag", config_path
    elif os.environ.get(CONFIG_ENV):
        source, location = "environment variable", os.environ[CONFIG_ENV]
    else:
        source, location = "constant", str(DEFAULT_CONFIG_FOLDER)
    path = Path(location).expanduser()
    logger.debug("Config folder set from %s to %s", source, path)
    return path


def _parse_keycloak(data: dict | None) -> KeycloakConfig | None:
    if not data or not data.get("url"):
        return None
    return KeycloakConfig(
        url=data["url"],
        realm=data.get("realm", "pnc"),
        client_id=data.get("clientId", "pnc-bacon"),
        client_secret=data.get("clientSecret"),
        username=data.get("username"),
        password=data.get("password"),
    )


def load_profile(config_dir: Path, profile: str = "default") -> ProfileConfig:
    """Read ``config.yaml`` from *config_dir* and return the named profile.

    Raises:
        ConfigError: If the file, the profile, the PNC URL or the reqour
            section is missing.
    """
    config_file = config_dir / CONFIG_FILE_NAME
    if not config_file.is_file():
        raise ConfigError(f"Configuration file not found: {config_file}")

    try:
        with open(config_file, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Unable to parse {config_file}: {e}") from e

    profiles = data.get("profile", [])
    if isinstance(profiles, dict):
        profiles = [profiles]
    selected = next((p for p in profiles if p.get("name") == profile), None)
    if selected is None:
        available = [p.get("name") for p in profiles]
        raise ConfigError(f"Profile '{profile}' not found in {config_file} (available: {available})")

    pnc_url = (selected.get("pnc") or {}).get("url")
    if not pnc_url:
        raise ConfigError(f"No pnc url configured in profile '{profile}'")

    reqour_url = (selected.get("reqour") or {}).get("url")
    if not reqour_url:
        logger.error(_REQOUR_HINT)
        raise ConfigError("No reqour configuration found.")

    logger.debug("Loaded profile %s from %s", profile, config_file)
    return ProfileConfig(
        name=profile,
        pnc_url=pnc_url,
        reqour_url=reqour_url,
        keycloak=_parse_keycloak(selected.get("keycloak")),
        token=os.environ.get(TOKEN_ENV) or None,
    )
