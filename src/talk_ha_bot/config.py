"""
Bot configuration.

Read once at startup from ``config.yaml`` (or ``.yml`` / ``.json``)::

    bot:
      port: 8080
      secret: "<shared secret from occ talk:bot:install>"
      ha:
        url: "https://homeassistant.local:8123/"
        webhook_id: "talk_bot"

The resulting BotConfig is frozen and handed to every component.
"""

import json
import logging
import ssl
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from talk_ha_bot.commands import DEFAULT_MARKER
from talk_ha_bot.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILES = ("config.yaml", "config.yml", "config.json")
DEFAULT_RESPONSES = ("Done!",)
DEFAULT_ERROR_RESPONSE = "Error calling Home Assistant"


class HomeAssistantConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    webhook_id: str
    timeout: float = 10.0
    verify_tls: bool = True
    ca_bundle: Optional[str] = None


class TalkConfig(BaseModel):
    """Outbound connection to the Talk backend that posted the message."""

    model_config = ConfigDict(frozen=True)

    timeout: float = 30.0
    verify_tls: bool = True
    ca_bundle: Optional[str] = None


class BotConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = Field(8080, ge=1, le=65535)
    secret: str = Field(min_length=1)
    marker: str = Field(DEFAULT_MARKER, min_length=1)
    responses: tuple[str, ...] = DEFAULT_RESPONSES
    error_response: str = DEFAULT_ERROR_RESPONSE
    ha: HomeAssistantConfig
    talk: TalkConfig = TalkConfig()

    @field_validator("responses")
    @classmethod
    def _at_least_one_response(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("at least one response is required")
        return v

    def redacted(self) -> dict[str, Any]:
        """Dump for display, with the secret masked."""
        data = self.model_dump()
        data["secret"] = f"{self.secret[:2]}***" if len(self.secret) > 4 else "***"
        return data


def tls_verify_setting(verify_tls: bool, ca_bundle: Optional[str]) -> Union[bool, ssl.SSLContext]:
    """Value for httpx's ``verify``: a context trusting ca_bundle, True, or False."""
    if not verify_tls:
        logger.warning("TLS certificate verification is disabled")
        return False
    if ca_bundle:
        return ssl.create_default_context(cafile=ca_bundle)
    return True


def _read_file(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if path.suffix == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


def find_config_file(directory: Optional[Path] = None) -> Path:
    base = directory or Path.cwd()
    for name in DEFAULT_CONFIG_FILES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    raise ConfigError(f"No config file found in {base} (looked for {', '.join(DEFAULT_CONFIG_FILES)})")


def load_config(path: Optional[Union[str, Path]] = None) -> BotConfig:
    config_path = Path(path) if path else find_config_file()
    try:
        raw = _read_file(config_path)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {config_path}")
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config file {config_path}: {e}")

    if not isinstance(raw, dict) or not isinstance(raw.get("bot"), dict):
        raise ConfigError(f"Config file {config_path} has no 'bot' section")

    try:
        config = BotConfig.model_validate(raw["bot"])
    except ValidationError as e:
        raise ConfigError(
            f"Invalid configuration in {config_path}",
            details={"errors": e.errors(include_url=False, include_input=False)},
        ) from e

    logger.info("Config file loaded: %s", config_path)
    return config
