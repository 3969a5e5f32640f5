"""Configuration models and loading."""

import copy
import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from core.header_rules import DEFAULT_HEADER_RULES, HeaderRuleSet
from core.sanitize import DEFAULT_INTERNAL_PREFIX

CONFIG_DIR = Path.home() / ".config" / "path-gateway"
CONFIG_FILE = CONFIG_DIR / "config.json"


class ProxySettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8080
    keep_alive_timeout: int = 5


class GatewaySettings(BaseModel):
    # Empty keeps the historical "Domain=" attribute on rewritten cookies
    cookie_domain: str = ""
    internal_header_prefix: str = DEFAULT_INTERNAL_PREFIX
    keep_protocol_relative_path: bool = False


class UpstreamSettings(BaseModel):
    timeout: float = 300.0
    max_connections: int = 100
    max_keepalive_connections: int = 20


class Config(BaseModel):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    gateway: GatewaySettings = Field(default_factory=GatewaySettings)
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)
    header_rules: dict[str, dict[str, str]] = Field(
        default_factory=lambda: copy.deepcopy(DEFAULT_HEADER_RULES)
    )

    def rule_set(self) -> HeaderRuleSet:
        """Build the immutable header rule table."""
        return HeaderRuleSet.from_mapping(self.header_rules)


def load_config(config_file: Path = CONFIG_FILE) -> Config:
    """Load configuration from JSON file, creating default if needed."""
    if not config_file.exists():
        config_file.parent.mkdir(parents=True, exist_ok=True)
        default = Config()
        config_file.write_text(default.model_dump_json(indent=2))
        return default

    try:
        data = json.loads(config_file.read_text())
        return Config.model_validate(data)
    except (json.JSONDecodeError, ValidationError):
        # Backup corrupted config and recreate default
        backup = config_file.with_suffix(".json.bak")
        config_file.rename(backup)
        default = Config()
        config_file.write_text(default.model_dump_json(indent=2))
        return default
