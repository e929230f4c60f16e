"""
Configuration loading and validation for Rocket Handler.

Values are layered, lowest precedence first: model defaults, an optional
YAML file, environment variables, command-line flags and finally
per-event annotations. The resulting HandlerConfig is frozen; every
adjustment produces a new instance.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from rockethandler.errors import ConfigError
from rockethandler.event import Event

DEFAULT_URL = "http://localhost:3000"
DEFAULT_TEMPLATE = "{{ Check.Output }}"
DEFAULT_ALIAS = "sensu"
DEFAULT_AVATAR = "https://www.sensu.io/img/sensu-logo.png"

ANNOTATION_KEYSPACE = "sensu.io/plugins/rocketchat/config"


@dataclass(frozen=True)
class Option:
    """How one config field is spelled on each configuration surface."""
    field: str
    path: str  # Flag name and annotation suffix
    env: str | None = None
    secret: bool = False


OPTIONS: tuple[Option, ...] = (
    Option("dry_run", "dry-run"),
    Option("verbose", "verbose"),
    Option("url", "url", env="ROCKETCHAT_URL"),
    Option("channel", "channel", env="ROCKETCHAT_CHANNEL"),
    Option("description_template", "description-template", env="ROCKETCHAT_DESCRIPTION_TEMPLATE"),
    Option("user", "user", env="ROCKETCHAT_USER", secret=True),
    Option("password", "password", env="ROCKETCHAT_PASSWORD", secret=True),
    Option("token", "token", env="ROCKETCHAT_TOKEN", secret=True),
    Option("user_id", "userID", env="ROCKETCHAT_USERID", secret=True),
    Option("alias", "alias", env="ROCKETCHAT_ALIAS"),
    Option("avatar", "avatar-url", env="ROCKETCHAT_AVATAR_URL"),
    Option("timeout", "timeout", env="ROCKETCHAT_TIMEOUT"),
)


class HandlerConfig(BaseModel):
    """Settings for one handler invocation."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str = DEFAULT_URL
    channel: str = ""
    description_template: str = DEFAULT_TEMPLATE
    user: str = ""
    password: str = ""
    token: str = ""
    user_id: str = ""
    alias: str = DEFAULT_ALIAS
    avatar: str = DEFAULT_AVATAR
    dry_run: bool = False
    verbose: bool = False
    timeout: float = 10.0

    @property
    def uses_token(self) -> bool:
        """True when a pre-issued token/userID pair is configured."""
        return bool(self.token or self.user_id)


def _validate(values: Mapping[str, Any]) -> HandlerConfig:
    try:
        return HandlerConfig.model_validate(dict(values))
    except ValidationError as e:
        raise ConfigError(f"Configuration validation error: {e}") from e


def _file_values(config_path: str | Path) -> dict[str, Any]:
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with path.open('r', encoding='utf-8') as f:
            raw: Any = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Configuration file is not valid YAML: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Configuration file must contain a mapping: {config_path}")

    # Accept both the flag spelling (avatar-url) and the field name (avatar)
    by_path = {opt.path: opt.field for opt in OPTIONS}
    return {by_path.get(key, key): value for key, value in raw.items()}


def _env_values(env: Mapping[str, str]) -> dict[str, Any]:
    return {
        opt.field: env[opt.env]
        for opt in OPTIONS
        if opt.env and env.get(opt.env)
    }


def load_config(
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None
) -> HandlerConfig:
    """
    Load and validate the handler configuration.

    Args:
        config_path: Optional YAML file with option values
        env: Environment to read ROCKETCHAT_* variables from (default: os.environ)
        overrides: Field values from the command line; None entries are ignored

    Returns:
        Validated HandlerConfig

    Raises:
        FileNotFoundError: If config_path doesn't exist
        ConfigError: If the file is not valid YAML or the merged values are invalid
    """
    values: dict[str, Any] = {}
    if config_path is not None:
        values.update(_file_values(config_path))
    values.update(_env_values(os.environ if env is None else env))
    if overrides:
        values.update({k: v for k, v in overrides.items() if v is not None})
    return _validate(values)


def apply_annotation_overrides(config: HandlerConfig, event: Event) -> HandlerConfig:
    """
    Override non-secret options from event annotations.

    Annotations are named `sensu.io/plugins/rocketchat/config/<option>`.
    Check annotations are applied first and entity annotations win over
    them. Credentials are never read from annotations.
    """
    updates: dict[str, Any] = {}
    for annotations in (event.check.metadata.annotations, event.entity.metadata.annotations):
        for opt in OPTIONS:
            if opt.secret:
                continue
            key = f"{ANNOTATION_KEYSPACE}/{opt.path}"
            if key in annotations:
                updates[opt.field] = annotations[key]

    if not updates:
        return config
    return _validate({**config.model_dump(), **updates})


def resolve_credentials(config: HandlerConfig) -> HandlerConfig:
    """
    Check channel and auth settings before any network activity.

    Exactly one auth mode must be populated: user/password or
    token/userID. Dry-run implies verbose.

    Returns:
        The config, with verbose forced on for dry-run

    Raises:
        ConfigError: On a missing channel or an incomplete/conflicting auth mode
    """
    if not config.channel:
        raise ConfigError("channel is required")

    if config.uses_token:
        if config.user:
            raise ConfigError(
                "--user conflicts with --token. "
                "Please use either user/password or token based auth"
            )
        if config.password:
            raise ConfigError(
                "--password conflicts with --token. "
                "Please use either user/password or token based auth"
            )
        if not config.token:
            raise ConfigError(
                "token is required with userID. Security Note: use "
                "ROCKETCHAT_TOKEN environment variable instead of --token in production"
            )
        if not config.user_id:
            raise ConfigError(
                "userID is required with token. Security Note: use "
                "ROCKETCHAT_USERID environment variable instead of --userID in production"
            )
    else:
        if not config.user:
            raise ConfigError(
                "user is required. Security Note: use "
                "ROCKETCHAT_USER environment variable instead of --user in production"
            )
        if not config.password:
            raise ConfigError(
                "password is required. Security Note: use "
                "ROCKETCHAT_PASSWORD environment variable instead of --password in production"
            )

    if config.dry_run and not config.verbose:
        return config.model_copy(update={"verbose": True})
    return config
