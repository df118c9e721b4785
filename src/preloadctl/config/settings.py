"""Settings for one preloadctl invocation.

Sources, highest priority first:

  1. keyword arguments (the CLI flags),
  2. ``PRELOADCTL_*`` environment variables, where ``__`` reaches into a
     section, e.g. ``PRELOADCTL_PASSWORD__REQUIRED_LENGTH=8``,
  3. the TOML file named by ``config_path``,
  4. the defaults in :mod:`preloadctl.config.models`.

``from_cli`` resolves which TOML file applies; the settings class itself
never searches the filesystem.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import click
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    InitSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from preloadctl.config.discovery import find_config
from preloadctl.config.models import EvaluationConfig, FormatConfig, PasswordConfig


class PreloadSettings(BaseSettings):
    """Output flags plus the import policy sections.

    Attributes:
        config_path: TOML file the policy was read from, or None when
            running on defaults.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        env_prefix="PRELOADCTL_",
        env_nested_delimiter="__",
    )

    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    formats: FormatConfig = Field(default_factory=FormatConfig)
    password: PasswordConfig = Field(default_factory=PasswordConfig)
    evaluation: EvaluationConfig = Field(default_factory=EvaluationConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        config_path = None
        if isinstance(init_settings, InitSettingsSource):
            config_path = init_settings.init_kwargs.get("config_path")
        return init_settings, env_settings, _policy_file_source(settings_cls, config_path)

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: Path | str | None = None,
        start: Path | None = None,
        **flags: bool,
    ) -> PreloadSettings:
        """Build settings for a CLI run.

        An explicit *config_path* that does not exist falls back to code
        defaults; without one, the nearest ``preloadctl.toml`` above
        *start* is used.
        """
        if config_path is not None:
            path: Path | None = Path(config_path)
            if not path.is_file():
                path = None
        else:
            path = find_config(start)
        return cls(config_path=path, **flags)


def _policy_file_source(
    settings_cls: type[BaseSettings], path: Path | None
) -> PydanticBaseSettingsSource:
    try:
        return TomlConfigSettingsSource(settings_cls, toml_file=path)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc
