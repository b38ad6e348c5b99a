"""SlangerSettings: CLI flags, environment and ``slanger.toml`` merged.

Priority (highest first): CLI flags passed by click, ``SLANGER_*``
environment variables (``__`` separates nested keys, so
``SLANGER_CACHE__REDIS_URL`` sets ``cache.redis_url``), the TOML file,
then the defaults in :mod:`slanger.config.models`.

The TOML file holds only the ``[cache]``, ``[validation]`` and
``[prune]`` tables; output flags are per-invocation and never read from
it.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from slanger.config.discovery import find_config
from slanger.config.models import CacheConfig, PruneConfig, ValidationConfig

TOML_SECTIONS = frozenset({"cache", "validation", "prune"})


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc
    unknown = sorted(set(data) - TOML_SECTIONS)
    if unknown:
        allowed = ", ".join(f"[{name}]" for name in sorted(TOML_SECTIONS))
        msg = f"Unknown key(s) in {path}: {', '.join(unknown)} (expected {allowed})"
        raise click.ClickException(msg)
    return data


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Section tables from ``slanger.toml``, below env vars in priority."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._sections = _load_toml(toml_path) if toml_path and toml_path.is_file() else {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._sections.get(field_name), field_name, field_name in self._sections

    def __call__(self) -> dict[str, Any]:
        return self._sections


# The TOML path reaches settings_customise_sources through this during from_cli.
_tls = threading.local()


class SlangerSettings(BaseSettings):
    """Frozen per-invocation settings held by the AppContext.

    Attributes:
        config_path: The TOML file that was read, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "SLANGER_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    cache: CacheConfig = Field(default_factory=CacheConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    prune: PruneConfig = Field(default_factory=PruneConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, getattr(_tls, "toml_path", None)),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **cli_flags: Any,
    ) -> SlangerSettings:
        """Build settings for one CLI invocation.

        *config_path* (``--config``) wins over walk-up discovery from
        *start*.

        Raises:
            click.ClickException: The config file is missing, is not valid
                TOML, has keys outside the known sections, or holds values
                that fail validation.
        """
        if config_path:
            toml_path: Path | None = Path(config_path)
            if not toml_path.is_file():
                raise click.ClickException(f"Config file not found: {config_path}")
        else:
            toml_path = find_config(start)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **cli_flags)
        except ValidationError as exc:
            source = toml_path or "environment"
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            )
            raise click.ClickException(f"Invalid configuration ({source}): {problems}") from exc
        finally:
            _tls.toml_path = None
