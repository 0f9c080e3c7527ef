"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``RF2CTL_*`` prefix
  3. TOML file    — ``rf2ctl.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the ``find_config`` walk-up discovery from
:mod:`rf2ctl.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any, ClassVar

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from rf2ctl.config.discovery import find_config
from rf2ctl.config.models import HashConfig, HierarchyConfig, ReleaseConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``rf2ctl.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class Rf2Settings(BaseSettings):
    """Unified settings for the rf2ctl CLI.

    Merges CLI flags, environment variables, TOML config sections,
    and code-baked defaults into a single frozen object.

    Attributes:
        workspace_root: Directory release paths are resolved against
            (parent of ``rf2ctl.toml``, or CWD if no config found).
        config_path: The TOML file in use, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "RF2CTL_",
        "env_nested_delimiter": "__",
    }

    workspace_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    release: ReleaseConfig = Field(default_factory=ReleaseConfig)
    hierarchy: HierarchyConfig = Field(default_factory=HierarchyConfig)
    hash: HashConfig = Field(default_factory=HashConfig)

    # Retained for type-checker visibility; not used at runtime.
    _toml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    def resolve_release_path(self, name: str | None) -> Path | None:
        """Resolve a configured release file against the workspace root."""
        if not name:
            return None
        p = Path(name)
        return p if p.is_absolute() else self.workspace_root / p

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        workspace_root: Path | None = None,
        release_dir: str | None = None,
        stated_file: str | None = None,
        inferred_file: str | None = None,
        **cli_flags: Any,
    ) -> Rf2Settings:
        """Construct settings from CLI invocation.

        Discovers ``rf2ctl.toml`` via walk-up (or explicit *config_path*),
        resolves *workspace_root* from the config file's parent directory,
        and merges CLI flags as highest-priority overrides. Release file
        flags (*release_dir*, *stated_file*, *inferred_file*) override only the
        matching ``[release]`` keys.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(workspace_root)

        resolved_root = workspace_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            settings = cls(
                workspace_root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None

        overrides: dict[str, Any] = {}
        if release_dir is not None:
            overrides["directory"] = str(Path(release_dir).resolve())
        if stated_file is not None:
            overrides["stated_file"] = str(Path(stated_file).resolve())
        if inferred_file is not None:
            overrides["inferred_file"] = str(Path(inferred_file).resolve())
        if overrides:
            release = settings.release.model_copy(update=overrides)
            settings = settings.model_copy(update={"release": release})
        return settings
