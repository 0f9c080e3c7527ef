"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, rf2ctl.toml only contains overrides.
A typical workspace needs only [release] directory (an unpacked release)
or the explicit stated_file and inferred_file.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from rf2ctl.domain.hashing import DEFAULT_NAMESPACE
from rf2ctl.domain.types import ROOT_CONCEPT_ID

# --- rf2ctl.toml sections ---


class ReleaseConfig(BaseModel):
    """[release] section."""

    model_config = {"frozen": True}

    directory: str | None = None
    release_type: str = "Snapshot"
    stated_file: str | None = None
    inferred_file: str | None = None
    active_only: bool = True

    @field_validator("release_type")
    @classmethod
    def _known_release_type(cls, value: str) -> str:
        value = value.strip().capitalize()
        if value not in ("Snapshot", "Full", "Delta"):
            msg = f"release_type must be Snapshot, Full or Delta, got {value!r}"
            raise ValueError(msg)
        return value


class HierarchyConfig(BaseModel):
    """[hierarchy] section."""

    model_config = {"frozen": True}

    root_concept_id: int = ROOT_CONCEPT_ID


class HashConfig(BaseModel):
    """[hash] section."""

    model_config = {"frozen": True}

    namespace: str = DEFAULT_NAMESPACE

    @field_validator("namespace")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()


class Rf2Config(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    release: ReleaseConfig = Field(default_factory=ReleaseConfig)
    hierarchy: HierarchyConfig = Field(default_factory=HierarchyConfig)
    hash: HashConfig = Field(default_factory=HashConfig)
