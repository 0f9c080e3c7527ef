"""Locating rf2ctl.toml and the RF2 relationship files of a release.

Two lookups:

- :func:`find_config` walks up from a directory to the nearest
  ``rf2ctl.toml`` (``RF2CTL_CONFIG`` wins when set).
- :func:`find_release_files` searches an unpacked release for the stated
  and inferred relationship files by their RF2 names, e.g.
  ``sct2_StatedRelationship_Snapshot_INT_20240101.txt``.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from rf2ctl.config.models import Rf2Config
from rf2ctl.domain.types import Characteristic

CONFIG_FILENAME = "rf2ctl.toml"
CONFIG_ENV_VAR = "RF2CTL_CONFIG"

RELEASE_TYPES = ("Snapshot", "Full", "Delta")

# File-name stem per view; both are followed by "_<ReleaseType>".
_RELEASE_STEMS: dict[Characteristic, str] = {
    Characteristic.STATED: "sct2_StatedRelationship",
    Characteristic.INFERRED: "sct2_Relationship",
}


def find_config(start: Path | None = None) -> Path | None:
    """Return the rf2ctl.toml governing *start* (default: cwd), or None.

    An ``RF2CTL_CONFIG`` path is used as-is; if it is not a file there is
    no config, the walk-up is not attempted.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> Rf2Config:
    """Parse *path* (or the discovered config) into an :class:`Rf2Config`.

    No file at all yields the defaults.
    """
    if path is None:
        path = find_config(cwd)
    if path is None:
        return Rf2Config()

    data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    return Rf2Config.model_validate(data)


def release_file_pattern(characteristic: Characteristic, release_type: str = "Snapshot") -> str:
    """Glob matching one view's relationship files of *release_type*."""
    if release_type not in RELEASE_TYPES:
        msg = f"release_type must be one of {', '.join(RELEASE_TYPES)}, got {release_type!r}"
        raise ValueError(msg)
    return f"{_RELEASE_STEMS[Characteristic(characteristic)]}_{release_type}_*.txt"


def find_release_files(
    root: Path,
    *,
    release_type: str = "Snapshot",
) -> dict[Characteristic, Path]:
    """Search *root* recursively for each view's relationship file.

    The patterns do not match the ``sct2_RelationshipConcreteValues``
    files of newer releases, which carry no destination concept. When
    several releases sit under *root* the name sorting last (the newest
    effective date) wins. Views with no file are absent from the result.
    """
    found: dict[Characteristic, Path] = {}
    if not root.is_dir():
        return found
    for characteristic in Characteristic:
        pattern = release_file_pattern(characteristic, release_type)
        candidates = sorted(
            (p for p in root.rglob(pattern) if p.is_file()),
            key=lambda p: p.name,
        )
        if candidates:
            found[characteristic] = candidates[-1]
    return found
