"""Shared pytest fixtures and test helpers for rf2ctl tests."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pytest
from click.testing import CliRunner

from rf2ctl.config.settings import Rf2Settings
from rf2ctl.domain.relationship import Relationship
from rf2ctl.domain.types import (
    INFERRED_CHARACTERISTIC_ID,
    IS_A_TYPE_ID,
    ROOT_CONCEPT_ID,
    STATED_CHARACTERISTIC_ID,
    Characteristic,
)
from rf2ctl.infrastructure.registry import ConceptGraphs
from rf2ctl.infrastructure.workspace import Workspace

# ---------------------------------------------------------------------------
# A small slice of the hierarchy used across test modules
# ---------------------------------------------------------------------------

CLINICAL_FINDING = 404684003
BODY_STRUCTURE = 123037004
DISEASE = 64572001
ENDOCRINE_STRUCTURE = 113331007
THYROID_STRUCTURE = 69748006
ABNORMAL_MORPHOLOGY = 49755003
DIABETES = 73211009
THYROID_DISORDER = 14304000

FINDING_SITE = 363698007
MORPHOLOGY = 116676008

# (source, destination, type, group)
_IS_A_ROWS: list[tuple[int, int, int, int]] = [
    (CLINICAL_FINDING, ROOT_CONCEPT_ID, IS_A_TYPE_ID, 0),
    (BODY_STRUCTURE, ROOT_CONCEPT_ID, IS_A_TYPE_ID, 0),
    (ABNORMAL_MORPHOLOGY, ROOT_CONCEPT_ID, IS_A_TYPE_ID, 0),
    (DISEASE, CLINICAL_FINDING, IS_A_TYPE_ID, 0),
    (ENDOCRINE_STRUCTURE, BODY_STRUCTURE, IS_A_TYPE_ID, 0),
    (THYROID_STRUCTURE, ENDOCRINE_STRUCTURE, IS_A_TYPE_ID, 0),
    (DIABETES, DISEASE, IS_A_TYPE_ID, 0),
    (THYROID_DISORDER, DISEASE, IS_A_TYPE_ID, 0),
]

STATED_ROWS: list[tuple[int, int, int, int]] = [
    *_IS_A_ROWS,
    (DIABETES, ENDOCRINE_STRUCTURE, FINDING_SITE, 1),
    (THYROID_DISORDER, THYROID_STRUCTURE, FINDING_SITE, 1),
    (THYROID_DISORDER, ABNORMAL_MORPHOLOGY, MORPHOLOGY, 1),
]

# The classifier renumbers the thyroid disorder group to 2 and adds an
# inherited group 1.
INFERRED_ROWS: list[tuple[int, int, int, int]] = [
    *_IS_A_ROWS,
    (DIABETES, ENDOCRINE_STRUCTURE, FINDING_SITE, 1),
    (THYROID_DISORDER, ENDOCRINE_STRUCTURE, FINDING_SITE, 1),
    (THYROID_DISORDER, ABNORMAL_MORPHOLOGY, MORPHOLOGY, 2),
    (THYROID_DISORDER, THYROID_STRUCTURE, FINDING_SITE, 2),
]

RF2_HEADER = (
    "id\teffectiveTime\tactive\tmoduleId\tsourceId\tdestinationId\t"
    "relationshipGroup\ttypeId\tcharacteristicTypeId\tmodifierId"
)

_CHARACTERISTIC_SCTIDS = {
    Characteristic.STATED: STATED_CHARACTERISTIC_ID,
    Characteristic.INFERRED: INFERRED_CHARACTERISTIC_ID,
}


def rel(
    source: int,
    destination: int,
    type_id: int = IS_A_TYPE_ID,
    group: int = 0,
    characteristic: Characteristic = Characteristic.STATED,
) -> Relationship:
    """Build a Relationship with positional row order (source, destination, type, group)."""
    return Relationship(
        source_id=source,
        destination_id=destination,
        type_id=type_id,
        group=group,
        characteristic=characteristic,
    )


def rf2_line(
    row_id: int,
    row: tuple[int, int, int, int],
    characteristic: Characteristic,
    *,
    active: str = "1",
) -> str:
    source, destination, type_id, group = row
    return "\t".join(
        str(v)
        for v in (
            row_id,
            "20240101",
            active,
            900000000000207008,
            source,
            destination,
            group,
            type_id,
            _CHARACTERISTIC_SCTIDS[characteristic],
            900000000000451002,
        )
    )


def write_release(
    path: Path,
    rows: Iterable[tuple[int, int, int, int]],
    characteristic: Characteristic,
    *,
    first_id: int = 100022,
) -> Path:
    """Write an RF2 relationship file with one active row per tuple."""
    lines = [RF2_HEADER]
    for offset, row in enumerate(rows):
        lines.append(rf2_line(first_id + offset * 1000, row, characteristic))
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def build_graphs(
    stated: Iterable[tuple[int, int, int, int]] = STATED_ROWS,
    inferred: Iterable[tuple[int, int, int, int]] = INFERRED_ROWS,
) -> ConceptGraphs:
    graphs = ConceptGraphs()
    for row in stated:
        graphs.register(rel(*row, characteristic=Characteristic.STATED))
    for row in inferred:
        graphs.register(rel(*row, characteristic=Characteristic.INFERRED))
    return graphs


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def graphs() -> ConceptGraphs:
    """Stated and inferred graphs for the sample hierarchy."""
    return build_graphs()


@pytest.fixture
def release_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temporary workspace with sample release files and an rf2ctl.toml.

    This is the single source of truth for the on-disk workspace layout.
    """
    monkeypatch.delenv("RF2CTL_CONFIG", raising=False)
    write_release(
        tmp_path / "sct2_StatedRelationship_Snapshot.txt",
        STATED_ROWS,
        Characteristic.STATED,
    )
    write_release(
        tmp_path / "sct2_Relationship_Snapshot.txt",
        INFERRED_ROWS,
        Characteristic.INFERRED,
    )
    (tmp_path / "rf2ctl.toml").write_text(
        "[release]\n"
        'stated_file = "sct2_StatedRelationship_Snapshot.txt"\n'
        'inferred_file = "sct2_Relationship_Snapshot.txt"\n',
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture
def workspace(release_root: Path) -> Workspace:
    """Workspace that loads the sample release files on first use."""
    settings = Rf2Settings.from_cli(workspace_root=release_root)
    return Workspace(settings)


@pytest.fixture
def _isolated_workspace(release_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the sample workspace so the CLI discovers its rf2ctl.toml.

    Use via ``@pytest.mark.usefixtures("_isolated_workspace")`` on command test
    classes.
    """
    monkeypatch.chdir(release_root)


def workspace_with(graphs: ConceptGraphs, root: Path) -> Workspace:
    """Workspace over pre-built graphs (no release files are read)."""
    return Workspace(Rf2Settings.from_cli(workspace_root=root), graphs=graphs)
