"""RF2 relationship file reader.

Reads ``sct2_Relationship_*`` / ``sct2_StatedRelationship_*`` files:
UTF-8, tab-separated, one header row. Only the columns the concept graph
needs are parsed; the rest are checked for presence and ignored.
"""

from __future__ import annotations

import csv
import logging
from typing import TYPE_CHECKING

from rf2ctl.domain.errors import Rf2FormatError
from rf2ctl.domain.relationship import Relationship
from rf2ctl.domain.types import Characteristic

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

logger = logging.getLogger(__name__)

RELATIONSHIP_COLUMNS: tuple[str, ...] = (
    "id",
    "effectiveTime",
    "active",
    "moduleId",
    "sourceId",
    "destinationId",
    "relationshipGroup",
    "typeId",
    "characteristicTypeId",
    "modifierId",
)


def _int_field(row: dict[str, str], column: str, path: Path, line: int) -> int:
    raw = row.get(column)
    try:
        return int(raw)  # type: ignore[arg-type]
    except (ValueError, TypeError) as exc:
        msg = f"column {column!r} is not an integer: {raw!r}"
        raise Rf2FormatError(msg, path=str(path), line=line) from exc


def read_relationships(path: Path, *, active_only: bool = True) -> Iterator[Relationship]:
    """Yield a :class:`Relationship` per usable row of *path*.

    Skips inactive rows (when *active_only*) and rows whose
    characteristic type has no graph of its own.

    Raises:
        Rf2FormatError: Missing header columns, a short row, or a non-integer field.
        OSError: The file cannot be opened.
    """
    skipped = 0
    with path.open(newline="", encoding="utf-8") as fh:
        reader = csv.DictReader(fh, delimiter="\t", quoting=csv.QUOTE_NONE)
        header = reader.fieldnames or []
        missing = [c for c in RELATIONSHIP_COLUMNS if c not in header]
        if missing:
            msg = f"missing RF2 columns: {', '.join(missing)}"
            raise Rf2FormatError(msg, path=str(path), line=1)

        for row in reader:
            line = reader.line_num
            short = [c for c in RELATIONSHIP_COLUMNS if row.get(c) is None]
            if short:
                msg = f"row is missing fields: {', '.join(short)}"
                raise Rf2FormatError(msg, path=str(path), line=line)
            if active_only and row["active"] != "1":
                skipped += 1
                continue
            characteristic = Characteristic.from_sctid(
                _int_field(row, "characteristicTypeId", path, line)
            )
            if characteristic is None:
                skipped += 1
                continue
            yield Relationship(
                source_id=_int_field(row, "sourceId", path, line),
                destination_id=_int_field(row, "destinationId", path, line),
                type_id=_int_field(row, "typeId", path, line),
                group=_int_field(row, "relationshipGroup", path, line),
                characteristic=characteristic,
                relationship_id=_int_field(row, "id", path, line),
            )

    logger.debug("Read %s (%d rows skipped)", path.name, skipped)
