"""Characteristic views and reserved SNOMED CT identifiers.

A release carries two relationship views over one id space:
- Stated: authored content.
- Inferred: the classifier's output.
Each view gets its own independent concept graph.
"""

from __future__ import annotations

from enum import StrEnum

IS_A_TYPE_ID = 116680003
ROOT_CONCEPT_ID = 138875005

STATED_CHARACTERISTIC_ID = 900000000000010007
INFERRED_CHARACTERISTIC_ID = 900000000000011006


class Characteristic(StrEnum):
    """Which relationship view a graph universe represents."""

    STATED = "stated"
    INFERRED = "inferred"

    @classmethod
    def from_sctid(cls, characteristic_type_id: int) -> Characteristic | None:
        """Map an RF2 ``characteristicTypeId`` to a view.

        Returns None for characteristic types with no graph of their own
        (e.g. additional relationships).
        """
        return _BY_SCTID.get(characteristic_type_id)


_BY_SCTID: dict[int, Characteristic] = {
    STATED_CHARACTERISTIC_ID: Characteristic.STATED,
    INFERRED_CHARACTERISTIC_ID: Characteristic.INFERRED,
}
