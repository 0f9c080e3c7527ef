"""Relationship — one RF2 relationship row as an immutable value.

Pure value type, no infrastructure dependencies. Produced once by the
release reader and registered into exactly one view's graph.

Triple key format (feeds the group content hash, so it must not change):
``{sourceId}|{typeId}|{destinationId};`` in decimal, e.g. ``10|130|20;``.
The trailing ``;`` keeps a concatenation of keys unambiguous.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from rf2ctl.domain.types import IS_A_TYPE_ID, Characteristic

TRIPLE_FIELD_SEPARATOR = "|"
TRIPLE_TERMINATOR = ";"


@dataclass(frozen=True)
class Relationship:
    """A directed, typed, optionally grouped edge between two concepts.

    Equality and hashing are by content. ``relationship_id`` is carried
    for reporting only, so two rows with identical content collapse to one
    attribute when registered.
    """

    source_id: int
    destination_id: int
    type_id: int
    group: int = 0  # 0 = ungrouped
    characteristic: Characteristic = Characteristic.STATED
    relationship_id: int | None = field(default=None, compare=False)

    @property
    def is_isa(self) -> bool:
        """True iff this is a hierarchical (is-a) relationship."""
        return self.type_id == IS_A_TYPE_ID

    def matches_type_and_group(self, type_id: int, group: int) -> bool:
        return self.type_id == type_id and self.group == group

    def matches_group(self, group: int) -> bool:
        return self.group == group

    def triple_key(self) -> str:
        """Return the canonical ``source|type|destination;`` encoding."""
        fields = (self.source_id, self.type_id, self.destination_id)
        return TRIPLE_FIELD_SEPARATOR.join(str(f) for f in fields) + TRIPLE_TERMINATOR

    def to_dict(self) -> dict[str, int | str | None]:
        return {
            "id": self.relationship_id,
            "source_id": self.source_id,
            "type_id": self.type_id,
            "destination_id": self.destination_id,
            "group": self.group,
            "characteristic": str(self.characteristic),
        }
