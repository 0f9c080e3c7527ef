"""Group content hashing — recognise "the same group" by its triples.

A relationship group's numeric id is arbitrary (the classifier assigns
it), so equivalence across the stated and inferred views is decided on
content: the set of ``(source, type, destination)`` triples in the group.

The hash input is the concatenation of the group's triple keys in sorted
order. Sorting makes the hash independent of registration order; the
unsorted, insertion-order variant is not supported.

The digest primitive is injected as a :class:`HashProvider`. The default,
:class:`Type5UuidProvider`, returns a namespace-seeded UUIDv5 string.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Protocol

from rf2ctl.domain.errors import HashEncodingError, HashInitializationError

if TYPE_CHECKING:
    from rf2ctl.domain.concept import Concept
    from rf2ctl.domain.relationship import Relationship

DEFAULT_NAMESPACE = "d0b8a5b4-4d5c-5e3f-9a6e-2f1c7b3e8a10"


class HashProvider(Protocol):
    """Deterministic digest of a character sequence."""

    def digest(self, text: str) -> str: ...


class Type5UuidProvider:
    """Namespace-seeded UUIDv5 digests (SHA-1 based, RFC 4122)."""

    def __init__(self, namespace: str | uuid.UUID = DEFAULT_NAMESPACE) -> None:
        try:
            self._namespace = (
                namespace if isinstance(namespace, uuid.UUID) else uuid.UUID(str(namespace))
            )
        except (ValueError, TypeError) as exc:
            msg = f"Unable to initialise UUID namespace {namespace!r}: {exc}"
            raise HashInitializationError(msg) from exc

    @property
    def namespace(self) -> uuid.UUID:
        return self._namespace

    def digest(self, text: str) -> str:
        try:
            # Encode up front so lone surrogates fail here, not inside uuid.
            text.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise HashEncodingError(f"Cannot encode hash input: {exc}") from exc
        return str(uuid.uuid5(self._namespace, text))


class GroupHasher:
    """Computes group content hashes and finds equivalent groups."""

    def __init__(self, provider: HashProvider) -> None:
        self._provider = provider

    @staticmethod
    def hash_input(concept: Concept, group: int) -> str:
        """Return the canonical (sorted, concatenated) triple keys of *group*."""
        return "".join(sorted(r.triple_key() for r in concept.by_group(group)))

    def group_content_hash(self, concept: Concept, group: int) -> str:
        """Hash the triples in *group* of *concept*.

        Raises:
            HashEncodingError: The hash input could not be encoded.
        """
        return self._provider.digest(self.hash_input(concept, group))

    def group_hashes(self, concept: Concept) -> dict[int, str]:
        """Content hash of every group 1..max_group_id of *concept*."""
        return {g: self.group_content_hash(concept, g) for g in concept.group_ids()}

    def find_group(self, concept: Concept, target_hash: str) -> int | None:
        """Return the first non-empty group 1..max_group_id hashing to *target_hash*.

        Unused group numbers below max_group_id are never candidates.
        """
        for group in concept.group_ids():
            if concept.by_group(group) and self.group_content_hash(concept, group) == target_hash:
                return group
        return None

    def find_equivalent_group(
        self,
        concept: Concept,
        target_hash: str,
        source_relationship: Relationship,
    ) -> list[Relationship] | None:
        """Find *source_relationship*'s counterpart in a content-equal group.

        Scans groups 1..max_group_id (group 0 is never a candidate). In the
        first group whose content hash equals *target_hash*, returns the
        relationships with the same type and destination as
        *source_relationship*; the source is implied by *concept*.

        Returns None when no group hash matches. A matching group with no
        such relationship gives an empty list.
        """
        group = self.find_group(concept, target_hash)
        if group is None:
            return None
        return concept.by_type_group_destination(
            source_relationship.type_id,
            source_relationship.destination_id,
            group,
        )
