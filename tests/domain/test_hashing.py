"""Tests for group content hashing and equivalent-group lookup."""

from __future__ import annotations

import uuid

import pytest

from rf2ctl.domain.concept import Concept
from rf2ctl.domain.errors import HashEncodingError, HashInitializationError
from rf2ctl.domain.hashing import DEFAULT_NAMESPACE, GroupHasher, Type5UuidProvider
from rf2ctl.domain.types import Characteristic
from rf2ctl.infrastructure.registry import ConceptRegistry
from tests.conftest import rel

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def hasher() -> GroupHasher:
    return GroupHasher(Type5UuidProvider())


def _concept_with(*rows: tuple[int, int, int, int]) -> Concept:
    registry = ConceptRegistry(Characteristic.STATED)
    for row in rows:
        registry.register(rel(*row))
    concept = registry.get_concept(rows[0][0])
    assert concept is not None
    return concept


class _FailingProvider:
    def digest(self, text: str) -> str:
        raise HashEncodingError("boom")


# ---------------------------------------------------------------------------
# Type5UuidProvider
# ---------------------------------------------------------------------------


class TestType5UuidProvider:
    def test_deterministic(self) -> None:
        p = Type5UuidProvider()
        assert p.digest("10|130|20;") == p.digest("10|130|20;")

    def test_is_uuid5_of_namespace(self) -> None:
        p = Type5UuidProvider()
        expected = uuid.uuid5(uuid.UUID(DEFAULT_NAMESPACE), "abc")
        assert p.digest("abc") == str(expected)
        assert uuid.UUID(p.digest("abc")).version == 5

    def test_namespace_changes_digest(self) -> None:
        a = Type5UuidProvider()
        b = Type5UuidProvider(uuid.NAMESPACE_OID)
        assert a.digest("abc") != b.digest("abc")

    def test_invalid_namespace_fails_at_construction(self) -> None:
        with pytest.raises(HashInitializationError, match="namespace"):
            Type5UuidProvider("not-a-uuid")

    def test_unencodable_input(self) -> None:
        with pytest.raises(HashEncodingError):
            Type5UuidProvider().digest("\ud800")


# ---------------------------------------------------------------------------
# group_content_hash
# ---------------------------------------------------------------------------


class TestGroupContentHash:
    def test_hash_input_is_sorted_triple_keys(self) -> None:
        c = _concept_with((10, 30, 130, 1), (10, 20, 130, 1), (10, 40, 131, 2))
        assert GroupHasher.hash_input(c, 1) == "10|130|20;10|130|30;"

    def test_stable_across_calls(self, hasher: GroupHasher) -> None:
        c = _concept_with((10, 20, 130, 1), (10, 30, 130, 1))
        assert hasher.group_content_hash(c, 1) == hasher.group_content_hash(c, 1)

    def test_source_is_part_of_the_content(self, hasher: GroupHasher) -> None:
        c10 = _concept_with((10, 20, 130, 1), (10, 30, 130, 1))
        c11 = _concept_with((11, 20, 130, 1), (11, 30, 130, 1))
        assert hasher.group_content_hash(c10, 1) != hasher.group_content_hash(c11, 1)

    def test_reverse_insertion_order_hashes_equal(self, hasher: GroupHasher) -> None:
        forward = _concept_with((10, 20, 130, 1), (10, 30, 130, 1))
        reverse = _concept_with((10, 30, 130, 1), (10, 20, 130, 1))
        assert hasher.group_content_hash(forward, 1) == hasher.group_content_hash(reverse, 1)

    def test_group_number_does_not_affect_hash(self, hasher: GroupHasher) -> None:
        g1 = _concept_with((10, 20, 130, 1), (10, 30, 130, 1))
        g4 = _concept_with((10, 20, 130, 4), (10, 30, 130, 4))
        assert hasher.group_content_hash(g1, 1) == hasher.group_content_hash(g4, 4)

    def test_changes_when_relationship_added(self, hasher: GroupHasher) -> None:
        registry = ConceptRegistry(Characteristic.STATED)
        registry.register(rel(10, 20, 130, 1))
        c = registry.get_concept(10)
        assert c is not None
        before = hasher.group_content_hash(c, 1)
        registry.register(rel(10, 30, 130, 1))
        assert hasher.group_content_hash(c, 1) != before

    def test_other_groups_do_not_affect_hash(self, hasher: GroupHasher) -> None:
        registry = ConceptRegistry(Characteristic.STATED)
        registry.register(rel(10, 20, 130, 1))
        c = registry.get_concept(10)
        assert c is not None
        before = hasher.group_content_hash(c, 1)
        registry.register(rel(10, 30, 130, 2))
        assert hasher.group_content_hash(c, 1) == before

    def test_encoding_error_propagates(self) -> None:
        c = _concept_with((10, 20, 130, 1))
        with pytest.raises(HashEncodingError):
            GroupHasher(_FailingProvider()).group_content_hash(c, 1)

    def test_group_hashes(self, hasher: GroupHasher) -> None:
        c = _concept_with((10, 20, 130, 1), (10, 30, 130, 2))
        hashes = hasher.group_hashes(c)
        assert list(hashes) == [1, 2]
        assert hashes[1] != hashes[2]


class TestContentEquivalenceAcrossViews:
    def test_same_triples_in_both_views_hash_equal(self, hasher: GroupHasher) -> None:
        stated = ConceptRegistry(Characteristic.STATED)
        inferred = ConceptRegistry(Characteristic.INFERRED)
        stated.register(rel(10, 20, 130, 1))
        stated.register(rel(10, 30, 130, 1))
        inferred.register(rel(10, 30, 130, 3, Characteristic.INFERRED))
        inferred.register(rel(10, 20, 130, 3, Characteristic.INFERRED))
        s, i = stated.get_concept(10), inferred.get_concept(10)
        assert s is not None and i is not None
        assert hasher.group_content_hash(s, 1) == hasher.group_content_hash(i, 3)


# ---------------------------------------------------------------------------
# find_equivalent_group
# ---------------------------------------------------------------------------


class TestFindEquivalentGroup:
    def _views(self) -> tuple[Concept, Concept]:
        stated = _concept_with((10, 20, 130, 1), (10, 30, 131, 1))
        inferred = ConceptRegistry(Characteristic.INFERRED)
        for row in [(10, 99, 130, 1), (10, 30, 131, 2), (10, 20, 130, 2), (10, 50, 132, 0)]:
            inferred.register(rel(*row, characteristic=Characteristic.INFERRED))
        concept = inferred.get_concept(10)
        assert concept is not None
        return stated, concept

    def test_returns_matching_relationships(self, hasher: GroupHasher) -> None:
        stated, inferred = self._views()
        target = hasher.group_content_hash(stated, 1)
        matches = hasher.find_equivalent_group(inferred, target, rel(10, 20, 130, 1))
        assert matches is not None
        assert [(r.destination_id, r.group) for r in matches] == [(20, 2)]

    def test_find_group(self, hasher: GroupHasher) -> None:
        stated, inferred = self._views()
        assert hasher.find_group(inferred, hasher.group_content_hash(stated, 1)) == 2

    def test_no_matching_group_is_none(self, hasher: GroupHasher) -> None:
        _, inferred = self._views()
        assert hasher.find_equivalent_group(inferred, "no-such-hash", rel(10, 20, 130, 1)) is None

    def test_matching_group_without_triple_is_empty(self, hasher: GroupHasher) -> None:
        stated, inferred = self._views()
        target = hasher.group_content_hash(stated, 1)
        assert hasher.find_equivalent_group(inferred, target, rel(10, 77, 130, 1)) == []

    def test_group_zero_is_never_a_candidate(self, hasher: GroupHasher) -> None:
        _, inferred = self._views()
        ungrouped = hasher.group_content_hash(inferred, 0)
        assert hasher.find_equivalent_group(inferred, ungrouped, rel(10, 50, 132, 0)) is None

    def test_encoding_error_propagates(self) -> None:
        _, inferred = self._views()
        with pytest.raises(HashEncodingError):
            GroupHasher(_FailingProvider()).find_equivalent_group(
                inferred, "x", rel(10, 20, 130, 1)
            )

    def test_unused_group_numbers_are_never_candidates(self, hasher: GroupHasher) -> None:
        gapped = _concept_with((10, 20, 130, 1), (10, 30, 131, 3))
        empty = hasher.group_content_hash(gapped, 2)
        assert gapped.max_group_id == 3
        assert hasher.find_group(gapped, empty) is None
        assert hasher.find_equivalent_group(gapped, empty, rel(10, 20, 130, 2)) is None
