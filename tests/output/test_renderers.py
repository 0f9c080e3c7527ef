"""Tests for operation-specific Rich renderers."""

from rf2ctl.output.renderers import render_quiet, render_result
from rf2ctl.services.result import ServiceError, ServiceResult

# ── Helpers ───────────────────────────────────────────────────────────


def _ok(op: str, **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str, code: str, message: str, **detail: object) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=code, message=message, detail=dict(detail)),
    )


def _rel(rel_id: int | None, group: int) -> dict[str, object]:
    return {
        "id": rel_id,
        "source_id": 10,
        "type_id": 363698007,
        "destination_id": 20,
        "group": group,
        "characteristic": "inferred",
    }


# ── Error rendering ──────────────────────────────────────────────────


class TestErrorRenderer:
    def test_basic_error(self) -> None:
        output = render_result(_err("concept", "NOT_FOUND", "Concept 42 not found"))
        assert "ERROR" in output
        assert "concept" in output
        assert "Concept 42 not found" in output

    def test_verbose_shows_detail(self) -> None:
        output = render_result(_err("concept", "NOT_FOUND", "Bad", concept_id=42), verbose=True)
        assert "detail" in output
        assert "concept_id: 42" in output

    def test_no_error_object(self) -> None:
        assert "Unknown error" in render_result(ServiceResult(ok=False, op="test"))


# ── Graph renderers ──────────────────────────────────────────────────


class TestFieldRenderer:
    def test_concept(self) -> None:
        output = render_result(
            _ok("concept", id=73211009, characteristic="stated", parents=[64572001], depth=3)
        )
        assert "OK" in output
        assert "id: 73211009" in output
        assert "parents: 64572001" in output
        assert "depth: 3" in output

    def test_empty_list_as_dash(self) -> None:
        assert "parents: -" in render_result(_ok("concept", id=1, parents=[]))


class TestRelationshipRenderer:
    def test_table(self) -> None:
        output = render_result(
            _ok("equivalent", concept_id=10, matched_group=2, count=1, items=[_rel(5, 2)])
        )
        assert "matched_group: 2" in output
        assert "Destination" in output
        assert "1 relationships" in output

    def test_relationship_without_id(self) -> None:
        output = render_result(_ok("match", concept_id=10, count=1, items=[_rel(None, 1)]))
        assert "None" not in output

    def test_empty(self) -> None:
        output = render_result(_ok("match", concept_id=10, mode="group", count=0, items=[]))
        assert "0 relationships" in output
        assert "Source" not in output


class TestGroupsRenderer:
    def test_groups(self) -> None:
        items = [
            {"group": 1, "hash": "aaa", "relationships": [_rel(5, 1)]},
            {"group": 2, "hash": "bbb", "relationships": []},
        ]
        output = render_result(
            _ok("groups", concept_id=10, characteristic="inferred", count=2, items=items)
        )
        assert "Group 1" in output
        assert "aaa" in output
        assert "363698007 → 20" in output
        assert "2 groups" in output


# ── Check / compare ──────────────────────────────────────────────────


class TestCheckRenderer:
    def test_clean(self) -> None:
        assert "No issues found" in render_result(_ok("check", issues=[], count=0))

    def test_issues_grouped(self) -> None:
        issues = [
            {
                "category": "cycles",
                "severity": "error",
                "characteristic": "stated",
                "kind": "cyclic_hierarchy",
                "message": "Is-a cycle through 2 concept(s): 2, 3",
            },
            {
                "category": "parentage",
                "severity": "warning",
                "characteristic": "inferred",
                "kind": "missing_parent",
                "message": "1 concept(s) besides the root have no parent: 5",
            },
        ]
        output = render_result(
            _ok("check", issues=issues, count=2, error_count=1, warning_count=1)
        )
        assert "stated/cycles" in output
        assert "inferred/parentage" in output
        assert "cyclic_hierarchy" in output
        assert "1 errors, 1 warnings" in output


class TestCompareRenderer:
    def test_all_matched(self) -> None:
        output = render_result(
            _ok("compare", concepts=3, groups_compared=2, matched=2, unmatched_count=0, items=[])
        )
        assert "Every stated group" in output
        assert "2 matched, 0 unmatched" in output

    def test_unmatched_table(self) -> None:
        items = [{"id": 73211009, "group": 2, "hash": "abc", "size": 1, "in_inferred": False}]
        output = render_result(
            _ok("compare", concepts=1, groups_compared=1, matched=0, unmatched_count=1, items=items)
        )
        assert "73211009" in output
        assert "In Inferred" in output
        assert "no" in output


# ── Generic / verbose ────────────────────────────────────────────────


class TestGenericRenderer:
    def test_unknown_op(self) -> None:
        output = render_result(_ok("mystery", payload={"a": 1}))
        assert "mystery" in output
        assert '{"a":1}' in output

    def test_verbose_telemetry_tree(self) -> None:
        result = ServiceResult(
            ok=True,
            op="concept",
            data={"id": 1},
            meta={
                "telemetry": {
                    "name": "GraphService.concept",
                    "duration_ms": 1.5,
                    "children": [
                        {
                            "name": "load_release",
                            "duration_ms": 0.5,
                            "counters": {"rows_loaded": 19},
                        }
                    ],
                }
            },
        )
        output = render_result(result, verbose=True)
        assert "GraphService.concept" in output
        assert "load_release" in output
        assert "rows_loaded=19" in output


# ── Quiet ────────────────────────────────────────────────────────────


class TestQuiet:
    def test_hash(self) -> None:
        assert render_quiet(_ok("group_hash", hash="abc", size=2)) == "abc"

    def test_ancestor(self) -> None:
        assert render_quiet(_ok("ancestor", is_ancestor=True)) == "true"
        assert render_quiet(_ok("ancestor", is_ancestor=False)) == "false"

    def test_items_ids(self) -> None:
        assert render_quiet(_ok("match", items=[_rel(5, 1), _rel(6, 1)])) == "5\n6"

    def test_groups_fall_back_to_group_number(self) -> None:
        items = [{"group": 1, "hash": "aaa"}, {"group": 2, "hash": "bbb"}]
        assert render_quiet(_ok("groups", items=items)) == "1\n2"

    def test_plain_ok(self) -> None:
        assert render_quiet(_ok("check", count=0)) == "OK: check"

    def test_error(self) -> None:
        assert render_quiet(_err("concept", "NOT_FOUND", "gone")).startswith("ERROR: concept")
