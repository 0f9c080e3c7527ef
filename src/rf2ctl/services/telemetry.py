"""Service telemetry: timed span trees with graph-work counters.

Disabled by default; ``--verbose`` switches it on. While enabled, every
``@traced`` service call records a :class:`Span` tree in
``ServiceResult.meta["telemetry"]``. Spans carry free-form annotations
(the match mode, the view) and integer counters for the work a query
did: release rows loaded, concepts checked, groups hashed, relationships
scanned. The span name is also bound into the structlog context so log
lines emitted during the call can be tied back to it.

When disabled, :func:`count`, :func:`trace_span` and :func:`traced` cost
one ContextVar lookup.
"""

from __future__ import annotations

import functools
import time
from collections import Counter
from collections.abc import Callable, Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from rf2ctl.services.result import ServiceResult

logger = structlog.get_logger("rf2ctl.telemetry")

_enabled: ContextVar[bool] = ContextVar("rf2ctl_telemetry_enabled", default=False)
_active: ContextVar[Span | None] = ContextVar("rf2ctl_active_span", default=None)

# Counter names shared by the services.
ROWS_LOADED = "rows_loaded"
CONCEPTS_CHECKED = "concepts_checked"
GROUPS_HASHED = "groups_hashed"
RELATIONSHIPS_SCANNED = "relationships_scanned"


@dataclass
class Span:
    """One timed unit of service work and the sub-steps beneath it."""

    name: str
    parent: Span | None = None
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)
    counters: Counter[str] = field(default_factory=Counter)
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None

    @property
    def duration_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def end(self) -> None:
        self.finished = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def count(self, key: str, n: int = 1) -> None:
        self.counters[key] += n

    def totals(self) -> Counter[str]:
        """Counters of this span summed with those of every descendant."""
        total = Counter(self.counters)
        for child in self.children:
            total.update(child.totals())
        return total

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.counters:
            out["counters"] = dict(sorted(self.counters.items()))
        if self.children:
            out["children"] = [child.to_dict() for child in self.children]
        return out


def enable_telemetry() -> None:
    """Turn span recording on (AppContext does this for ``--verbose``)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)


def get_current_span() -> Span | None:
    """The innermost open span, or None when telemetry is off."""
    return _active.get() if _enabled.get() else None


def count(key: str, n: int = 1) -> None:
    """Add *n* to counter *key* of the innermost open span, if any."""
    span = get_current_span()
    if span is not None:
        span.count(key, n)


@contextmanager
def trace_span(name: str) -> Generator[Span | None]:
    """Open a child span of the current one for the duration of the block.

    Yields None when telemetry is off or no ``@traced`` call is running.
    """
    parent = get_current_span()
    if parent is None:
        yield None
        return

    child = Span(name=name, parent=parent)
    parent.children.append(child)
    token = _active.set(child)
    try:
        yield child
    finally:
        child.end()
        _active.reset(token)


def _finish(span: Span, *, ok: bool) -> None:
    span.end()
    logger.debug(
        "span.complete",
        duration_ms=round(span.duration_ms, 2),
        ok=ok,
        **span.totals(),
    )


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Record a root span around a service method.

    A returned ServiceResult gets the span tree merged into its ``meta``.
    """

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        span = Span(name=func.__qualname__)
        token = _active.set(span)
        try:
            with structlog.contextvars.bound_contextvars(span=span.name):
                result = func(*args, **kwargs)
                _finish(span, ok=not isinstance(result, ServiceResult) or result.ok)
        except Exception:
            if span.finished is None:
                _finish(span, ok=False)
            raise
        finally:
            _active.reset(token)

        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": span.to_dict()}
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper
