"""Span timing for service calls and pipeline stages.

Off by default; ``--verbose`` turns it on for the process. A service
method decorated with ``@traced`` opens a root span, pipeline stages
open children with ``trace_span``, and the finished tree is attached to
``ServiceResult.meta["telemetry"]``. While off, every entry point costs
one ContextVar read.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Literal, ParamSpec, TypeVar

import structlog

from slanger.services.result import ServiceResult

type CacheOutcome = Literal["hit", "miss", "bypass"]

_enabled: ContextVar[bool] = ContextVar("slanger_telemetry_enabled", default=False)
_current_span: ContextVar[Span | None] = ContextVar("slanger_current_span", default=None)

log = structlog.get_logger("slanger.telemetry")


@dataclass
class Span:
    """One timed stage. ``attempts`` and ``cache`` are set by the pipeline."""

    name: str
    parent: Span | None = None
    children: list[Span] = field(default_factory=list)
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None
    attempts: int | None = None
    cache: CacheOutcome | None = None
    annotations: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        return 0.0 if self.finished is None else (self.finished - self.started) * 1000

    def end(self) -> None:
        self.finished = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.attempts is not None:
            out["attempts"] = self.attempts
        if self.cache is not None:
            out["cache"] = self.cache
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.children:
            out["children"] = [child.to_dict() for child in self.children]
        return out


@contextmanager
def _activate(span: Span) -> Iterator[Span]:
    token = _current_span.set(span)
    try:
        yield span
    finally:
        span.end()
        _current_span.reset(token)


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Time a stage under the active span.

    Yields None when telemetry is off or no ``@traced`` call is running,
    so callers guard any annotation with ``if span is not None``.
    """
    parent = _current_span.get() if _enabled.get() else None
    if parent is None:
        yield None
        return
    child = Span(name=name, parent=parent)
    parent.children.append(child)
    with _activate(child):
        yield child


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Run *func* inside a root span and attach the tree to its ServiceResult."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        root = Span(name=func.__qualname__)
        ok = False
        try:
            with _activate(root):
                result = func(*args, **kwargs)
            ok = True
        finally:
            log.debug(
                "span.complete",
                span_name=root.name,
                duration_ms=round(root.duration_ms, 2),
                ok=ok,
                stages=[child.name for child in root.children],
            )

        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": root.to_dict()}
            return result.model_copy(update={"meta": meta})  # type: ignore[return-value]
        return result

    return wrapper


def enable_telemetry() -> None:
    """Turn span collection on (``--verbose``)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)


def get_current_span() -> Span | None:
    """The innermost active span, or None when telemetry is off."""
    return _current_span.get() if _enabled.get() else None
