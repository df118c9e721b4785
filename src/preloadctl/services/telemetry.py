"""Phase timings for ``--verbose`` runs.

A verify run has three phases worth timing: indexing the directory
snapshot, binding the rule catalogs and evaluating the batch. ``@traced``
opens a root span around a service method and ``trace_span`` adds one
child per phase. The finished tree lands in ``ServiceResult.meta``.

With telemetry off both are a single ContextVar lookup.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Concatenate, ParamSpec

import structlog

from preloadctl.services.result import ServiceResult

log = structlog.get_logger("preloadctl.telemetry")

_enabled: ContextVar[bool] = ContextVar("preloadctl_telemetry", default=False)
_open_span: ContextVar[Span | None] = ContextVar("preloadctl_open_span", default=None)

_P = ParamSpec("_P")


@dataclass
class Span:
    """A timed phase; ``duration_ms`` stays 0.0 until :meth:`end`."""

    name: str
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)
    started: float = field(default_factory=time.perf_counter)
    duration_ms: float = 0.0

    def end(self) -> None:
        self.duration_ms = (time.perf_counter() - self.started) * 1000

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            data["annotations"] = dict(self.annotations)
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Time one phase of the running service call.

    Yields None outside a ``@traced`` call or when telemetry is off, so
    callers annotate behind an ``if span is not None`` guard.
    """
    parent = _open_span.get() if _enabled.get() else None
    if parent is None:
        yield None
        return

    span = Span(name=name)
    parent.children.append(span)
    token = _open_span.set(span)
    try:
        yield span
    finally:
        span.end()
        _open_span.reset(token)


def traced[S](
    method: Callable[Concatenate[S, _P], ServiceResult],
) -> Callable[Concatenate[S, _P], ServiceResult]:
    """Attach the span tree of a service method to ``result.meta["telemetry"]``."""

    @functools.wraps(method)
    def wrapper(self: S, /, *args: _P.args, **kwargs: _P.kwargs) -> ServiceResult:
        if not _enabled.get():
            return method(self, *args, **kwargs)

        root = Span(name=method.__qualname__)
        token = _open_span.set(root)
        try:
            result = method(self, *args, **kwargs)
        finally:
            root.end()
            _open_span.reset(token)

        log.debug(
            "service.timed",
            op=result.op,
            ok=result.ok,
            duration_ms=round(root.duration_ms, 2),
            phases=[child.name for child in root.children],
        )
        meta = {**(result.meta or {}), "telemetry": root.to_dict()}
        return result.model_copy(update={"meta": meta})

    return wrapper


def enable_telemetry() -> None:
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)
