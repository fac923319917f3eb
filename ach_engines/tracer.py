"""
Engine call tracing.

``@traced_engine`` wraps a pure engine function and, after each call,
emits one ``ACH_ENGINE_TRACE`` log record naming the engine, its version,
how long the call took and a fingerprint of the chosen keyword inputs.
Two calls with equal inputs share a fingerprint, so a trace can be matched
against a replayed build.

The wrapper never touches the arguments or the return value.  A keyword
named in ``fingerprint_fields`` but not passed is fingerprinted as null.
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import time
from collections.abc import Callable, Mapping
from typing import Any

from ach_kernel.logging_config import get_logger

_logger = get_logger("engines.tracer")

TRACE_TYPE = "ACH_ENGINE_TRACE"
FINGERPRINT_LENGTH = 16


def _canonicalize(value: Any) -> str:
    """Stable text form of a value; mapping keys are sorted."""
    if value is None:
        return "null"
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return str(value)
    if isinstance(value, Mapping):
        body = ",".join(f"{k}:{_canonicalize(value[k])}" for k in sorted(value))
        return "{" + body + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(map(_canonicalize, value)) + "]"
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        body = ",".join(
            f"{f.name}:{_canonicalize(getattr(value, f.name))}"
            for f in dataclasses.fields(value)
        )
        return f"{type(value).__name__}({body})"
    return repr(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    kwargs: dict[str, Any],
) -> str:
    """SHA-256 over ``name=value`` pairs of the selected kwargs, first 16 hex chars."""
    canonical = "|".join(f"{name}={_canonicalize(kwargs.get(name))}" for name in fingerprint_fields)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


def _emit(func: Callable, engine_name: str, engine_version: str, fingerprint: str, started: float) -> None:
    _logger.info(
        TRACE_TYPE,
        extra={
            "trace_type": TRACE_TYPE,
            "engine_name": engine_name,
            "engine_version": engine_version,
            "input_fingerprint": fingerprint,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            "function": func.__qualname__,
        },
    )


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable[[Callable], Callable]:
    """Decorate an engine function so each successful call is traced.

    Args:
        engine_name: Engine identifier, e.g. ``"control_totals"``.
        engine_version: Version string recorded with every trace.
        fingerprint_fields: Keyword argument names hashed into
            ``input_fingerprint``.  Empty means no fingerprint.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = (
                compute_input_fingerprint(fingerprint_fields, kwargs) if fingerprint_fields else ""
            )
            started = time.perf_counter()
            result = func(*args, **kwargs)
            _emit(func, engine_name, engine_version, fingerprint, started)
            return result

        return wrapper

    return decorator
