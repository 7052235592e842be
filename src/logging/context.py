# src/logging/context.py - v3
"""Per-request logging context: operation, body type and fingerprint."""

from __future__ import annotations

import contextvars
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from typing import Any

_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)
_body_type: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "body_type", default=None
)
_fingerprint: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "fingerprint", default=None
)


@dataclass(frozen=True)
class LogContext:
    operation: str | None = None
    body_type: str | None = None
    fingerprint: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Non-None fields, for JSON log injection."""
        return {k: v for k, v in asdict(self).items() if v is not None}


def get_context() -> LogContext:
    return LogContext(_operation.get(), _body_type.get(), _fingerprint.get())


@contextmanager
def request_context(
    operation: str, body_type: str | None = None, fingerprint: str | None = None
) -> Iterator[None]:
    """Scope the context to a block; the previous values come back on exit."""
    tokens = [
        (var, var.set(value))
        for var, value in (
            (_operation, operation),
            (_body_type, body_type),
            (_fingerprint, fingerprint),
        )
    ]
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)
