"""Invariant markers for propsync."""

from __future__ import annotations

from typing import NoReturn

from propsync.exceptions import NeverThrown


def _render_reason(reason: str, env: dict[str, object]) -> str:
    if not env:
        return reason
    details = ", ".join(f"{key}={env[key]!r}" for key in sorted(env))
    return f"{reason} ({details})"


def never(reason: str = "", **env: object) -> NoReturn:
    """Mark a code path as intentionally unreachable.

    The env payload is attached to the raised exception as metadata.
    """
    raise NeverThrown(_render_reason(reason or "never() marker reached", env), env=env)

