"""Exception markers for propsync."""

from __future__ import annotations


class NeverRaise(RuntimeError):
    """Sentinel exception for code paths that should be unreachable.

    Raising this signals a broken internal invariant (for example an edit
    offset outside the snapshot it was computed against), never a user-level
    condition. User-level conditions are reported as no-op outcomes.
    """

    def __init__(self, message: str, *, env: dict[str, object] | None = None):
        super().__init__(message)
        self.reason = message
        self.env = dict(env or {})



class NeverThrown(NeverRaise):
    """Alias for NeverRaise used by the explicit never() marker."""
