"""propsync package root."""

from propsync.exceptions import NeverRaise, NeverThrown
from propsync.invariants import never

__all__ = ["__version__", "NeverRaise", "NeverThrown", "never"]

__version__ = "0.1.0"
