"""
Pipeline Exceptions

LoadError aborts a run; MalformedAddress is raised per row and contained by
the address parser.
"""
from typing import Any, Optional


class LoadError(Exception):
    """Raised when the input dataset cannot be read into housing records."""

    def __init__(self, source: Any, reason: str):
        super().__init__(f"Cannot load {source}: {reason}")
        self.source = str(source)
        self.reason = reason


class MalformedAddress(ValueError):
    """Raised when a PropertyAddress cannot be split into its components."""

    def __init__(self, address: Optional[str], reason: str):
        super().__init__(f"Malformed address {address!r}: {reason}")
        self.address = address
        self.reason = reason
