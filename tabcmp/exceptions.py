"""Exceptions raised by tabcmp."""


class TabcmpError(Exception):
    """Base exception for tabcmp errors."""


class CatalogError(TabcmpError):
    """Raised when table metadata cannot be loaded from a catalog."""


class UnsupportedDiffModeError(TabcmpError, ValueError):
    """Raised when a diff is requested in an unknown rendering mode."""

    def __init__(self, mode: str):
        super().__init__(f"Unsupported diff mode: {mode!r}")
        self.mode = mode


class TextDiffUnavailableError(TabcmpError):
    """Raised when a textual diff is requested without a text differ."""

    def __init__(self, mode: str):
        super().__init__(f"Diff mode {mode!r} needs a text differ, none is configured")
        self.mode = mode
