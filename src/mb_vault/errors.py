"""Errors raised while clipping an entry attribute."""


class ClipError(Exception):
    """Failure of the clip command, carrying a machine-readable code."""

    def __init__(self, code: str, message: str) -> None:
        """Initialize with a machine-readable code and a human-readable message.

        Args:
            code: Machine-readable error code (e.g. "entry_not_found").
            message: Human-readable error description.

        """
        super().__init__(message)
        self.code = code


class ClipboardUnavailable(ClipError):
    """No clipboard program accepted the value."""

    def __init__(self, message: str) -> None:
        super().__init__("clipboard_unavailable", message)
