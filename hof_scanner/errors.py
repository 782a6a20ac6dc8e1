"""Exception types raised by the scanner."""


class ScannerError(RuntimeError):
    """Base class for scanner failures that abort a run."""


class RegistryLoadError(ScannerError):
    """Raised when the compromised package list cannot be read."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load compromised list from {source}: {reason}")
