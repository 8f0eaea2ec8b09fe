"""
Exception hierarchy for smbclient-bridge
"""

from typing import Optional


class SmbBridgeError(Exception):
    """Base exception for all bridge failures."""

    pass


class ConfigurationError(SmbBridgeError):
    """Raised for terminal configuration problems; no process is started."""

    pass


class UnsupportedOperationError(ConfigurationError):
    def __init__(self, operation):
        super().__init__(f"Unsupported operation: {operation}")
        self.operation = operation


class MissingBinaryPropertyError(ConfigurationError):
    def __init__(self, prop: str, index: int):
        super().__init__(f'Binary property "{prop}" not found on item {index}')
        self.prop = prop
        self.index = index


class InvalidPathError(ConfigurationError):
    """Raised when a path cannot be quoted inside an smbclient command."""

    pass


class SmbCommandError(SmbBridgeError):
    """A single smbclient invocation failed.

    ``command`` and ``diagnostic`` are already redacted.
    """

    def __init__(
            self,
            message: str,
            command: str = "",
            diagnostic: str = "",
            returncode: Optional[int] = None,
            hint: Optional[str] = None,
    ):
        super().__init__(message)
        self.command = command
        self.diagnostic = diagnostic
        self.returncode = returncode
        self.hint = hint


class OutputLimitExceededError(SmbCommandError):
    pass


class SmbConnectionError(SmbCommandError):
    pass


class OperationFailedError(SmbBridgeError):
    """A batch was aborted because one of its items failed."""

    pass
