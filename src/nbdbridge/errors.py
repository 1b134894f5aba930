"""Exception hierarchy for nbdbridge."""


class NbdBridgeError(RuntimeError):
    """Base class for fatal trampoline errors."""


class ConfigError(NbdBridgeError):
    """Installation settings could not be loaded or validated."""


class TranslationError(NbdBridgeError, ValueError):
    """A command-line token could not be translated."""

    def __init__(self, message: str, token: str | None = None) -> None:
        super().__init__(message)
        self.token = token


class DeviceLookupError(NbdBridgeError):
    """The target device could not be stat'ed."""


class InsufficientPrivilegeError(NbdBridgeError):
    """The socket directory is not accessible to the current user."""


class SpawnError(NbdBridgeError):
    """A child process could not be forked or executed."""


class RegistryFullError(SpawnError):
    """The child registry is at capacity."""


class ReadinessTimeoutError(NbdBridgeError):
    """The server never created its socket file."""
