"""
Error types for memongo.

Every failure raised by the server lifecycle derives from ``MemongoError`` so
test fixtures can tear down on a single except clause, while the concrete
class still identifies the cause.
"""

from typing import Optional


class MemongoError(Exception):
    """Base error for all memongo exceptions."""
    pass


class ExecutableNotFoundError(MemongoError):
    """Raised when the mongod executable does not exist at the resolved path."""

    def __init__(self, path: Optional[str]):
        self.path = path
        super().__init__(f"mongod binary does not exist - {path}")


class WorkingDirectoryError(MemongoError):
    """Raised when the mongod data directory cannot be created."""
    pass


class NoPortAvailableError(MemongoError):
    """Raised when no free TCP port can be found for mongod."""
    pass


class ProcessStartError(MemongoError):
    """Raised when the OS refuses to launch the mongod process."""
    pass


class PortParseError(MemongoError):
    """Raised when the readiness line reports a port that is not a number."""

    def __init__(self, line: str):
        self.line = line
        super().__init__(f"cannot parse port from mongod log line: {line}")


class StartupFailedError(MemongoError):
    """
    Raised when mongod reports a startup failure in its log output.

    Attributes:
        line: The log line that triggered the failure, if any
    """

    default_message = "mongod failed to start"

    def __init__(self, line: Optional[str] = None):
        self.line = line
        message = self.default_message
        if line:
            message = f"{message}: {line}"
        super().__init__(message)


class AddressInUseError(StartupFailedError):
    """Raised when mongod cannot bind because the address is already in use."""

    default_message = "mongod address already in use"


class AlreadyRunningError(StartupFailedError):
    """Raised when another mongod already owns the data directory."""

    default_message = "mongod already running"


class PermissionDeniedError(StartupFailedError):
    """Raised when mongod lacks permission on its port or data directory."""

    default_message = "mongod permission denied"


class DataDirectoryMissingError(StartupFailedError):
    """Raised when mongod cannot find its data directory."""

    default_message = "mongod data directory not found"


class UnexpectedShutdownError(StartupFailedError):
    """Raised when mongod starts shutting down before accepting connections."""

    default_message = "mongod shut down during startup"


class ExitedBeforeReadyError(StartupFailedError):
    """Raised when mongod closes its output before reporting readiness."""

    default_message = "mongod exited before startup completed"


class StartupTimeoutError(StartupFailedError):
    """Raised when mongod does not become ready within the startup timeout."""

    default_message = "mongod did not become ready in time"


class DatabaseConnectionError(MemongoError):
    """Raised when a client connection to mongod cannot be established."""
    pass


class RandomSourceError(MemongoError):
    """Raised when the system entropy source is unavailable."""
    pass


class NameGenerationError(MemongoError):
    """Raised when a database name cannot be generated."""
    pass


class ServerStateError(MemongoError):
    """Raised when a server operation is invalid for its lifecycle state."""
    pass
