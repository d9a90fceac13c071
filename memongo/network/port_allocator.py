"""
Port allocation for mongod instances.

Allocation is advisory: another process may grab the port between the probe
and mongod's own bind, which is why the port mongod reports in its log is the
one that gets recorded.
"""

import logging
import socket

from memongo.errors import NoPortAvailableError

logger = logging.getLogger(__name__)


class PortAllocator:
    """Finds free TCP ports on a local interface."""

    def __init__(self, host: str = "127.0.0.1"):
        """
        Initialize PortAllocator.

        Args:
            host: Interface to probe ports on
        """
        self.host = host

    def allocate(self) -> int:
        """
        Ask the OS for a currently unused port.

        Returns:
            A port number that was free at the time of the call

        Raises:
            NoPortAvailableError: If no port could be bound
        """
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
                sock.bind((self.host, 0))
                port = sock.getsockname()[1]
        except OSError as e:
            raise NoPortAvailableError(f"cannot get new port on {self.host}: {e}") from e

        logger.debug(f"Allocated free port {port} on {self.host}")
        return port

    def is_port_free(self, port: int) -> bool:
        """Check whether a specific port can currently be bound."""
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
                sock.bind((self.host, port))
            return True
        except OSError:
            return False
