"""
Client Connection Manager for memongo

Owns the single pymongo client shared by every database handed out by one
MongoServer. The client is created lazily, exactly once, behind a lock.
"""

import logging
import threading
from typing import Any, Callable, Optional

import pymongo
from pymongo.database import Database
from pymongo.errors import PyMongoError

from memongo.errors import DatabaseConnectionError

logger = logging.getLogger(__name__)


class ClientConnectionManager:
    """
    Lazily connects to a mongod instance.

    Features:
    - One client per manager, created on first use
    - Thread-safe one-time initialization
    - Connectivity verified with a ping before the client is shared
    """

    def __init__(
        self,
        uri: str,
        client_factory: Optional[Callable[..., Any]] = None,
        connect_timeout_ms: int = 5000
    ):
        """
        Initialize ClientConnectionManager.

        Args:
            uri: MongoDB connection URI
            client_factory: Callable building a client from a URI (default: pymongo.MongoClient)
            connect_timeout_ms: Server selection timeout for the client
        """
        self.uri = uri
        self.client_factory = client_factory or pymongo.MongoClient
        self.connect_timeout_ms = connect_timeout_ms

        self._client = None
        self._lock = threading.Lock()

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def get_client(self):
        """
        Get the shared client, connecting on first call.

        Raises:
            DatabaseConnectionError: If the client cannot reach mongod
        """
        if self._client is not None:
            return self._client

        with self._lock:
            if self._client is None:
                self._client = self._connect()
        return self._client

    def _connect(self):
        logger.debug(f"Connecting to {self.uri}")
        client = None
        try:
            client = self.client_factory(self.uri, serverSelectionTimeoutMS=self.connect_timeout_ms)
            client.admin.command('ping')
        except PyMongoError as e:
            if client is not None:
                client.close()
            raise DatabaseConnectionError(f"cannot connect to mongodb server at {self.uri}: {e}") from e

        logger.info(f"Connected to mongodb server at {self.uri}")
        return client

    def get_database(self, name: str) -> Database:
        """Get a database handle on the shared client."""
        return self.get_client()[name]

    def close(self):
        """Close the client, if one was created."""
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None
                logger.info(f"Closed connection to {self.uri}")
