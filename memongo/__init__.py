"""
memongo

Throwaway, in-memory MongoDB servers for automated tests.
"""

from memongo.errors import MemongoError
from memongo.models.server_options import ServerOptions
from memongo.testing.mongo_server import MongoServer, ServerState

__version__ = "0.1.0"

__all__ = ['MongoServer', 'ServerState', 'ServerOptions', 'MemongoError']
