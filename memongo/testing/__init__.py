"""
memongo testing infrastructure

Throwaway mongod instances with freshly named databases for test suites.
"""

from .mongo_server import MongoServer, ServerState

__all__ = ['MongoServer', 'ServerState']
