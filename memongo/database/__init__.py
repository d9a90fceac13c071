"""
Database package for memongo.

Provides the lazily created client connection shared by a server's databases.
"""

from .connection_manager import ClientConnectionManager

__all__ = ['ClientConnectionManager']
