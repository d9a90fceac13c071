"""Data models for memongo."""

from .server_options import ServerOptions

__all__ = ['ServerOptions']
