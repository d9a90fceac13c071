"""Network utilities for memongo."""

from .port_allocator import PortAllocator

__all__ = ['PortAllocator']
