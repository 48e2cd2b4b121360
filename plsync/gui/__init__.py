"""GUI module for plsync.

Provides a Qt-based playlist editor on top of the sync coordinator.
"""

__all__ = []
