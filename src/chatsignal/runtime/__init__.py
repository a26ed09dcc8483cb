"""
Runtime module - notification lifecycle.
"""

from __future__ import annotations

from .lifecycle import LifecycleState, NotificationLifecycle

__all__ = [
    "LifecycleState",
    "NotificationLifecycle",
]
