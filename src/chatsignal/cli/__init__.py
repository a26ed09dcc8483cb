"""
chatsignal CLI - Command line tools for realtime chat notifications.

The console script entry point is chatsignal.cli.main:main.
"""

from __future__ import annotations

from .main import app, create_parser

__all__ = ["app", "create_parser"]
