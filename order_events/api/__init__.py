"""
API module initialization
"""

from . import events, health, operational, publish

__all__ = ["events", "health", "operational", "publish"]
