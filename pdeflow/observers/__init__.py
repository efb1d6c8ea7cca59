"""
Integration observers.

Observers are notified before every step and once after the loop:

    integrator = Integrator(eq, observers=[LoggingObserver(), HistoryObserver()])
"""

from .base import NullObserver, ObserverBase
from .history import HistoryObserver, Snapshot
from .logging_observer import LoggingObserver

__all__ = [
    "HistoryObserver",
    "LoggingObserver",
    "NullObserver",
    "ObserverBase",
    "Snapshot",
]
