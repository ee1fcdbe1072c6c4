"""Visitor session reconstruction."""

from .reconstructor import (
    Session,
    SessionReconstruction,
    SessionReconstructor,
    SessionStats,
    compute_session_stats,
)

__all__ = [
    "Session",
    "SessionStats",
    "SessionReconstruction",
    "SessionReconstructor",
    "compute_session_stats",
]
