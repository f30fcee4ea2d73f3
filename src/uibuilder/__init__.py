"""
UI Builder
Deterministic UI plan synthesis, validation and replayable version history.
"""

__version__ = "0.1.0"
