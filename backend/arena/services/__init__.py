"""Arena domain services: players, collectible arbitration, scoring and the
match clock.

These components hold in-memory state only and know nothing about Socket.IO;
the session router owns them and decides who hears about each change.
"""

from .players import PlayerRegistry
from .collectible import CollectibleManager
from .scoring import ScoreBoard, winner
from .clock import MatchClock, ClockTicker

__all__ = [
    'PlayerRegistry',
    'CollectibleManager',
    'ScoreBoard',
    'winner',
    'MatchClock',
    'ClockTicker',
]
