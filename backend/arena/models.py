from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional


class Team(str, Enum):
    A = 'A'
    B = 'B'


class RejectReason(str, Enum):
    STALE_EPOCH = 'stale_epoch'
    MATCH_OVER = 'match_over'


@dataclass
class Player:
    id: str
    x: float
    y: float
    rotation: float
    team: Team

    def to_dict(self):
        return {
            'id': self.id,
            'x': self.x,
            'y': self.y,
            'rotation': self.rotation,
            'team': self.team.value,
        }


@dataclass(frozen=True)
class Collectible:
    x: float
    y: float
    epoch: int

    def to_dict(self):
        return {'position': {'x': self.x, 'y': self.y}, 'epoch': self.epoch}


@dataclass(frozen=True)
class Score:
    team_a: int = 0
    team_b: int = 0

    def to_dict(self):
        return {'teamA': self.team_a, 'teamB': self.team_b}


@dataclass(frozen=True)
class ClockState:
    remaining: int
    paused: bool
    over: bool

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class ClaimOutcome:
    """Result of a collectible claim.

    ``collectible`` is the freshly spawned pickup when the claim was accepted.
    """
    accepted: bool
    reason: Optional[RejectReason] = None
    collectible: Optional[Collectible] = None

    @classmethod
    def accept(cls, collectible: Collectible) -> 'ClaimOutcome':
        return cls(accepted=True, collectible=collectible)

    @classmethod
    def reject(cls, reason: RejectReason) -> 'ClaimOutcome':
        return cls(accepted=False, reason=reason)


@dataclass(frozen=True)
class Bounds:
    min_x: int = 50
    max_x: int = 750
    min_y: int = 50
    max_y: int = 550

    def contains(self, x, y) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def random_point(self, rng):
        return rng.randint(self.min_x, self.max_x), rng.randint(self.min_y, self.max_y)
