import itertools
import random
import uuid
from dataclasses import replace
from typing import Dict, Optional

from arena.models import Bounds, Player, Team

TEAM_POLICIES = ('random', 'alternate')


class PlayerRegistry:
    """Connected players and their last reported transform, keyed by id."""

    def __init__(self, bounds: Bounds = None, team_policy: str = 'random', rng: Optional[random.Random] = None):
        if team_policy not in TEAM_POLICIES:
            raise ValueError(f"unknown team policy {team_policy!r}")
        self.bounds = bounds or Bounds()
        self.team_policy = team_policy
        self._rng = rng or random.Random()
        self._players: Dict[str, Player] = {}
        self._alternate = itertools.cycle((Team.A, Team.B))

    def _next_team(self) -> Team:
        if self.team_policy == 'alternate':
            return next(self._alternate)
        return self._rng.choice((Team.A, Team.B))

    def register(self) -> Player:
        player_id = uuid.uuid4().hex
        x, y = self.bounds.random_point(self._rng)
        player = Player(id=player_id, x=x, y=y, rotation=0, team=self._next_team())
        self._players[player_id] = player
        return replace(player)

    def get(self, player_id: str) -> Optional[Player]:
        player = self._players.get(player_id)
        return replace(player) if player else None

    def update(self, player_id: str, x, y, rotation) -> Optional[Player]:
        """Overwrite a player's transform.

        Returns the updated player, or None when the id is no longer
        registered (a movement that raced a disconnect).
        """
        player = self._players.get(player_id)
        if player is None:
            return None
        player.x = x
        player.y = y
        player.rotation = rotation
        return replace(player)

    def remove(self, player_id: str) -> bool:
        return self._players.pop(player_id, None) is not None

    def snapshot(self) -> Dict[str, Player]:
        return {pid: replace(p) for pid, p in self._players.items()}

    def __len__(self):
        return len(self._players)

    def __contains__(self, player_id):
        return player_id in self._players
