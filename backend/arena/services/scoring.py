from typing import Callable, Optional

from arena.models import Score, Team

DRAW = 'draw'


class ScoreBoard:
    """Cumulative per-team score. Frozen once the match is over."""

    def __init__(self, is_over: Callable[[], bool] = lambda: False):
        self._is_over = is_over
        self._tallies = {Team.A: 0, Team.B: 0}

    def award(self, team: Team, amount: int) -> Optional[Score]:
        """Add ``amount`` to ``team``.

        Returns the new score, or None if the match is over and nothing
        changed.
        """
        if amount < 0:
            raise ValueError('score awards must be non-negative')
        if self._is_over():
            return None
        self._tallies[team] += amount
        return self.snapshot()

    def snapshot(self) -> Score:
        return Score(team_a=self._tallies[Team.A], team_b=self._tallies[Team.B])


def winner(score: Score) -> str:
    """'A' or 'B' for a strictly higher tally, otherwise 'draw'."""
    if score.team_a > score.team_b:
        return Team.A.value
    if score.team_b > score.team_a:
        return Team.B.value
    return DRAW
