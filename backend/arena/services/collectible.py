import random
from typing import Callable, Optional

from arena.models import Bounds, ClaimOutcome, Collectible, RejectReason, Team


class CollectibleManager:
    """Owns the single shared pickup and arbitrates claims on it.

    Every spawn carries an epoch. A claim wins only if it names the current
    epoch; winning respawns the pickup under the next epoch, so every other
    claim made against the old spawn is stale. Callers must serialize calls
    to ``claim``.
    """

    def __init__(self, bounds: Bounds = None, rng: Optional[random.Random] = None,
                 is_over: Callable[[], bool] = lambda: False):
        self.bounds = bounds or Bounds()
        self._rng = rng or random.Random()
        self._is_over = is_over
        self._current = self._spawn(0)

    def _spawn(self, epoch: int) -> Collectible:
        x, y = self.bounds.random_point(self._rng)
        return Collectible(x=x, y=y, epoch=epoch)

    def current_location(self) -> Collectible:
        return self._current

    @property
    def epoch(self) -> int:
        return self._current.epoch

    def claim(self, team: Team, epoch: int) -> ClaimOutcome:
        if self._is_over():
            return ClaimOutcome.reject(RejectReason.MATCH_OVER)
        if epoch != self._current.epoch:
            return ClaimOutcome.reject(RejectReason.STALE_EPOCH)
        self._current = self._spawn(self._current.epoch + 1)
        return ClaimOutcome.accept(self._current)
