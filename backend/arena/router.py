"""Session router: binds inbound Socket.IO messages to the component that
owns the affected state and fans the result out to the right sessions.

Every handler runs under one coarse lock, and all state changes caused by a
message are applied before any of its outbound messages are emitted.
"""
import logging
import threading
from enum import Enum
from typing import Dict, Optional

from arena.errors import require_int, require_number, require_text
from arena.models import Bounds
from arena.services import CollectibleManager, MatchClock, PlayerRegistry, ScoreBoard, winner


class Scope(Enum):
    ALL = 'all'
    ALL_EXCEPT_ORIGIN = 'all_except_origin'
    ORIGIN_ONLY = 'origin_only'


class SocketIOFanout:
    """Delivers one outbound event to a broadcast scope over Socket.IO."""

    def __init__(self, socketio, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def send(self, event: str, payload, scope: Scope, origin: Optional[str] = None) -> None:
        if scope is Scope.ALL:
            self.socketio.emit(event, payload, namespace=self.namespace)
        elif scope is Scope.ALL_EXCEPT_ORIGIN:
            self.socketio.emit(event, payload, namespace=self.namespace, skip_sid=origin)
        else:
            self.socketio.emit(event, payload, to=origin, namespace=self.namespace)


class SessionRouter:

    def __init__(self, fanout, players: PlayerRegistry, collectible: CollectibleManager,
                 scores: ScoreBoard, clock: Optional[MatchClock] = None,
                 score_increment: int = 10, push_clock: bool = False,
                 chat_max_length: int = 280, logger=None):
        self.fanout = fanout
        self.players = players
        self.collectible = collectible
        self.scores = scores
        self.clock = clock
        self.score_increment = score_increment
        self.push_clock = push_clock
        self.chat_max_length = chat_max_length
        self.logger = logger or logging.getLogger(__name__)
        self.lock = threading.RLock()
        # session id -> player id
        self._sessions: Dict[str, str] = {}

    def is_over(self) -> bool:
        return self.clock is not None and self.clock.is_over()

    def player_for(self, sid: str) -> Optional[str]:
        return self._sessions.get(sid)

    # ---- inbound messages ----

    def connect(self, sid: str) -> None:
        with self.lock:
            player = self.players.register()
            self._sessions[sid] = player.id
            roster = {pid: p.to_dict() for pid, p in self.players.snapshot().items()}
            self.logger.info(f"[connect] sid={sid} player={player.id} team={player.team.value} online={len(roster)}")

            self.fanout.send('current-players', {'self_id': player.id, 'players': roster}, Scope.ORIGIN_ONLY, sid)
            self.fanout.send('collectible-spawned', self.collectible.current_location().to_dict(), Scope.ORIGIN_ONLY, sid)
            self.fanout.send('score-updated', self.scores.snapshot().to_dict(), Scope.ORIGIN_ONLY, sid)
            if self.clock is not None:
                self.fanout.send('clock-state', self._clock_payload(), Scope.ORIGIN_ONLY, sid)
            self.fanout.send('player-joined', player.to_dict(), Scope.ALL_EXCEPT_ORIGIN, sid)

    def disconnect(self, sid: str) -> None:
        with self.lock:
            player_id = self._sessions.pop(sid, None)
            if player_id is None or not self.players.remove(player_id):
                self.logger.debug(f"[disconnect-unknown] sid={sid}")
                return
            self.logger.info(f"[disconnect] sid={sid} player={player_id} online={len(self.players)}")
            self.fanout.send('player-left', {'id': player_id}, Scope.ALL_EXCEPT_ORIGIN, sid)

    def move(self, sid: str, data) -> None:
        x = require_number('player-moved', data, 'x')
        y = require_number('player-moved', data, 'y')
        rotation = require_number('player-moved', data, 'rotation')
        with self.lock:
            if self.is_over():
                self.logger.debug(f"[drop] event=player-moved sid={sid} reason=match_over")
                return
            player_id = self._sessions.get(sid)
            moved = self.players.update(player_id, x, y, rotation) if player_id else None
            if moved is None:
                self.logger.debug(f"[stale-ref] event=player-moved sid={sid}")
                return
            self.fanout.send('player-moved', {'id': moved.id, 'x': moved.x, 'y': moved.y, 'rotation': moved.rotation},
                             Scope.ALL_EXCEPT_ORIGIN, sid)

    def claim(self, sid: str, data) -> bool:
        """Arbitrate a collectible claim. Returns True if it was accepted."""
        epoch = require_int('collectible-claim', data, 'epoch')
        with self.lock:
            player = self.players.get(self._sessions.get(sid, ''))
            if player is None:
                self.logger.debug(f"[stale-ref] event=collectible-claim sid={sid}")
                return False
            outcome = self.collectible.claim(player.team, epoch)
            if not outcome.accepted:
                self.logger.debug(f"[claim-rejected] player={player.id} epoch={epoch} reason={outcome.reason.value}")
                return False
            score = self.scores.award(player.team, self.score_increment)
            self.logger.info(
                f"[claim-accepted] player={player.id} team={player.team.value} epoch={epoch} next_epoch={outcome.collectible.epoch}"
            )
            self.fanout.send('collectible-spawned', outcome.collectible.to_dict(), Scope.ALL)
            self.fanout.send('score-updated', score.to_dict(), Scope.ALL)
            return True

    def chat(self, sid: str, data) -> None:
        text = require_text('chat', data, 'text').strip()[:self.chat_max_length]
        with self.lock:
            player = self.players.get(self._sessions.get(sid, ''))
            if player is None:
                self.logger.debug(f"[stale-ref] event=chat sid={sid}")
                return
            self.fanout.send('chat-line', {'team': player.team.value, 'text': text}, Scope.ALL)

    def toggle_pause(self, sid: str) -> None:
        with self.lock:
            if self.clock is None:
                self.logger.debug(f"[drop] event=pause-toggle sid={sid} reason=untimed")
                return
            if not self.clock.toggle():
                self.logger.debug(f"[drop] event=pause-toggle sid={sid} reason=match_over")
                return
            self.logger.info(f"[clock-{self.clock.state}] sid={sid} remaining={self.clock.remaining}")
            if self.push_clock:
                self.fanout.send('clock-state', self._clock_payload(), Scope.ALL)

    def match_status(self, sid: str) -> None:
        with self.lock:
            if self.is_over():
                self.fanout.send('match-over', self.final_result(), Scope.ORIGIN_ONLY, sid)
            elif self.clock is not None:
                self.fanout.send('clock-state', self._clock_payload(), Scope.ORIGIN_ONLY, sid)

    # ---- scheduler ----

    def tick(self) -> bool:
        """Advance the match clock one interval. Returns False once over."""
        with self.lock:
            if self.clock is None:
                return False
            changed = self.clock.tick()
            if self.clock.is_over():
                score = self.scores.snapshot()
                self.logger.info(f"[clock-over] teamA={score.team_a} teamB={score.team_b} winner={winner(score)}")
            if changed and self.push_clock:
                self.fanout.send('clock-state', self._clock_payload(), Scope.ALL)
            return not self.clock.is_over()

    # ---- read-only views ----

    def _clock_payload(self):
        state = self.clock.snapshot()
        return {'remaining': state.remaining, 'paused': state.paused}

    def final_result(self):
        score = self.scores.snapshot()
        payload = score.to_dict()
        payload['winner'] = winner(score)
        return payload

    def state(self):
        with self.lock:
            score = self.scores.snapshot()
            return {
                'players': {pid: p.to_dict() for pid, p in self.players.snapshot().items()},
                'collectible': self.collectible.current_location().to_dict(),
                'score': score.to_dict(),
                'clock': self.clock.snapshot().to_dict() if self.clock is not None else None,
                'winner': winner(score) if self.is_over() else None,
            }


def build_router(config, fanout, logger=None, rng=None) -> SessionRouter:
    """Composition root: construct the state components and hand them to a
    router. ``config`` is any mapping with the arena settings (Flask's
    ``app.config`` in practice)."""
    bounds = Bounds(
        min_x=int(config.get('ARENA_MIN_X', 50)),
        max_x=int(config.get('ARENA_MAX_X', 750)),
        min_y=int(config.get('ARENA_MIN_Y', 50)),
        max_y=int(config.get('ARENA_MAX_Y', 550)),
    )
    duration = int(config.get('MATCH_DURATION_SEC', 120))
    clock = MatchClock(duration) if duration > 0 else None
    is_over = clock.is_over if clock is not None else (lambda: False)
    return SessionRouter(
        fanout,
        players=PlayerRegistry(bounds, team_policy=config.get('TEAM_POLICY', 'random'), rng=rng),
        collectible=CollectibleManager(bounds, rng=rng, is_over=is_over),
        scores=ScoreBoard(is_over=is_over),
        clock=clock,
        score_increment=int(config.get('SCORE_INCREMENT', 10)),
        push_clock=config.get('CLOCK_BROADCAST', 'pull') == 'push',
        chat_max_length=int(config.get('CHAT_MAX_LENGTH', 280)),
        logger=logger,
    )
