"""Lobby/match state machine.

`transition` is the closed table: given the current phase, an event and the
guard values observed for it, it returns the next phase and the ordered side
effects. `SessionController` evaluates the guards, runs the effects against
the registry and match state, and emits the outbound events.
"""

import logging
import threading
from enum import Enum
from typing import Callable, NamedTuple, Optional, Tuple

from lightcycle.models import Heading, Winner
from lightcycle.services.match import MatchState
from lightcycle.services.registry import SessionRegistry


class Phase(str, Enum):
    LOBBY = 'lobby'
    ACTIVE = 'active'
    ENDED = 'ended'


class EventKind(str, Enum):
    CONNECT = 'connect'
    DISCONNECT = 'disconnect'
    DIRECTION = 'direction'
    START = 'start'
    RESTART = 'restart'
    TICK = 'tick'


class Action(str, Enum):
    ASSIGN_SLOT = 'assign_slot'
    REJECT_FULL = 'reject_full'
    SEND_SNAPSHOT = 'send_snapshot'
    SET_HEADING = 'set_heading'
    RESET_MATCH = 'reset_match'
    RUN_MATCH = 'run_match'
    HALT_MATCH = 'halt_match'
    FREE_SLOT = 'free_slot'
    NOTIFY_PLAYER_LEFT = 'notify_player_left'
    BROADCAST = 'broadcast'
    BROADCAST_LOBBY = 'broadcast_lobby'


class Guards(NamedTuple):
    has_free_slot: bool = False
    both_occupied: bool = False
    holds_slot: bool = False
    match_over: bool = False


def transition(phase: Phase, event: EventKind, guards: Guards) -> Tuple[Phase, Tuple[Action, ...]]:
    if event is EventKind.CONNECT:
        if guards.has_free_slot:
            return phase, (Action.ASSIGN_SLOT, Action.SEND_SNAPSHOT)
        return phase, (Action.REJECT_FULL,)

    if event is EventKind.DIRECTION:
        if guards.holds_slot:
            return phase, (Action.SET_HEADING,)
        return phase, ()

    if event is EventKind.START:
        if phase is Phase.LOBBY and guards.holds_slot and guards.both_occupied:
            return Phase.ACTIVE, (Action.RESET_MATCH, Action.RUN_MATCH, Action.BROADCAST)
        return phase, ()

    if event is EventKind.TICK:
        if phase is Phase.ACTIVE and guards.match_over:
            return Phase.ENDED, (Action.BROADCAST,)
        return phase, (Action.BROADCAST,)

    if event is EventKind.RESTART:
        if not guards.holds_slot:
            return phase, ()
        return Phase.LOBBY, (Action.RESET_MATCH, Action.BROADCAST_LOBBY)

    if event is EventKind.DISCONNECT:
        if guards.holds_slot:
            return Phase.LOBBY, (Action.FREE_SLOT, Action.HALT_MATCH, Action.NOTIFY_PLAYER_LEFT, Action.BROADCAST)
        return phase, ()

    return phase, ()


Emitter = Callable[..., None]


def _discard(event, payload=None, to=None):
    pass


class SessionController:
    """Single owner of the registry and the match state.

    Every inbound event and every tick runs under one re-entrant lock, so
    mutations and the snapshots they produce are totally ordered.
    """

    def __init__(self, match: MatchState, registry: Optional[SessionRegistry] = None,
                 emit: Optional[Emitter] = None, logger: Optional[logging.Logger] = None):
        self.match = match
        self.registry = registry or SessionRegistry()
        self.emit = emit or _discard
        self.logger = logger or logging.getLogger(__name__)
        self.phase = Phase.LOBBY
        self.lock = threading.RLock()

    def bind(self, emit: Emitter) -> None:
        self.emit = emit

    # ---- inbound events ----

    def connect(self, sid: str):
        self.logger.info(f"[connect] sid={sid}")
        return self.dispatch(EventKind.CONNECT, sid)

    def disconnect(self, sid: str):
        self.logger.info(f"[disconnect] sid={sid}")
        return self.dispatch(EventKind.DISCONNECT, sid)

    def direction(self, sid: str, value):
        heading = Heading.parse(value)
        if heading is None:
            self.logger.debug(f"[ignored] sid={sid} direction={value!r}")
            return ()
        return self.dispatch(EventKind.DIRECTION, sid, heading)

    def start(self, sid: Optional[str] = None):
        return self.dispatch(EventKind.START, sid)

    def restart(self, sid: Optional[str] = None):
        with self.lock:
            self.logger.info(f"[restart] sid={sid} from={self.phase.value}")
            return self.dispatch(EventKind.RESTART, sid)

    def tick(self):
        """Step the match once and broadcast the result."""
        with self.lock:
            self.match.step()
            return self.dispatch(EventKind.TICK)

    # ---- state machine ----

    def guards_for(self, sid: Optional[str]) -> Guards:
        return Guards(
            has_free_slot=self.registry.has_free_slot(),
            both_occupied=self.registry.both_occupied(),
            holds_slot=sid is not None and self.registry.slot_of(sid) is not None,
            match_over=not self.match.running and self.match.winner is not Winner.NONE,
        )

    def dispatch(self, event: EventKind, sid: Optional[str] = None, heading: Optional[Heading] = None):
        with self.lock:
            previous = self.phase
            self.phase, actions = transition(previous, event, self.guards_for(sid))
            if not actions and event is not EventKind.TICK:
                self.logger.debug(f"[ignored] event={event.value} sid={sid} phase={previous.value}")
            self._apply(actions, sid, heading)
            if self.phase is not previous:
                self._log_phase_change(previous, event, sid)
            return actions

    def _apply(self, actions, sid, heading):
        slot = self.registry.slot_of(sid) if sid is not None else None
        for action in actions:
            if action is Action.ASSIGN_SLOT:
                slot = self.registry.assign_slot(sid)
                self.logger.info(f"[assigned] sid={sid} slot={slot.value}")
                self.emit('assigned', slot.value, to=sid)
            elif action is Action.REJECT_FULL:
                self.logger.info(f"[room-full] sid={sid}")
                self.emit('roomFull', to=sid)
            elif action is Action.SEND_SNAPSHOT:
                self.emit('state', self.match.snapshot(), to=sid)
            elif action is Action.SET_HEADING:
                self.match.set_heading(slot, heading)
            elif action is Action.RESET_MATCH:
                self.match.reset()
            elif action is Action.RUN_MATCH:
                self.match.running = True
            elif action is Action.HALT_MATCH:
                self.match.running = False
            elif action is Action.FREE_SLOT:
                slot = self.registry.free_slot(sid)
            elif action is Action.NOTIFY_PLAYER_LEFT:
                self.logger.info(f"[player-left] slot={slot.value}")
                self.emit('playerLeft', slot.value)
            elif action is Action.BROADCAST:
                self.emit('state', self.match.snapshot())
            elif action is Action.BROADCAST_LOBBY:
                self.emit('state', self.match.snapshot(lobby=True))

    def _log_phase_change(self, previous, event, sid):
        if self.phase is Phase.ACTIVE:
            self.logger.info(f"[start] sid={sid} players={self.registry.occupied()}")
        elif self.phase is Phase.ENDED:
            self.logger.info(f"[match-end] winner={self.match.winner.value}")
        elif event is not EventKind.RESTART:
            self.logger.info(f"[lobby] event={event.value} from={previous.value}")

    def view(self) -> dict:
        with self.lock:
            payload = self.match.snapshot()
            payload['phase'] = self.phase.value
            payload['players'] = {slot: sid is not None for slot, sid in self.registry.occupied().items()}
            return payload
