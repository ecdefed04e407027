import logging
import threading
from enum import Enum
from typing import Any, Optional

from .engine import RoundEngine
from .protocol import Opcode, Query, Request, SetUsername, TryCharacter, format_top3
from .ranking import RankingStore

log = logging.getLogger(__name__)


class SessionState(Enum):
    AWAITING_NAME = 'awaiting_name'
    PLAYING = 'playing'
    TERMINATED = 'terminated'


class SessionClosed(Exception):
    """A request reached a session that has already terminated."""


class GameSession:
    """Drives one connection's game: one request in, one value out.

    The engine belongs to this session alone; the ranking store is shared
    with every other session and does its own locking.
    """

    def __init__(self, engine: RoundEngine, ranking: RankingStore):
        self.engine = engine
        self.ranking = ranking
        self.username: Optional[str] = None
        self.state = SessionState.AWAITING_NAME
        # Serializes requests in case a transport delivers them concurrently.
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self.state is SessionState.TERMINATED

    def close(self) -> None:
        self.state = SessionState.TERMINATED

    def handle(self, request: Request) -> Any:
        with self._lock:
            if self.closed:
                raise SessionClosed(f"session for {self.username!r} is closed")
            if isinstance(request, SetUsername):
                self.username = request.username
                self.state = SessionState.PLAYING
                return None
            if isinstance(request, TryCharacter):
                return self.engine.try_character(request.character)
            if isinstance(request, Query):
                return self._query(request.opcode)
            raise TypeError(f"unsupported request {request!r}")

    def _query(self, opcode: Opcode) -> Any:
        engine = self.engine
        if opcode is Opcode.GET_WORD:
            return engine.current_word()
        if opcode is Opcode.GET_TIP:
            return engine.tip()
        if opcode is Opcode.IS_ROULETTE_AVAILABLE:
            return engine.is_roulette_available()
        if opcode is Opcode.GET_ROULETTE_VALUE:
            return engine.spin_roulette()
        if opcode is Opcode.GET_ROUND_NUMBER:
            return engine.round_number()
        if opcode is Opcode.IS_ROUND_FINISHED:
            return engine.is_round_finished()
        if opcode is Opcode.HAS_NEXT_ROUND:
            return engine.has_next_round()
        if opcode is Opcode.GET_CURRENT_SCORE:
            return engine.round_score()
        if opcode is Opcode.ACCUMULATED_SCORE:
            return engine.accumulated_score()
        if opcode is Opcode.NEXT_ROUND:
            return self._next_round()
        if opcode is Opcode.GET_USER_HIGH_SCORE:
            return self.ranking.highscore_of(self.username) if self.username is not None else 0
        if opcode is Opcode.RANKING_TOP3:
            return format_top3(self.ranking.top3())
        if opcode is Opcode.TERMINATE:
            self.close()
            return None
        raise TypeError(f"{opcode.name} is not a query")

    def _next_round(self) -> bool:
        advanced = self.engine.next_round()
        if advanced:
            if self.username is None:
                log.warning("[next-round] no username set, highscore not recorded")
            else:
                self.ranking.refresh_if_greater(self.username, self.engine.accumulated_score())
        return advanced
