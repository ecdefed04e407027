"""Protocol client for the game server.

Each method sends one request and blocks until the server acknowledges it,
so a client never has more than one request in flight.
"""
import threading
from typing import Any, List

import socketio

from .protocol import Opcode, encode_message, parse_top3
from .ranking import RankingEntry

NAMESPACE = '/ws'


class GameClient:
    def __init__(self, url: str, timeout: float = 10, sio: socketio.Client = None):
        self.url = url
        self.timeout = timeout
        self.username = None
        self._sio = sio or socketio.Client()
        self._lock = threading.Lock()

    def connect(self) -> 'GameClient':
        self._sio.connect(self.url, namespaces=[NAMESPACE])
        return self

    def __enter__(self):
        return self.connect()

    def __exit__(self, exc_type, exc, tb):
        self.disconnect()

    def _call(self, opcode: Opcode, payload: Any = None) -> Any:
        with self._lock:
            return self._sio.call('request', encode_message(opcode, payload),
                                  namespace=NAMESPACE, timeout=self.timeout)

    def _send(self, opcode: Opcode, payload: Any = None) -> None:
        with self._lock:
            self._sio.emit('request', encode_message(opcode, payload), namespace=NAMESPACE)

    def set_username(self, username: str) -> None:
        self._call(Opcode.SET_USERNAME, username)
        self.username = username

    def get_word(self) -> str:
        return self._call(Opcode.GET_WORD)

    def get_tip(self) -> str:
        """The tip for the current word; empty on round 1."""
        return self._call(Opcode.GET_TIP)

    def is_roulette_available(self) -> bool:
        return self._call(Opcode.IS_ROULETTE_AVAILABLE)

    def get_roulette_value(self) -> int:
        return self._call(Opcode.GET_ROULETTE_VALUE)

    def try_character(self, ch: str) -> int:
        return self._call(Opcode.TRY_CHARACTER, ch.upper())

    def get_round_number(self) -> int:
        return self._call(Opcode.GET_ROUND_NUMBER)

    def is_round_finished(self) -> bool:
        return self._call(Opcode.IS_ROUND_FINISHED)

    def has_next_round(self) -> bool:
        return self._call(Opcode.HAS_NEXT_ROUND)

    def get_score(self) -> int:
        return self._call(Opcode.GET_CURRENT_SCORE)

    def get_accumulated_score(self) -> int:
        return self._call(Opcode.ACCUMULATED_SCORE)

    def next_round(self) -> bool:
        return self._call(Opcode.NEXT_ROUND)

    def get_highscore(self) -> int:
        return self._call(Opcode.GET_USER_HIGH_SCORE)

    def get_top3(self) -> List[RankingEntry]:
        """Best three players, descending. See ``parse_top3`` for name limits."""
        return parse_top3(self._call(Opcode.RANKING_TOP3))

    def disconnect(self) -> None:
        if not self._sio.connected:
            return
        self._send(Opcode.TERMINATE)
        self._sio.disconnect()
