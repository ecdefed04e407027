"""Components shared by every session of one app."""
import threading
from typing import Optional

from flask import current_app

from .engine import RoundEngine
from .ranking import RankingStore, SqlRankingRepository
from .session import GameSession
from .words import WordBank, WordSupplyError

EXTENSION_KEY = 'roletrando'


class GameServices:
    def __init__(self, ranking: RankingStore, words: Optional[WordBank] = None, total_rounds: int = 4):
        self.ranking = ranking
        self.words = words
        self.total_rounds = total_rounds
        self._loaded = False
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self) -> None:
        """Hydrate the ranking and word bank once. Needs an app context.

        Raises:
            RankingLoadError: ranking storage unreadable.
            WordSupplyError: no usable words.
        """
        with self._lock:
            if self._loaded:
                return
            self.ranking.load()
            if self.words is None:
                self.words = WordBank.from_database()
            self._loaded = True

    def new_session(self, rng=None) -> GameSession:
        if not self._loaded:
            self.load()
        if self.words is None:
            raise WordSupplyError("word bank not loaded")
        engine = RoundEngine(self.words.supply(), total_rounds=self.total_rounds, rng=rng)
        return GameSession(engine, self.ranking)


def init_services(app, ranking: Optional[RankingStore] = None, words: Optional[WordBank] = None) -> GameServices:
    services = GameServices(
        ranking if ranking is not None else RankingStore(SqlRankingRepository()),
        words,
        total_rounds=int(app.config.get('TOTAL_ROUNDS', 4)),
    )
    app.extensions[EXTENSION_KEY] = services
    return services


def get_services() -> GameServices:
    return current_app.extensions[EXTENSION_KEY]
