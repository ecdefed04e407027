"""Process-wide leaderboard shared by every game session.

All state lives behind one lock. Writes go through to durable storage inside
the same critical section, so readers never see a map that storage has not
been asked to hold.
"""
import logging
import threading
from typing import Dict, Iterable, List, NamedTuple, Tuple

from sqlalchemy.exc import SQLAlchemyError

log = logging.getLogger(__name__)

TOP_N = 3


class RankingLoadError(Exception):
    """Ranking storage could not be read at startup."""


class RankingPersistError(Exception):
    """Ranking storage rejected a write."""


class RankingEntry(NamedTuple):
    username: str
    score: int


class InMemoryRankingRepository:
    """Storage that lives as long as the process. Used by tests."""

    def __init__(self, entries: Iterable[Tuple[str, int]] = ()):
        self.entries: List[Tuple[str, int]] = list(entries)
        self.writes = 0

    def load_all(self) -> List[Tuple[str, int]]:
        return list(self.entries)

    def write_all(self, entries: List[Tuple[str, int]]) -> None:
        self.entries = list(entries)
        self.writes += 1


class SqlRankingRepository:
    """One ``highscore`` row per username. Requires an app context."""

    def load_all(self) -> List[Tuple[str, int]]:
        from .models import Highscore
        try:
            rows = Highscore.query.order_by(Highscore.id).all()
        except SQLAlchemyError as exc:
            raise RankingLoadError(f"highscore table unreadable: {exc}") from exc
        return [(row.username, int(row.score)) for row in rows]

    def write_all(self, entries: List[Tuple[str, int]]) -> None:
        from roletrando import db
        from .models import Highscore
        try:
            existing = {row.username: row for row in Highscore.query.all()}
            for username, score in entries:
                row = existing.get(username)
                if row is None:
                    db.session.add(Highscore(username=username, score=score))
                elif row.score != score:
                    row.score = score
                    db.session.add(row)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise RankingPersistError(str(exc)) from exc


class RankingStore:
    def __init__(self, repository=None):
        self._repository = repository if repository is not None else InMemoryRankingRepository()
        self._scores: Dict[str, int] = {}
        self._lock = threading.Lock()

    def load(self) -> None:
        """Replace the in-memory map with what storage holds.

        Raises:
            RankingLoadError: storage is unreadable or holds invalid rows.
        """
        entries = self._repository.load_all()
        scores: Dict[str, int] = {}
        for entry in entries:
            try:
                username, score = entry
                scores[str(username)] = int(score)
            except (TypeError, ValueError) as exc:
                raise RankingLoadError(f"invalid ranking entry {entry!r}") from exc
        with self._lock:
            self._scores = scores
        log.info("[ranking-load] %d highscores loaded", len(scores))

    def persist(self) -> None:
        with self._lock:
            self._persist_locked()

    def _persist_locked(self) -> None:
        snapshot = list(self._scores.items())
        try:
            self._repository.write_all(snapshot)
        except RankingPersistError as exc:
            # In-memory state stays authoritative for this process.
            log.error("[ranking-persist] write failed, keeping in-memory state: %s", exc)

    def highscore_of(self, username: str) -> int:
        with self._lock:
            return self._scores.get(username, 0)

    def refresh_if_greater(self, username: str, score: int) -> bool:
        """Store ``score`` for ``username`` if it beats the current highscore.

        Returns True when the stored value was replaced.
        """
        with self._lock:
            if score <= self._scores.get(username, 0):
                return False
            self._scores[username] = score
            self._persist_locked()
        log.info("[ranking-update] user=%s highscore=%d", username, score)
        return True

    def top3(self) -> List[RankingEntry]:
        """The three best highscores, descending; ties go to the earliest-registered user."""
        with self._lock:
            items = list(self._scores.items())
        # sorted() is stable, so insertion order decides ties.
        ranked = sorted(items, key=lambda item: item[1], reverse=True)
        return [RankingEntry(username, score) for username, score in ranked[:TOP_N]]
