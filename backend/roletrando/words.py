"""Word/tip supply for game rounds.

The bank is loaded once (from the ``word`` table or a JSON file) and validated
up front; every session then draws from its own shuffled deck.
"""
import json
import random
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError


class WordSupplyError(Exception):
    """The word bank is missing, empty or holds an invalid entry."""


WordTip = Tuple[str, str]


def _validate(entries: Iterable) -> List[WordTip]:
    pairs: List[WordTip] = []
    for idx, entry in enumerate(entries):
        try:
            word, tip = entry
        except (TypeError, ValueError):
            raise WordSupplyError(f"entry {idx} is not a (word, tip) pair: {entry!r}")
        if not isinstance(word, str) or not word.strip():
            raise WordSupplyError(f"entry {idx} has an empty or non-text word: {word!r}")
        if tip is None:
            tip = ''
        if not isinstance(tip, str):
            raise WordSupplyError(f"entry {idx} has a non-text tip: {tip!r}")
        pairs.append((word.strip().upper(), tip.strip()))
    if not pairs:
        raise WordSupplyError("word bank is empty")
    return pairs


class WordSupply:
    """A shuffled deck over a word bank.

    Reshuffles once every pair has been drawn, so a non-empty bank never runs dry.
    """

    def __init__(self, pairs: List[WordTip], rng: Optional[random.Random] = None):
        if not pairs:
            raise WordSupplyError("word bank is empty")
        self._pairs = list(pairs)
        self._rng = rng or random.Random()
        self._deck: List[WordTip] = []

    def next_word_tip(self) -> WordTip:
        if not self._deck:
            self._deck = list(self._pairs)
            self._rng.shuffle(self._deck)
        return self._deck.pop()


class WordBank:
    def __init__(self, pairs: Iterable):
        self._pairs = _validate(pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    @property
    def pairs(self) -> List[WordTip]:
        return list(self._pairs)

    def supply(self, rng: Optional[random.Random] = None) -> WordSupply:
        return WordSupply(self._pairs, rng=rng)

    @classmethod
    def from_database(cls) -> 'WordBank':
        """Load every row of the ``word`` table. Requires an app context."""
        from .models import Word
        try:
            rows = Word.query.order_by(Word.id).all()
        except SQLAlchemyError as exc:
            raise WordSupplyError(f"word table unreadable: {exc}") from exc
        return cls((row.word, row.tip) for row in rows)

    @classmethod
    def from_file(cls, path: str) -> 'WordBank':
        return cls(load_word_file(path))


def load_word_file(path: str) -> List[WordTip]:
    """Read a JSON list of ``{"word": ..., "tip": ...}`` objects."""
    try:
        with open(path, encoding='utf-8') as fh:
            data = json.load(fh)
    except (OSError, ValueError) as exc:
        raise WordSupplyError(f"cannot read word file {path}: {exc}") from exc
    if not isinstance(data, list):
        raise WordSupplyError(f"word file {path} must hold a JSON list")
    pairs = []
    for item in data:
        if not isinstance(item, dict):
            raise WordSupplyError(f"word file {path} has a non-object entry: {item!r}")
        pairs.append((item.get('word'), item.get('tip')))
    return _validate(pairs)
