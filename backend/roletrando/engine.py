"""Round engine: one player's word, mask, roulette and score.

An engine is owned by exactly one session and is never shared between
threads, so it carries no locking of its own.
"""
import random
from typing import List, Optional

from .words import WordSupplyError

TOTAL_ROUNDS = 4
MASK_CHAR = '-'
# 100 appears twice and 0 is the bust value; both are deliberate weighting.
ROULETTE_VALUES = (100, 200, 300, 400, 500, 600, 700, 800, 900, 100, 0)


class RoundEngine:
    def __init__(self, supply, total_rounds: int = TOTAL_ROUNDS, rng: Optional[random.Random] = None):
        """Start a game at round 1 with a fresh word.

        Args:
            supply: object exposing ``next_word_tip() -> (word, tip)``.
            total_rounds: number of playable rounds.
            rng: object exposing ``choice(seq)``, used for roulette draws.

        Raises:
            WordSupplyError: the supply could not produce a usable word.
        """
        self._supply = supply
        self._rng = rng or random.Random()
        self._total_rounds = total_rounds
        self._word = ''
        self._tip = ''
        self._revealed: List[str] = []
        self._roulette_value = 0
        self._roulette_available = True
        self._round_number = 1
        self._round_score = 0
        self._accumulated_score = 0
        self._load_word()

    def _load_word(self) -> None:
        try:
            word, tip = self._supply.next_word_tip()
        except WordSupplyError:
            raise
        except (StopIteration, LookupError, TypeError, ValueError) as exc:
            raise WordSupplyError(f"word supply failed: {exc!r}") from exc
        if not isinstance(word, str) or not word:
            raise WordSupplyError(f"word supply returned an invalid word: {word!r}")
        self._word = word
        self._tip = tip or ''
        # The last letter is never masked.
        self._revealed = [MASK_CHAR] * (len(word) - 1)

    def _refresh(self) -> bool:
        if self.is_round_finished():
            self._load_word()
            return True
        return False

    @property
    def total_rounds(self) -> int:
        return self._total_rounds

    def current_word(self) -> str:
        """The word as the player sees it, placeholders for hidden letters."""
        return ''.join(self._revealed)

    def tip(self) -> str:
        """The current tip; round 1 plays without one."""
        return '' if self._round_number == 1 else self._tip

    def is_roulette_available(self) -> bool:
        return self._roulette_available

    def spin_roulette(self) -> int:
        """Draw a new roulette value, or recall the last one when no spin is due.

        A bust (0) wipes the round score; the accumulated score is untouched.
        """
        if self._roulette_available:
            self._roulette_value = self._rng.choice(ROULETTE_VALUES)
            if self._roulette_value == 0:
                self._round_score = 0
        return self._roulette_value

    def try_character(self, ch: str) -> int:
        """Reveal every occurrence of ``ch`` and score it at the roulette value.

        Not a pure query: when the round is already finished this first loads
        a new word and mask (without advancing the round counter), then guesses
        against that word.

        Returns:
            The number of occurrences of ``ch`` in the word.
        """
        self._refresh()
        self._roulette_available = True

        occurrences = 0
        for idx, letter in enumerate(self._word):
            if letter == ch:
                occurrences += 1
                if idx < len(self._revealed):
                    self._revealed[idx] = ch

        self._round_score += occurrences * self._roulette_value
        return occurrences

    def is_round_finished(self) -> bool:
        return MASK_CHAR not in self._revealed

    def has_next_round(self) -> bool:
        return self._round_number <= self._total_rounds

    def next_round(self) -> bool:
        """Bank the round score and move to a new word, if the round is done."""
        if self.is_round_finished() and self.has_next_round():
            self._refresh()
            self._round_number += 1
            self._accumulated_score += self._round_score
            self._round_score = 0
            return True
        return False

    def round_score(self) -> int:
        return self._round_score

    def accumulated_score(self) -> int:
        return self._accumulated_score

    def round_number(self) -> int:
        return self._round_number
