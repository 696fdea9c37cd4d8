# config.py
# Letter tables and the validated configuration every scoring call reads from.

import json
import string
from dataclasses import dataclass
from collections.abc import Sequence
from typing import Dict, Optional, Tuple

from errors import ConfigurationError

ALPHABET = string.ascii_lowercase

# Standard Scrabble letter values
LETTER_SCORES = {
    **dict.fromkeys(list("aeilnorstu"), 1),
    **dict.fromkeys(list("dg"), 2),
    **dict.fromkeys(list("bcmp"), 3),
    **dict.fromkeys(list("fhvwy"), 4),
    'k': 5,
    **dict.fromkeys(list("jx"), 8),
    **dict.fromkeys(list("qz"), 10)
}

# Standard English tile distribution (blanks excluded)
TILE_DISTRIBUTION = {
    'a': 9, 'b': 2, 'c': 2, 'd': 4, 'e': 12, 'f': 2, 'g': 3, 'h': 2, 'i': 9,
    'j': 1, 'k': 1, 'l': 4, 'm': 2, 'n': 6, 'o': 8, 'p': 2, 'q': 1, 'r': 6,
    's': 4, 't': 6, 'u': 4, 'v': 2, 'w': 2, 'x': 1, 'y': 2, 'z': 1
}

STANDARD_LETTER_SCORES = tuple(LETTER_SCORES[ch] for ch in ALPHABET)
STANDARD_AVAILABLE_LETTERS = tuple(TILE_DISTRIBUTION[ch] for ch in ALPHABET)

MAX_BLANKS = 2
BINGO_LENGTH = 7
BINGO_BONUS = 50
TOP_GROUPS = 3

# Keys accepted in an options mapping / JSON config file
OPTION_KEYS = ("letterScores", "availableLetters")


def _as_table(name: str, values) -> Tuple[int, ...]:
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        raise ConfigurationError(f"{name} must be a list of {len(ALPHABET)} integers")
    if len(values) != len(ALPHABET):
        raise ConfigurationError(f"{name} must have {len(ALPHABET)} entries, got {len(values)}")
    table = []
    for ch, v in zip(ALPHABET, values):
        # bool is an int subclass but never a meaningful count
        if isinstance(v, bool) or not isinstance(v, int):
            raise ConfigurationError(f"{name}[{ch!r}] must be an integer, got {v!r}")
        if v < 0:
            raise ConfigurationError(f"{name}[{ch!r}] must be non-negative, got {v}")
        table.append(v)
    return tuple(table)


@dataclass(frozen=True)
class ScrabbleConfig:
    """Letter score table and tile supply, both indexed by letter ordinal (a=0).

    Instances are immutable and hashable, so they can be shared between
    threads, pickled to worker processes and used as cache keys.
    """

    letter_scores: Tuple[int, ...] = STANDARD_LETTER_SCORES
    available_letters: Tuple[int, ...] = STANDARD_AVAILABLE_LETTERS

    def __post_init__(self):
        object.__setattr__(self, "letter_scores", _as_table("letterScores", self.letter_scores))
        object.__setattr__(self, "available_letters", _as_table("availableLetters", self.available_letters))

    @classmethod
    def from_options(cls, options: Optional[Dict]) -> "ScrabbleConfig":
        """Build a config from ``{letterScores: [...], availableLetters: [...]}``.

        Missing keys fall back to the standard tables; unknown keys are rejected.
        """
        if options is None:
            return cls()
        if not isinstance(options, dict):
            raise ConfigurationError("Configuration must be a JSON object")
        unknown = sorted(set(options) - set(OPTION_KEYS))
        if unknown:
            raise ConfigurationError(f"Unrecognized configuration option(s): {', '.join(unknown)}")
        return cls(
            letter_scores=options.get("letterScores", STANDARD_LETTER_SCORES),
            available_letters=options.get("availableLetters", STANDARD_AVAILABLE_LETTERS),
        )

    def to_options(self) -> Dict:
        return {
            "letterScores": list(self.letter_scores),
            "availableLetters": list(self.available_letters),
        }

    def score_of(self, ch: str) -> int:
        return self.letter_scores[ord(ch) - ord('a')]

    def supply_of(self, ch: str) -> int:
        return self.available_letters[ord(ch) - ord('a')]


def default_config() -> ScrabbleConfig:
    return ScrabbleConfig()


def load_config(path) -> ScrabbleConfig:
    """Read a JSON options file; see ``ScrabbleConfig.from_options``."""
    with open(path, 'r') as f:
        try:
            options = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Could not parse config file {path}: {e}") from e
    return ScrabbleConfig.from_options(options)
