from collections import Counter
from itertools import chain

from config import MAX_BLANKS, BINGO_LENGTH, BINGO_BONUS
from errors import InvalidInputError


def normalize_word(word):
    return word.strip().lower()


def validate_word(word):
    """Raise ``InvalidInputError`` unless ``word`` is made only of a-z."""
    for i, ch in enumerate(word):
        if not ('a' <= ch <= 'z'):
            raise InvalidInputError(word, i)
    return word


def letter_histogram(word):
    """Count occurrences of each letter in ``word``."""
    return Counter(word)


def blanks_needed(histogram, config):
    """Number of tiles the supply cannot cover and a blank has to stand in for."""
    return sum(max(0, count - config.supply_of(ch)) for ch, count in histogram.items())


def is_playable(histogram, config):
    return blanks_needed(histogram, config) <= MAX_BLANKS


def base_score(histogram, config):
    # Letters played from a blank are worth nothing
    return sum(
        config.score_of(ch) * min(count, config.supply_of(ch))
        for ch, count in histogram.items()
    )


def double_letter_bonus(word, config):
    """Best letter value among the first three letters and the rest of the word.

    Stands in for placing the word so its most valuable letter lands on a
    double-letter square. Empty words get no bonus.
    """
    first3 = word[:3]
    last3 = word[3:]
    return max((config.score_of(ch) for ch in chain(first3, last3)), default=0)


def placement_score(word, config, histogram=None):
    """Score of ``word`` once placed on the board.

    Base score and double-letter bonus are each counted twice, plus the
    bingo bonus for seven-letter words. Pass the histogram already used for
    the blank check to avoid counting letters again.
    """
    if histogram is None:
        histogram = letter_histogram(word)
    bingo = BINGO_BONUS if len(word) == BINGO_LENGTH else 0
    return (
        base_score(histogram, config)
        + base_score(histogram, config)
        + double_letter_bonus(word, config)
        + double_letter_bonus(word, config)
        + bingo
    )
