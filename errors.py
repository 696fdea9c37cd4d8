class ScrabbleError(Exception):
    """Base class for errors raised while setting up or running a scoring pass."""


class ConfigurationError(ScrabbleError):
    """Letter tables or run options that cannot be used."""


class InvalidInputError(ScrabbleError):
    """A word that contains something other than the letters a-z."""

    def __init__(self, word, position=None):
        self.word = word
        self.position = position
        if position is None:
            msg = f"Invalid word {word!r}: only lowercase a-z are allowed"
        else:
            msg = f"Invalid word {word!r}: unexpected character {word[position]!r} at index {position}"
        super().__init__(msg)
