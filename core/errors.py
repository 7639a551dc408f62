"""Exception types raised by the vocabtrack core."""


class ValidationError(ValueError):
    """Malformed word input. `errors` maps field name to message."""

    def __init__(self, errors: dict):
        self.errors = errors
        super().__init__('; '.join(f"{field}: {msg}" for field, msg in errors.items()))


class NotFoundError(LookupError):
    """Operation referenced a word id that does not exist."""

    def __init__(self, word_id: str):
        self.word_id = word_id
        super().__init__(f"Word not found: {word_id}")


class PersistenceError(RuntimeError):
    """The underlying store failed to read or write."""


class GameUnavailableError(RuntimeError):
    """A game cannot be started or played in its current state."""
