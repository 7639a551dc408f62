"""Abstract base classes for dependency injection."""

from abc import ABC, abstractmethod


class Storage(ABC):
    """Abstract base class for key-based collection storage."""

    @abstractmethod
    def load_config(self) -> dict:
        """Load configuration. Returns config dict."""
        pass

    @abstractmethod
    def load_collection(self, key: str) -> list[dict]:
        """Load an ordered collection of records. Returns [] if absent."""
        pass

    @abstractmethod
    def save_collection(self, key: str, items: list[dict]) -> None:
        """Save an ordered collection. Raises PersistenceError on failure."""
        pass

    @abstractmethod
    def load_map(self, key: str) -> dict:
        """Load a mapping of records. Returns {} if absent."""
        pass

    @abstractmethod
    def save_map(self, key: str, mapping: dict) -> None:
        """Save a mapping. Raises PersistenceError on failure."""
        pass


class SpeechProvider(ABC):
    """Abstract base class for text-to-speech playback."""

    @abstractmethod
    def pronounce(self, text: str, rate: float = 1.0) -> str | None:
        """Render or play `text`. Returns an audio reference if one is produced."""
        pass


class StoryProvider(ABC):
    """Abstract base class for story generation from the learner's words."""

    @abstractmethod
    def generate_story(self, words: list[str]) -> tuple[str, int]:
        """Generate a story. Returns (story_text, generation_time_ms)."""
        pass
