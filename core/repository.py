"""Word repository: owns the learner's vocabulary collection."""

import logging
import random
import uuid
from datetime import datetime

from .config import WORDS_KEY, STATUSES, DIFFICULTIES, STATUS_LEARNED, TRAVEL_KEYWORDS
from .errors import ValidationError, PersistenceError
from .interfaces import Storage
from .models import Word
from .utils import validate_word_fields

logger = logging.getLogger(__name__)

TEXT_FIELDS = ('english', 'hebrew', 'example')
UPDATABLE_FIELDS = TEXT_FIELDS + (
    'status', 'difficulty', 'times_correct', 'times_incorrect', 'last_reviewed'
)
SORT_ORDERS = ('alphabetical', 'newest', 'oldest', 'most-reviewed')


class WordRepository:
    """CRUD and derived queries over the persisted word collection.

    Every mutation is written back to storage before it becomes visible.
    If the store rejects a write, the in-memory collection is restored and
    the PersistenceError propagates.
    """

    def __init__(self, storage: Storage, rng: random.Random = None, clock=None):
        self.storage = storage
        self.rng = rng or random.Random()
        self.clock = clock or datetime.now
        try:
            self._words = [Word.from_dict(d) for d in storage.load_collection(WORDS_KEY)]
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Stored words are malformed: {e}")
            raise PersistenceError(f"Could not load words: {e}") from e

    @property
    def words(self) -> list[Word]:
        return list(self._words)

    @property
    def count(self) -> int:
        return len(self._words)

    def snapshot(self) -> list[dict]:
        """Serialized copy of the collection, used to roll back failed writes."""
        return [w.to_dict() for w in self._words]

    def restore(self, snapshot: list[dict]) -> None:
        """Replace the in-memory collection with `snapshot` and persist it."""
        self._words = [Word.from_dict(d) for d in snapshot]
        self.storage.save_collection(WORDS_KEY, snapshot)

    def _commit(self, previous: list[dict]) -> None:
        try:
            self.storage.save_collection(WORDS_KEY, self.snapshot())
        except PersistenceError:
            self._words = [Word.from_dict(d) for d in previous]
            raise

    def add(self, candidate: dict) -> Word:
        """Create a word from {english, hebrew, example?}. Raises ValidationError."""
        fields = validate_word_fields(candidate)
        word = Word(uuid.uuid4().hex, fields['english'], fields['hebrew'],
                    fields['example'], created_at=self.clock())
        previous = self.snapshot()
        self._words.append(word)
        self._commit(previous)
        logger.info(f"Added word {word.english!r} ({word.id})")
        return word

    def get(self, word_id: str) -> Word | None:
        for word in self._words:
            if word.id == word_id:
                return word
        return None

    def update(self, word_id: str, **fields) -> Word | None:
        """Merge `fields` into a word and stamp updated_at.

        Unknown ids are ignored and return None.
        """
        unknown = [key for key in fields if key not in UPDATABLE_FIELDS]
        if unknown:
            raise ValidationError({key: 'Field cannot be updated' for key in unknown})

        word = self.get(word_id)
        if word is None:
            logger.debug(f"Ignoring update for missing word {word_id}")
            return None

        changes = dict(fields)
        text = {key: changes[key] for key in TEXT_FIELDS if key in changes}
        if text:
            changes.update(validate_word_fields(text, partial=True))
        if 'status' in changes and changes['status'] not in STATUSES:
            raise ValidationError({'status': f"Unknown status {changes['status']!r}"})
        if 'difficulty' in changes and changes['difficulty'] not in DIFFICULTIES:
            raise ValidationError({'difficulty': f"Unknown difficulty {changes['difficulty']!r}"})
        for counter in ('times_correct', 'times_incorrect'):
            if counter in changes and changes[counter] < getattr(word, counter):
                raise ValidationError({counter: 'Counters cannot decrease'})

        previous = self.snapshot()
        for key, value in changes.items():
            setattr(word, key, value)
        word.updated_at = self.clock()
        self._commit(previous)
        return word

    def delete(self, word_id: str) -> bool:
        """Remove a word. Returns False if it did not exist."""
        remaining = [w for w in self._words if w.id != word_id]
        if len(remaining) == len(self._words):
            logger.debug(f"Ignoring delete for missing word {word_id}")
            return False
        previous = self.snapshot()
        self._words = remaining
        self._commit(previous)
        logger.info(f"Deleted word {word_id}")
        return True

    def clear(self) -> None:
        """Remove every word."""
        previous = self.snapshot()
        self._words = []
        self._commit(previous)

    def mark_as_learned(self, word_id: str) -> Word | None:
        """Manually mark a word as learned."""
        return self.update(word_id, status=STATUS_LEARNED, last_reviewed=self.clock())

    def list_by_status(self, status: str) -> list[Word]:
        return [w for w in self._words if w.status == status]

    def status_counts(self) -> dict:
        counts = {'all': len(self._words)}
        for status in STATUSES:
            counts[status] = 0
        for word in self._words:
            counts[word.status] += 1
        return counts

    def search(self, query: str) -> list[Word]:
        """Match english/example case-insensitively and hebrew as typed."""
        if not query or not query.strip():
            return list(self._words)
        lower_query = query.lower()
        return [
            w for w in self._words
            if lower_query in w.english.lower()
            or query in w.hebrew
            or lower_query in w.example.lower()
        ]

    def list_words(self, query: str = '', status: str = None,
                   sort_by: str = 'alphabetical') -> list[Word]:
        """Search, filter by status, then sort for display."""
        if sort_by not in SORT_ORDERS:
            raise ValidationError({'sort_by': f"Unknown sort order {sort_by!r}"})
        words = self.search(query)
        if status:
            words = [w for w in words if w.status == status]

        if sort_by == 'alphabetical':
            return sorted(words, key=lambda w: w.english)
        if sort_by == 'newest':
            return sorted(words, key=lambda w: w.created_at, reverse=True)
        if sort_by == 'oldest':
            return sorted(words, key=lambda w: w.created_at)
        return sorted(words, key=lambda w: w.total_attempts, reverse=True)

    def sample(self, count: int, exclude_ids=()) -> list[Word]:
        """Uniform random draw without replacement, skipping excluded ids."""
        excluded = set(exclude_ids)
        available = [w for w in self._words if w.id not in excluded]
        return self.rng.sample(available, min(max(count, 0), len(available)))

    def filter_by_keywords(self, keywords=TRAVEL_KEYWORDS) -> list[Word]:
        """Words whose english or example mentions any of `keywords`."""
        lowered = [k.lower() for k in keywords]
        return [
            w for w in self._words
            if any(k in w.english.lower() or k in w.example.lower() for k in lowered)
        ]
