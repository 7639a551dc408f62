"""Daily practice statistics and progress rollups."""

import logging
from datetime import date, datetime, timedelta

from .config import STATS_KEY, TREND_DAYS, WEAK_WORDS_LIMIT, STATUSES
from .errors import PersistenceError
from .interfaces import Storage
from .models import DailyStats, Word
from .progress import classify
from .repository import WordRepository
from .utils import success_rate

logger = logging.getLogger(__name__)


def day_key(moment: datetime | date) -> str:
    """Calendar date key (local time) for a timestamp."""
    if isinstance(moment, datetime):
        if moment.tzinfo is not None:
            moment = moment.astimezone()
        moment = moment.date()
    return moment.isoformat()


class StatisticsAggregator:
    """Records quiz attempts and derives the statistics view.

    Owns the date-keyed map of DailyStats. Word counters and status are
    written through the WordRepository so both stay consistent.
    """

    def __init__(self, repository: WordRepository, storage: Storage, clock=None):
        self.repository = repository
        self.storage = storage
        self.clock = clock or datetime.now
        self._daily = {
            key: DailyStats.from_dict(value)
            for key, value in storage.load_map(STATS_KEY).items()
        }

    def _serialize(self) -> dict:
        return {key: stats.to_dict() for key, stats in self._daily.items()}

    def daily_record(self, day) -> DailyStats | None:
        return self._daily.get(day if isinstance(day, str) else day_key(day))

    def record_attempt(self, word_id: str, is_correct: bool, game_type: str = 'quiz',
                       timestamp: datetime = None) -> Word | None:
        """Apply one answer to the word's progress and to the day's statistics.

        Both writes land together: if either save fails, words and statistics
        are rolled back and the PersistenceError is re-raised. Unknown word
        ids are ignored.
        """
        word = self.repository.get(word_id)
        if word is None:
            logger.debug(f"Ignoring attempt for missing word {word_id}")
            return None

        timestamp = timestamp or self.clock()
        times_correct, times_incorrect, status = classify(
            word.times_correct, word.times_incorrect, is_correct, word.status
        )

        words_before = self.repository.snapshot()
        stats_before = self._serialize()
        try:
            updated = self.repository.update(
                word_id,
                times_correct=times_correct,
                times_incorrect=times_incorrect,
                status=status,
                last_reviewed=timestamp
            )
            key = day_key(timestamp)
            if key not in self._daily:
                self._daily[key] = DailyStats()
            self._daily[key].record(is_correct, game_type)
            self.storage.save_map(STATS_KEY, self._serialize())
        except PersistenceError as e:
            logger.error(f"Failed to record attempt for {word_id}: {e}")
            self._daily = {k: DailyStats.from_dict(v) for k, v in stats_before.items()}
            try:
                self.repository.restore(words_before)
            except PersistenceError as restore_error:
                logger.error(f"Rollback of word {word_id} failed: {restore_error}")
            raise

        logger.debug(f"Recorded {'correct' if is_correct else 'incorrect'} {game_type} "
                     f"attempt for {updated.english!r}: {status}")
        return updated

    def last_days(self, today: date = None, days: int = TREND_DAYS) -> list[dict]:
        """One entry per calendar day ending today, oldest first."""
        today = today or date.fromisoformat(day_key(self.clock()))
        trend = []
        for offset in range(days - 1, -1, -1):
            key = (today - timedelta(days=offset)).isoformat()
            stats = self._daily.get(key) or DailyStats()
            trend.append({
                'date': key,
                'quizzes': stats.quizzes,
                'correct': stats.correct,
                'games_played': dict(stats.games_played),
                'success_rate': success_rate(stats.correct, stats.quizzes)
            })
        return trend

    def weak_words(self, limit: int = WEAK_WORDS_LIMIT) -> list[dict]:
        """Attempted words ordered by success rate, lowest first."""
        ranked = []
        for word in self.repository.words:
            total = word.total_attempts
            if total > 0:
                entry = word.to_dict()
                entry['success_rate'] = word.times_correct / total
                ranked.append(entry)
        # sorted() is stable, so ties keep collection order
        ranked.sort(key=lambda entry: entry['success_rate'])
        return ranked[:limit]

    def rollup(self, today: date = None) -> dict:
        """Summary of word statuses, the weekly trend and lifetime totals."""
        counts = self.repository.status_counts()
        summary = {'total_words': counts['all']}
        for status in STATUSES:
            summary[status] = counts[status]
        summary['last_7_days'] = self.last_days(today)
        summary['weak_words'] = self.weak_words()
        summary['total_quizzes'] = sum(s.quizzes for s in self._daily.values())
        summary['total_correct'] = sum(s.correct for s in self._daily.values())
        return summary
