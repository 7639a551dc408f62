"""Unit tests for StatisticsAggregator."""

import unittest
from datetime import date, datetime, timedelta, timezone

from core.config import STATS_KEY, WORDS_KEY
from core.errors import PersistenceError
from core.statistics import StatisticsAggregator, day_key
from tests.mocks import Clock, make_services


class TestDayKey(unittest.TestCase):
    """Tests for day_key."""

    def test_naive_datetime(self):
        self.assertEqual(day_key(datetime(2024, 3, 9, 23, 59)), '2024-03-09')

    def test_date(self):
        self.assertEqual(day_key(date(2024, 3, 9)), '2024-03-09')

    def test_aware_datetime_uses_local_date(self):
        moment = datetime(2024, 3, 9, 12, 0, tzinfo=timezone.utc)

        self.assertEqual(day_key(moment), moment.astimezone().date().isoformat())

    def test_trend_ends_on_local_date_of_aware_clock(self):
        # Late evening at UTC-12 is already the next day almost everywhere else
        moment = datetime(2024, 5, 10, 23, 30, tzinfo=timezone(timedelta(hours=-12)))
        storage, repository, statistics = make_services(clock=Clock(moment))

        statistics.record_attempt(repository.words[0].id, True)
        trend = statistics.last_days()

        self.assertEqual(trend[-1]['date'], day_key(moment))
        self.assertEqual(trend[-1]['quizzes'], 1)


class TestRecordAttempt(unittest.TestCase):
    """Tests for recording answers."""

    def setUp(self):
        self.clock = Clock(datetime(2024, 5, 10, 9, 30))
        self.storage, self.repository, self.statistics = make_services(clock=self.clock)
        self.word = self.repository.words[0]

    def test_updates_word_progress(self):
        for _ in range(3):
            updated = self.statistics.record_attempt(self.word.id, True, 'matching')

        self.assertEqual(updated.times_correct, 3)
        self.assertEqual(updated.times_incorrect, 0)
        self.assertEqual(updated.status, 'learned')
        self.assertEqual(updated.last_reviewed, datetime(2024, 5, 10, 9, 30))

    def test_counters_sum_to_number_of_attempts(self):
        answers = [True, False, False, True, False, True, True]
        for is_correct in answers:
            self.statistics.record_attempt(self.word.id, is_correct)

        word = self.repository.get(self.word.id)
        self.assertEqual(word.total_attempts, len(answers))
        self.assertEqual(word.times_correct, 4)

    def test_updates_daily_record(self):
        self.statistics.record_attempt(self.word.id, True, 'matching')
        self.statistics.record_attempt(self.word.id, False, 'fill-blank')

        record = self.statistics.daily_record('2024-05-10')
        self.assertEqual(record.quizzes, 2)
        self.assertEqual(record.correct, 1)
        self.assertEqual(record.games_played, {'matching': 1, 'fill-blank': 1})
        self.assertEqual(self.storage.maps[STATS_KEY]['2024-05-10']['quizzes'], 2)

    def test_explicit_timestamp_picks_the_day(self):
        self.statistics.record_attempt(self.word.id, True, timestamp=datetime(2024, 5, 8, 22, 0))

        self.assertIsNotNone(self.statistics.daily_record(date(2024, 5, 8)))
        self.assertIsNone(self.statistics.daily_record(date(2024, 5, 10)))

    def test_unknown_word_is_ignored(self):
        saves_before = list(self.storage.save_calls)

        self.assertIsNone(self.statistics.record_attempt('missing', True))
        self.assertEqual(self.storage.save_calls, saves_before)
        self.assertIsNone(self.statistics.daily_record('2024-05-10'))

    def test_rolls_back_when_statistics_save_fails(self):
        self.storage.fail_maps = True

        with self.assertLogs('core.statistics', level='ERROR'):
            with self.assertRaises(PersistenceError):
                self.statistics.record_attempt(self.word.id, True)

        word = self.repository.get(self.word.id)
        self.assertEqual(word.times_correct, 0)
        self.assertIsNone(word.last_reviewed)
        stored = next(w for w in self.storage.collections[WORDS_KEY] if w['id'] == self.word.id)
        self.assertEqual(stored['times_correct'], 0)
        self.assertIsNone(self.statistics.daily_record('2024-05-10'))

    def test_rolls_back_when_word_save_fails(self):
        self.storage.fail_collections = True

        with self.assertLogs('core.statistics', level='ERROR'):
            with self.assertRaises(PersistenceError):
                self.statistics.record_attempt(self.word.id, False)

        self.assertEqual(self.repository.get(self.word.id).times_incorrect, 0)
        self.assertIsNone(self.statistics.daily_record('2024-05-10'))

    def test_statistics_survive_reload(self):
        self.statistics.record_attempt(self.word.id, True)

        reloaded = StatisticsAggregator(self.repository, self.storage, clock=self.clock)

        self.assertEqual(reloaded.daily_record('2024-05-10').correct, 1)


class TestRollup(unittest.TestCase):
    """Tests for the statistics view."""

    def setUp(self):
        self.clock = Clock(datetime(2024, 5, 10, 9, 30))
        self.storage, self.repository, self.statistics = make_services(clock=self.clock)

    def test_last_days_always_has_seven_entries(self):
        trend = self.statistics.last_days()

        self.assertEqual(len(trend), 7)
        self.assertEqual(trend[0]['date'], '2024-05-04')
        self.assertEqual(trend[-1]['date'], '2024-05-10')
        self.assertTrue(all(day['quizzes'] == 0 for day in trend))
        self.assertTrue(all(day['success_rate'] == 0 for day in trend))

    def test_last_days_reports_success_rate(self):
        word = self.repository.words[0]
        yesterday = datetime(2024, 5, 9, 18, 0)
        self.statistics.record_attempt(word.id, True, timestamp=yesterday)
        self.statistics.record_attempt(word.id, True, timestamp=yesterday)
        self.statistics.record_attempt(word.id, False, timestamp=yesterday)

        trend = self.statistics.last_days(today=date(2024, 5, 10))

        self.assertEqual(trend[-2]['quizzes'], 3)
        self.assertEqual(trend[-2]['correct'], 2)
        self.assertEqual(trend[-2]['success_rate'], 66.7)

    def test_records_outside_window_are_not_listed(self):
        word = self.repository.words[0]
        self.statistics.record_attempt(word.id, True, timestamp=datetime(2024, 4, 1, 12, 0))

        trend = self.statistics.last_days()

        self.assertEqual(sum(day['quizzes'] for day in trend), 0)
        self.assertEqual(self.statistics.rollup()['total_quizzes'], 1)

    def test_weak_words_ranked_by_success_rate(self):
        a = self.repository.words[0]
        b = self.repository.words[1]
        self.repository.update(a.id, times_correct=2, times_incorrect=1)
        self.repository.update(b.id, times_correct=1, times_incorrect=4)

        weak = self.statistics.weak_words()

        self.assertEqual([w['id'] for w in weak], [b.id, a.id])
        self.assertAlmostEqual(weak[0]['success_rate'], 0.2)

    def test_weak_words_skips_unattempted_and_respects_limit(self):
        for word in self.repository.words:
            self.statistics.record_attempt(word.id, False)

        self.assertEqual(len(self.statistics.weak_words(limit=3)), 3)
        self.repository.add({'english': 'bridge', 'hebrew': 'גשר'})
        self.assertEqual(len(self.statistics.weak_words()), 8)

    def test_weak_words_ties_keep_collection_order(self):
        words = self.repository.words
        for word in (words[4], words[1], words[6]):
            self.repository.update(word.id, times_correct=1, times_incorrect=1)
        self.repository.update(words[7].id, times_correct=0, times_incorrect=2)

        weak = self.statistics.weak_words()

        self.assertEqual([w['id'] for w in weak], [words[7].id, words[1].id, words[4].id, words[6].id])

    def test_rollup_lists_ten_weakest_words(self):
        names = [f"word{chr(ord('a') + i)}" for i in range(12)]
        storage, repository, statistics = make_services(
            [{'english': name, 'hebrew': 'מילה'} for name in names], clock=self.clock
        )
        # Rates rise with position: 0/12, 1/12, ... 11/12
        words = repository.words
        for i, word in enumerate(words):
            repository.update(word.id, times_correct=i, times_incorrect=12 - i)

        weak = statistics.rollup()['weak_words']

        self.assertEqual(len(weak), 10)
        self.assertEqual([w['id'] for w in weak], [w.id for w in words[:10]])

    def test_rollup(self):
        words = self.repository.words
        for _ in range(3):
            self.statistics.record_attempt(words[0].id, True)
        for _ in range(3):
            self.statistics.record_attempt(words[1].id, False)

        summary = self.statistics.rollup()

        self.assertEqual(summary['total_words'], 8)
        self.assertEqual(summary['learned'], 1)
        self.assertEqual(summary['weak'], 1)
        self.assertEqual(summary['new'], 6)
        self.assertEqual(summary['learning'], 0)
        self.assertEqual(summary['total_quizzes'], 6)
        self.assertEqual(summary['total_correct'], 3)
        self.assertEqual(len(summary['last_7_days']), 7)
        self.assertEqual(summary['last_7_days'][-1]['quizzes'], 6)
        self.assertEqual(summary['weak_words'][0]['id'], words[1].id)


if __name__ == '__main__':
    unittest.main()
