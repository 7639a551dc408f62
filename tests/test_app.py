"""Tests for the FastAPI service using TestClient."""

import asyncio
import random
import threading
import unittest

import httpx
from fastapi.testclient import TestClient

import server.app as app_module
from core.interfaces import StoryProvider
from tests.mocks import MockStorage, MockSpeechProvider, SAMPLE_WORDS


class AppTestCase(unittest.TestCase):
    """Base class: fresh in-memory services for every test."""

    def setUp(self):
        self.storage = MockStorage()
        self.speech = MockSpeechProvider()
        app_module.init_services(self.storage, self.speech, rng=random.Random(11))
        # Not used as a context manager, so the startup hook does not run
        self.client = TestClient(app_module.app)

    def tearDown(self):
        app_module.pronouncer.shutdown()

    def add_sample_words(self, words=SAMPLE_WORDS):
        return [self.client.post('/api/words', json=w).json() for w in words]


class TestWordEndpoints(AppTestCase):
    """Tests for the word endpoints."""

    def test_root(self):
        self.add_sample_words(SAMPLE_WORDS[:2])

        response = self.client.get('/')

        self.assertEqual(response.json(), {'service': 'vocabtrack', 'words': 2})

    def test_add_and_get_word(self):
        response = self.client.post('/api/words', json={'english': ' Hotel', 'hebrew': 'מלון'})

        self.assertEqual(response.status_code, 200)
        word = response.json()
        self.assertEqual(word['english'], 'hotel')
        self.assertEqual(word['status'], 'new')
        self.assertEqual(self.client.get(f"/api/words/{word['id']}").json(), word)

    def test_add_invalid_word(self):
        response = self.client.post('/api/words', json={'english': 'h0tel', 'hebrew': ''})

        self.assertEqual(response.status_code, 422)
        self.assertEqual(set(response.json()['detail']), {'english', 'hebrew'})

    def test_get_missing_word(self):
        self.assertEqual(self.client.get('/api/words/missing').status_code, 404)
        self.assertEqual(self.client.patch('/api/words/missing', json={'hebrew': 'x'}).status_code, 404)

    def test_list_words_with_search_and_counts(self):
        self.add_sample_words()

        data = self.client.get('/api/words', params={'query': 'TOWEL'}).json()

        self.assertEqual(data['total'], 1)
        self.assertEqual(data['counts']['all'], 8)
        self.assertEqual(data['words'][0]['english'], 'towel')

    def test_list_words_rejects_bad_filters(self):
        self.assertEqual(self.client.get('/api/words', params={'status': 'done'}).status_code, 422)
        self.assertEqual(self.client.get('/api/words', params={'sort_by': 'size'}).status_code, 422)

    def test_update_and_mark_learned(self):
        word = self.add_sample_words(SAMPLE_WORDS[:1])[0]

        updated = self.client.patch(f"/api/words/{word['id']}", json={'difficulty': 'hard'}).json()
        learned = self.client.post(f"/api/words/{word['id']}/learned").json()

        self.assertEqual(updated['difficulty'], 'hard')
        self.assertEqual(learned['status'], 'learned')

    def test_delete_word(self):
        word = self.add_sample_words(SAMPLE_WORDS[:1])[0]

        self.assertEqual(self.client.delete(f"/api/words/{word['id']}").json(), {'deleted': True})
        self.assertEqual(self.client.delete(f"/api/words/{word['id']}").json(), {'deleted': False})

    def test_random_and_travel_words(self):
        words = self.add_sample_words()
        excluded = [w['id'] for w in words[:6]]

        sample = self.client.get('/api/words/random',
                                 params={'count': 5, 'exclude': ','.join(excluded)}).json()
        travel = self.client.get('/api/words/travel').json()

        self.assertEqual(len(sample['words']), 2)
        self.assertFalse({w['id'] for w in sample['words']} & set(excluded))
        self.assertEqual(travel['total'], 3)

    def test_pronounce_word(self):
        word = self.add_sample_words(SAMPLE_WORDS[:1])[0]

        response = self.client.post(f"/api/words/{word['id']}/pronounce")
        app_module.pronouncer.shutdown()

        self.assertEqual(response.json(), {'queued': True})
        self.assertIn(('hotel', 0.8), self.speech.calls)

    def test_storage_failure_returns_500(self):
        self.storage.fail_collections = True

        response = self.client.post('/api/words', json={'english': 'hotel', 'hebrew': 'מלון'})

        self.assertEqual(response.status_code, 500)


class TestProgressEndpoints(AppTestCase):
    """Tests for attempts and statistics."""

    def test_record_attempt(self):
        word = self.add_sample_words(SAMPLE_WORDS[:1])[0]

        for _ in range(3):
            response = self.client.post('/api/attempts', json={'word_id': word['id'], 'is_correct': True})

        self.assertEqual(response.json()['status'], 'learned')
        self.assertEqual(response.json()['times_correct'], 3)

    def test_record_attempt_for_missing_word(self):
        response = self.client.post('/api/attempts', json={'word_id': 'missing', 'is_correct': True})

        self.assertEqual(response.status_code, 404)

    def test_statistics(self):
        word = self.add_sample_words(SAMPLE_WORDS[:1])[0]
        self.client.post('/api/attempts', json={'word_id': word['id'], 'is_correct': False})

        stats = self.client.get('/api/statistics').json()

        self.assertEqual(stats['total_words'], 1)
        self.assertEqual(stats['total_quizzes'], 1)
        self.assertEqual(len(stats['last_7_days']), 7)
        self.assertEqual(stats['last_7_days'][-1]['quizzes'], 1)
        self.assertEqual(stats['weak_words'][0]['id'], word['id'])


class TestGameEndpoints(AppTestCase):
    """Tests for the game endpoints."""

    def test_list_games(self):
        self.add_sample_words(SAMPLE_WORDS[:3])

        games = {g['id']: g for g in self.client.get('/api/games').json()['games']}

        self.assertFalse(games['multiple-choice']['can_play'])
        self.assertTrue(games['fill-blank']['can_play'])
        self.assertTrue(games['hotel-game']['can_play'])

    def test_start_game_without_enough_words(self):
        self.add_sample_words(SAMPLE_WORDS[:2])

        self.assertEqual(self.client.post('/api/games/matching').status_code, 409)
        self.assertEqual(self.client.post('/api/games/crossword').status_code, 409)
        self.assertEqual(self.client.get('/api/games/current').status_code, 409)

    def test_multiple_choice_flow(self):
        self.add_sample_words()
        state = self.client.post('/api/games/multiple-choice').json()
        self.assertEqual(state['total_questions'], 8)

        while True:
            question = state['current_question']
            result = self.client.post('/api/games/current/answer',
                                      json={'answer': question['options'][0]}).json()
            if result['completed']:
                break
            state = result['next']

        self.assertEqual(result['summary']['attempts'], 8)
        stats = self.client.get('/api/statistics').json()
        self.assertEqual(stats['total_quizzes'], 8)
        self.assertEqual(stats['total_correct'], result['summary']['score'])

    def test_matching_flow(self):
        self.add_sample_words()
        state = self.client.post('/api/games/matching').json()

        self.assertEqual(self.client.post('/api/games/current/answer', json={'answer': 'x'}).status_code, 409)
        for item in state['english']:
            result = self.client.post('/api/games/current/match',
                                      json={'english_id': item['id'], 'hebrew_id': item['id']}).json()

        self.assertTrue(result['completed'])
        self.assertEqual(result['summary']['score'], 6)

    def test_hotel_game_flow(self):
        self.add_sample_words()
        state = self.client.post('/api/games/hotel-game').json()
        self.assertIsNone(state['hebrew'])

        revealed = self.client.post('/api/games/current/reveal').json()
        following = self.client.post('/api/games/current/next').json()

        self.assertEqual(revealed['english'], state['english'])
        self.assertEqual(revealed['score'], 1)
        self.assertEqual(following['round'], 2)

    def test_exit_game(self):
        self.add_sample_words()
        self.client.post('/api/games/fill-blank')

        summary = self.client.delete('/api/games/current').json()['summary']

        self.assertEqual(summary['game_type'], 'fill-blank')
        self.assertEqual(self.client.delete('/api/games/current').json(), {'summary': None})


class TestStoryEndpoints(AppTestCase):
    """Tests for the story endpoints."""

    def test_story_needs_five_words(self):
        self.add_sample_words(SAMPLE_WORDS[:4])

        self.assertEqual(self.client.post('/api/stories').status_code, 409)

    def test_generate_story(self):
        self.add_sample_words()

        story = self.client.post('/api/stories').json()
        history = self.client.get('/api/stories').json()['stories']

        self.assertTrue(story['text'])
        self.assertEqual(len(story['words']), 8)
        self.assertEqual(history[0]['text'], story['text'])


class SlowStoryProvider(StoryProvider):
    """Story provider that blocks until released, like a slow remote model."""

    def __init__(self):
        self.started = threading.Event()
        self.release = threading.Event()

    def generate_story(self, words: list[str]) -> tuple[str, int]:
        self.started.set()
        self.release.wait(timeout=5)
        return ("A slow story about the hotel.", 5000)


class TestStoryConcurrency(unittest.IsolatedAsyncioTestCase):
    """Story generation must not hold up other requests."""

    async def test_other_requests_are_served_while_story_is_generated(self):
        provider = SlowStoryProvider()
        app_module.init_services(MockStorage(), story_provider=provider, rng=random.Random(5))
        for candidate in SAMPLE_WORDS:
            app_module.repository.add(candidate)

        transport = httpx.ASGITransport(app=app_module.app)
        async with httpx.AsyncClient(transport=transport, base_url='http://test') as client:
            story_task = asyncio.create_task(client.post('/api/stories'))
            for _ in range(200):
                if provider.started.is_set() or story_task.done():
                    break
                await asyncio.sleep(0.01)

            root = await client.get('/')
            still_generating = not story_task.done()
            provider.release.set()
            story = await story_task

        self.assertEqual(root.json()['words'], 8)
        self.assertTrue(still_generating)
        self.assertEqual(story.status_code, 200)
        self.assertEqual(story.json()['text'], "A slow story about the hotel.")


if __name__ == '__main__':
    unittest.main()
