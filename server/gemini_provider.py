"""Gemini AI story provider implementation."""

import logging
import random
import time
import google.generativeai as genai

from core.interfaces import StoryProvider

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SETTINGS = ["a hotel lobby", "a train station", "a beach cafe", "a city market", "an airport", "a mountain cabin"]
STORY_SENTENCE_COUNT = 6


class GeminiStoryProvider(StoryProvider):
    """Writes short English stories that use the learner's words."""

    def __init__(self, api_key: str, model_name: str = 'gemini-2.0-flash'):
        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model_name)
        self.model_name = model_name
        self.stats = {'calls': 0, 'total_ms': 0, 'failures': 0}

    def _execute(self, prompt: str) -> tuple[str, int]:
        start_time = time.time()
        response = self.model.generate_content(prompt)
        end_time = time.time()
        ms = int((end_time - start_time) * 1000)
        self.stats['calls'] += 1
        self.stats['total_ms'] += ms
        return (response.text, ms)

    def generate_story(self, words: list[str]) -> tuple[str, int]:
        setting = random.choice(SETTINGS)
        prompt = f"""
            Write a short, simple story in English with about {STORY_SENTENCE_COUNT} sentences
            for a Hebrew speaker who is learning English.

            MANDATORY:
            - Use every one of these words at least once, exactly as written: {', '.join(words)}
            - The story takes place in {setting}
            - Use everyday vocabulary and mostly present or simple past tense

            Write only the story text, no title, no translation, no explanations.
        """
        try:
            text, ms = self._execute(prompt)
        except Exception as e:
            self.stats['failures'] += 1
            logger.error(f"Story generation with {self.model_name} failed: {e}")
            raise
        return (text.strip(), ms)

    def get_stats(self) -> dict:
        calls = self.stats['calls']
        return {
            **self.stats,
            'model': self.model_name,
            'avg_ms': round(self.stats['total_ms'] / calls, 1) if calls > 0 else 0
        }
