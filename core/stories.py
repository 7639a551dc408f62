"""Template stories built from the learner's own words."""

import random
import time
from datetime import datetime

from .config import STORY_MIN_WORDS, STORY_WORD_COUNT, STORY_HISTORY_SIZE
from .errors import GameUnavailableError
from .interfaces import StoryProvider
from .repository import WordRepository
from .utils import contains_word

STORY_TEMPLATES = [
    (
        "Yesterday, I went to the {location} and saw a {adjective} {noun}. It reminded me of "
        "{memory} when I was {feeling}. The {person} there told me about {object}, which made me {emotion}.",
        ['location', 'adjective', 'noun', 'memory', 'feeling', 'person', 'object', 'emotion']
    ),
    (
        "Last week, I discovered something {adjective} in my {location}. It was a {noun} that "
        "belonged to {person}. When I {action} it, I felt {emotion} because it reminded me of {memory}.",
        ['adjective', 'location', 'noun', 'person', 'action', 'emotion', 'memory']
    ),
    (
        "Every morning, I {action} to the {location} where I meet my {person}. Today was different "
        "because I found a {adjective} {object}. It made me feel {emotion} and think about {memory}.",
        ['action', 'location', 'person', 'adjective', 'object', 'emotion', 'memory']
    ),
    (
        "During my vacation, I stayed at a {adjective} hotel. The {person} was very {feeling}, and "
        "the {object} in my room was {adjective2}. I spent my time {action} and feeling {emotion}.",
        ['adjective', 'person', 'feeling', 'object', 'adjective2', 'action', 'emotion']
    ),
    (
        "I remember when I first learned the word '{word}'. I was at {location}, feeling {emotion}. "
        "A {person} helped me understand it by showing me a {object}. Now, whenever I {action}, "
        "I think of that {adjective} moment.",
        ['word', 'location', 'emotion', 'person', 'object', 'action', 'adjective']
    ),
]


class TemplateStoryProvider(StoryProvider):
    """Fills a random story template with the given words, cycling when short."""

    def __init__(self, rng: random.Random = None):
        self.rng = rng or random.Random()

    def generate_story(self, words: list[str]) -> tuple[str, int]:
        start_time = time.time()
        template, placeholders = self.rng.choice(STORY_TEMPLATES)
        shuffled = self.rng.sample(words, len(words))
        mapping = {name: shuffled[i % len(shuffled)] for i, name in enumerate(placeholders)}
        text = template.format(**mapping)
        ms = int((time.time() - start_time) * 1000)
        return (text, ms)


class StoryGenerator:
    """Generates stories from a random sample of words and keeps recent ones."""

    def __init__(self, repository: WordRepository, provider: StoryProvider = None):
        self.repository = repository
        self.provider = provider or TemplateStoryProvider(repository.rng)
        self.history = []

    def generate(self) -> dict:
        if self.repository.count < STORY_MIN_WORDS:
            raise GameUnavailableError(f"At least {STORY_MIN_WORDS} words are needed for a story")

        words = self.repository.sample(STORY_WORD_COUNT)
        text, ms = self.provider.generate_story([w.english for w in words])
        story = {
            'text': text,
            'words': [{'id': w.id, 'english': w.english, 'hebrew': w.hebrew} for w in words],
            'used_words': [w.english for w in words if contains_word(text, w.english)],
            'generate_ms': ms,
            'created_at': datetime.now().isoformat()
        }
        self.history = [story] + self.history[:STORY_HISTORY_SIZE - 1]
        return story
