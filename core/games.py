"""Game session controllers.

Each session turns a pool of words into questions and reports every
answer through StatisticsAggregator.record_attempt before returning
feedback. Sessions hold copies of the words; they never write words
or statistics themselves.
"""

import logging
import random

from .config import (
    DISTRACTOR_COUNT, GAME_WORD_COUNT, MULTIPLE_CHOICE_QUESTIONS,
    FILL_BLANK_QUESTIONS, MATCHING_PAIRS, MIN_DISTRACTOR_LENGTH
)
from .errors import GameUnavailableError
from .models import Word
from .repository import WordRepository
from .speech import Pronouncer
from .statistics import StatisticsAggregator
from .utils import make_cloze, success_rate

logger = logging.getLogger(__name__)


class Question:
    """A single prompt with its correct answer and shuffled options."""

    def __init__(self, word_id: str, prompt: str, correct_answer: str,
                 options: list[str], **details):
        self.word_id = word_id
        self.prompt = prompt
        self.correct_answer = correct_answer
        self.options = options
        self.details = details

    def to_dict(self, reveal: bool = False) -> dict:
        data = {
            'word_id': self.word_id,
            'prompt': self.prompt,
            'options': list(self.options),
            **self.details
        }
        if reveal:
            data['correct_answer'] = self.correct_answer
        return data


class GameSession:
    """Shared question/answer flow for the quiz games."""

    game_type = None
    min_words = 1
    requires_example = True

    def __init__(self, words: list[Word], statistics: StatisticsAggregator,
                 pronouncer: Pronouncer = None, rng: random.Random = None):
        self.words = [w.copy() for w in words]
        self.statistics = statistics
        self.pronouncer = pronouncer
        self.rng = rng or random.Random()
        self.score = 0
        self.attempts = 0
        self.current_index = 0
        self.questions = self.build_questions()

    def build_questions(self) -> list[Question]:
        raise NotImplementedError

    @property
    def completed(self) -> bool:
        return self.current_index >= len(self.questions)

    @property
    def current_question(self) -> Question | None:
        if self.completed:
            return None
        return self.questions[self.current_index]

    def _shuffled(self, items: list) -> list:
        return self.rng.sample(items, len(items))

    def _distractors(self, word: Word, candidates: list[Word], value_of) -> list[str]:
        """Up to DISTRACTOR_COUNT distinct wrong values from other words."""
        correct = value_of(word)
        seen = {correct}
        chosen = []
        for other in self._shuffled([w for w in candidates if w.id != word.id]):
            value = value_of(other)
            if value in seen:
                continue
            seen.add(value)
            chosen.append(value)
            if len(chosen) == DISTRACTOR_COUNT:
                break
        return chosen

    def _options(self, word: Word, candidates: list[Word], value_of) -> list[str]:
        return self._shuffled([value_of(word)] + self._distractors(word, candidates, value_of))

    def _pronounce_word(self, text: str) -> None:
        if self.pronouncer:
            self.pronouncer.pronounce_word(text)

    def _pronounce_sentence(self, text: str) -> None:
        if self.pronouncer:
            self.pronouncer.pronounce_sentence(text)

    def play_prompt(self) -> None:
        """Pronounce the current question."""
        question = self.current_question
        if question:
            self._pronounce_word(question.prompt)

    def submit_answer(self, answer: str) -> dict:
        """Score the current question, record the attempt and advance."""
        question = self.current_question
        if question is None:
            raise GameUnavailableError("Game is already completed")

        is_correct = answer == question.correct_answer
        self.statistics.record_attempt(question.word_id, is_correct, self.game_type)
        self.attempts += 1
        if is_correct:
            self.score += 1
        self.current_index += 1

        return {
            'is_correct': is_correct,
            'correct_answer': question.correct_answer,
            'question': question.to_dict(reveal=True),
            'completed': self.completed,
            'score': self.score
        }

    def summary(self) -> dict:
        return {
            'game_type': self.game_type,
            'score': self.score,
            'attempts': self.attempts,
            'total': len(self.questions),
            'success_rate': success_rate(self.score, self.attempts)
        }

    def to_dict(self) -> dict:
        question = self.current_question
        return {
            'game_type': self.game_type,
            'completed': self.completed,
            'question_number': min(self.current_index + 1, len(self.questions)),
            'total_questions': len(self.questions),
            'current_question': question.to_dict() if question else None,
            'score': self.score
        }


class MultipleChoiceSession(GameSession):
    """Choose the Hebrew translation of an English word."""

    game_type = 'multiple-choice'
    min_words = 4

    def build_questions(self) -> list[Question]:
        questions = []
        for word in self._shuffled(self.words)[:MULTIPLE_CHOICE_QUESTIONS]:
            questions.append(Question(
                word.id, word.english, word.hebrew,
                self._options(word, self.words, lambda w: w.hebrew),
                example=word.example
            ))
        return questions


class FillInBlankSession(GameSession):
    """Complete an example sentence with the missing English word."""

    game_type = 'fill-blank'
    min_words = 3

    def build_questions(self) -> list[Question]:
        with_examples = [w for w in self.words if w.example.strip()]
        candidates = [w for w in self.words if len(w.english) >= MIN_DISTRACTOR_LENGTH]
        questions = []
        for word in with_examples[:FILL_BLANK_QUESTIONS]:
            questions.append(Question(
                word.id, make_cloze(word.example, word.english), word.english,
                self._options(word, candidates, lambda w: w.english),
                hebrew=word.hebrew,
                full_sentence=word.example
            ))
        return questions

    def play_prompt(self) -> None:
        question = self.current_question
        if question:
            self._pronounce_sentence(question.details['full_sentence'])


class MatchingSession(GameSession):
    """Pair English words with their Hebrew translations.

    Every drop is an attempt for the dragged English word; a session is
    completed once every pair has been matched.
    """

    game_type = 'matching'
    min_words = 4

    def __init__(self, words, statistics, pronouncer=None, rng=None):
        self.matches = {}
        super().__init__(words, statistics, pronouncer, rng)
        pairs = self.words[:MATCHING_PAIRS]
        self.english_column = [{'id': w.id, 'english': w.english} for w in self._shuffled(pairs)]
        self.hebrew_column = [{'id': w.id, 'hebrew': w.hebrew} for w in self._shuffled(pairs)]

    def build_questions(self) -> list[Question]:
        pairs = self.words[:MATCHING_PAIRS]
        return [Question(w.id, w.english, w.hebrew, []) for w in pairs]

    @property
    def completed(self) -> bool:
        return len(self.matches) == len(self.questions)

    @property
    def current_question(self) -> Question | None:
        return None

    def submit_match(self, english_id: str, hebrew_id: str) -> dict:
        """Drop an English word onto a Hebrew translation."""
        if self.completed:
            raise GameUnavailableError("Game is already completed")
        if english_id in self.matches:
            raise GameUnavailableError(f"Word {english_id} is already matched")
        pair_ids = {q.word_id for q in self.questions}
        if english_id not in pair_ids:
            raise GameUnavailableError(f"Word {english_id} is not part of this game")
        if hebrew_id not in pair_ids:
            raise GameUnavailableError(f"Translation {hebrew_id} is not part of this game")

        is_correct = english_id == hebrew_id
        self.statistics.record_attempt(english_id, is_correct, self.game_type)
        self.attempts += 1
        if is_correct:
            self.matches[english_id] = hebrew_id
            self.score += 1
            question = next(q for q in self.questions if q.word_id == english_id)
            self._pronounce_word(question.prompt)

        return {
            'is_correct': is_correct,
            'matched': len(self.matches),
            'completed': self.completed,
            'score': self.score
        }

    def submit_answer(self, answer) -> dict:
        english_id, hebrew_id = answer
        return self.submit_match(english_id, hebrew_id)

    def play_prompt(self) -> None:
        pass

    def to_dict(self) -> dict:
        return {
            'game_type': self.game_type,
            'completed': self.completed,
            'english': self.english_column,
            'hebrew': self.hebrew_column,
            'matches': dict(self.matches),
            'score': self.score,
            'attempts': self.attempts
        }


class TravelRevealSession(GameSession):
    """Reveal translations of hotel and travel words one at a time.

    Draws without repeating until the pool is exhausted, then starts over.
    Revealing a translation counts as a correct attempt.
    """

    game_type = 'hotel-game'
    min_words = 1
    requires_example = False

    def __init__(self, words, statistics, pronouncer=None, rng=None):
        self.history = []
        self.round = 0
        self.current_word = None
        self.revealed = False
        super().__init__(words, statistics, pronouncer, rng)
        self.next_word()

    def build_questions(self) -> list[Question]:
        return []

    @property
    def completed(self) -> bool:
        return False

    @property
    def current_question(self) -> Question | None:
        if self.current_word is None:
            return None
        return Question(self.current_word.id, self.current_word.english,
                        self.current_word.hebrew, [])

    def next_word(self) -> Word | None:
        if not self.words:
            return None
        seen = set(self.history)
        available = [w for w in self.words if w.id not in seen]
        if not available:
            self.history = []
            available = self.words
        self.current_word = self.rng.choice(available)
        self.revealed = False
        self.round += 1
        return self.current_word

    def reveal(self) -> dict:
        """Show the translation of the current word and count it as correct."""
        word = self.current_word
        if word is None:
            raise GameUnavailableError("No words available")
        if not self.revealed:
            self.revealed = True
            self.statistics.record_attempt(word.id, True, self.game_type)
            self.score += 1
            self.attempts += 1
            self.history.append(word.id)
            self._pronounce_word(word.english)
        return {
            'english': word.english,
            'hebrew': word.hebrew,
            'round': self.round,
            'score': self.score
        }

    def submit_answer(self, answer=None) -> dict:
        return self.reveal()

    def to_dict(self) -> dict:
        word = self.current_word
        return {
            'game_type': self.game_type,
            'completed': False,
            'round': self.round,
            'score': self.score,
            'english': word.english if word else None,
            'hebrew': word.hebrew if word and self.revealed else None,
            'revealed': self.revealed,
            'pool_size': len(self.words)
        }


GAMES = {
    cls.game_type: cls
    for cls in (MatchingSession, FillInBlankSession, MultipleChoiceSession, TravelRevealSession)
}


def start_session(game_type: str, repository: WordRepository, statistics: StatisticsAggregator,
                  pronouncer: Pronouncer = None, rng: random.Random = None) -> GameSession:
    """Check eligibility, sample words and build a session for `game_type`."""
    session_cls = GAMES.get(game_type)
    if session_cls is None:
        raise GameUnavailableError(f"Unknown game: {game_type}")

    if not session_cls.requires_example:
        pool = repository.filter_by_keywords() or repository.words
        if len(pool) < session_cls.min_words:
            raise GameUnavailableError(f"At least {session_cls.min_words} words are needed")
        return session_cls(pool, statistics, pronouncer, rng)

    eligible = {w.id for w in repository.words if w.example.strip()}
    if len(eligible) < session_cls.min_words:
        raise GameUnavailableError(
            f"At least {session_cls.min_words} words with example sentences are needed"
        )
    excluded = [w.id for w in repository.words if w.id not in eligible]
    words = repository.sample(GAME_WORD_COUNT, exclude_ids=excluded)
    logger.info(f"Starting {game_type} with {len(words)} words")
    return session_cls(words, statistics, pronouncer, rng)
