"""Domain models for vocabtrack."""

from datetime import datetime

from .config import STATUS_NEW, STATUSES, DEFAULT_DIFFICULTY


def _parse_time(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _format_time(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


class Word:
    """A vocabulary entry with its learning metadata."""

    def __init__(self, word_id: str, english: str, hebrew: str, example: str = '',
                 created_at: datetime = None):
        self.id = word_id
        self.english = english
        self.hebrew = hebrew
        self.example = example or ''
        self.status = STATUS_NEW
        self.times_correct = 0
        self.times_incorrect = 0
        self.last_reviewed = None
        self.difficulty = DEFAULT_DIFFICULTY
        self.created_at = created_at or datetime.now()
        self.updated_at = None

    @property
    def total_attempts(self) -> int:
        return self.times_correct + self.times_incorrect

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'english': self.english,
            'hebrew': self.hebrew,
            'example': self.example,
            'status': self.status,
            'times_correct': self.times_correct,
            'times_incorrect': self.times_incorrect,
            'last_reviewed': _format_time(self.last_reviewed),
            'difficulty': self.difficulty,
            'created_at': _format_time(self.created_at),
            'updated_at': _format_time(self.updated_at)
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Word':
        status = data.get('status', STATUS_NEW)
        if status not in STATUSES:
            raise ValueError(f"Unknown status {status!r} for word {data.get('id')!r}")
        word = cls(data['id'], data['english'], data['hebrew'], data.get('example', ''),
                   created_at=_parse_time(data.get('created_at')))
        word.status = status
        word.times_correct = data.get('times_correct', 0)
        word.times_incorrect = data.get('times_incorrect', 0)
        word.last_reviewed = _parse_time(data.get('last_reviewed'))
        word.difficulty = data.get('difficulty', DEFAULT_DIFFICULTY)
        word.updated_at = _parse_time(data.get('updated_at'))
        return word

    def copy(self) -> 'Word':
        return Word.from_dict(self.to_dict())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Word):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"Word({self.id!r}, {self.english!r}, status={self.status!r})"


class DailyStats:
    """Aggregate of the attempts recorded on one calendar date."""

    def __init__(self):
        self.quizzes = 0
        self.correct = 0
        self.time_spent = 0
        self.games_played = {}

    def record(self, is_correct: bool, game_type: str) -> None:
        self.quizzes += 1
        if is_correct:
            self.correct += 1
        self.games_played[game_type] = self.games_played.get(game_type, 0) + 1

    def to_dict(self) -> dict:
        return {
            'quizzes': self.quizzes,
            'correct': self.correct,
            'time_spent': self.time_spent,
            'games_played': dict(self.games_played)
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'DailyStats':
        stats = cls()
        stats.quizzes = data.get('quizzes', 0)
        stats.correct = data.get('correct', 0)
        stats.time_spent = data.get('time_spent', 0)
        stats.games_played = dict(data.get('games_played', {}))
        return stats
