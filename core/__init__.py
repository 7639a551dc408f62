from .models import Word, DailyStats
from .interfaces import Storage, SpeechProvider, StoryProvider
from .errors import ValidationError, NotFoundError, PersistenceError, GameUnavailableError
from .progress import classify
from .repository import WordRepository
from .statistics import StatisticsAggregator
from .games import GAMES, start_session
from .speech import Pronouncer
from .stories import StoryGenerator, TemplateStoryProvider
from .utils import validate_word_fields, make_cloze
from .config import (
    STATUSES, STATUS_NEW, STATUS_LEARNING, STATUS_LEARNED, STATUS_WEAK,
    MIN_ATTEMPTS_FOR_STATUS, LEARNED_RATE_THRESHOLD, WEAK_RATE_THRESHOLD,
    TRAVEL_KEYWORDS
)

__all__ = [
    'Word', 'DailyStats',
    'Storage', 'SpeechProvider', 'StoryProvider',
    'ValidationError', 'NotFoundError', 'PersistenceError', 'GameUnavailableError',
    'classify',
    'WordRepository', 'StatisticsAggregator',
    'GAMES', 'start_session',
    'Pronouncer',
    'StoryGenerator', 'TemplateStoryProvider',
    'validate_word_fields', 'make_cloze',
    'STATUSES', 'STATUS_NEW', 'STATUS_LEARNING', 'STATUS_LEARNED', 'STATUS_WEAK',
    'MIN_ATTEMPTS_FOR_STATUS', 'LEARNED_RATE_THRESHOLD', 'WEAK_RATE_THRESHOLD',
    'TRAVEL_KEYWORDS'
]
