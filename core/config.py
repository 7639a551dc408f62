"""Configuration constants for vocabtrack."""

# Storage keys
WORDS_KEY = 'vocabtrack-words'
STATS_KEY = 'vocabtrack-word-stats'

# Word statuses
STATUS_NEW = 'new'
STATUS_LEARNING = 'learning'
STATUS_LEARNED = 'learned'
STATUS_WEAK = 'weak'
STATUSES = (STATUS_NEW, STATUS_LEARNING, STATUS_LEARNED, STATUS_WEAK)

DIFFICULTIES = ('easy', 'medium', 'hard')
DEFAULT_DIFFICULTY = 'medium'

# Classification criteria
MIN_ATTEMPTS_FOR_STATUS = 3    # Attempts needed before status can change
LEARNED_RATE_THRESHOLD = 0.8   # Success rate at or above this is "learned"
WEAK_RATE_THRESHOLD = 0.4      # Success rate at or below this is "weak"

# Statistics
TREND_DAYS = 7
WEAK_WORDS_LIMIT = 10

# Word validation
EXAMPLE_MAX_LENGTH = 200
ENGLISH_PATTERN = r"^[a-zA-Z\s\-']+$"

# Games
GAME_WORD_COUNT = 8            # Words sampled when a game starts
DISTRACTOR_COUNT = 3
MULTIPLE_CHOICE_QUESTIONS = 10
FILL_BLANK_QUESTIONS = 8
MATCHING_PAIRS = 6
MIN_DISTRACTOR_LENGTH = 3      # Fill-in-blank options must be longer than 2 letters
BLANK = '____'

# Speech rates
WORD_SPEECH_RATE = 0.8
SENTENCE_SPEECH_RATE = 0.9

# Stories
STORY_MIN_WORDS = 5
STORY_WORD_COUNT = 8
STORY_HISTORY_SIZE = 5

# Hotel/travel vocabulary used by the travel game
TRAVEL_KEYWORDS = (
    'hotel', 'room', 'bed', 'bathroom', 'reception', 'lobby', 'check-in',
    'check-out', 'key', 'elevator', 'restaurant', 'breakfast', 'service',
    'luggage', 'suitcase', 'travel', 'vacation', 'book', 'reservation',
    'guest', 'staff', 'clean', 'towel', 'shower', 'wifi', 'parking'
)
