"""FastAPI server for vocabtrack."""

import asyncio
import logging
import os
import random
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

logger = logging.getLogger(__name__)

from core.config import STATUSES
from core.errors import ValidationError, NotFoundError, PersistenceError, GameUnavailableError
from core.games import GAMES, GameSession, MatchingSession, TravelRevealSession, start_session
from core.interfaces import Storage, SpeechProvider, StoryProvider
from core.repository import WordRepository
from core.speech import Pronouncer
from core.statistics import StatisticsAggregator
from core.stories import StoryGenerator

from server.file_storage import FileStorage


# Pydantic models for API
class WordCreateRequest(BaseModel):
    english: str
    hebrew: str
    example: str = ''


class WordUpdateRequest(BaseModel):
    english: Optional[str] = None
    hebrew: Optional[str] = None
    example: Optional[str] = None
    status: Optional[str] = None
    difficulty: Optional[str] = None


class WordResponse(BaseModel):
    id: str
    english: str
    hebrew: str
    example: str
    status: str
    times_correct: int
    times_incorrect: int
    last_reviewed: Optional[str]
    difficulty: str
    created_at: Optional[str]
    updated_at: Optional[str]


class AttemptRequest(BaseModel):
    word_id: str
    is_correct: bool
    game_type: str = 'quiz'


class AnswerRequest(BaseModel):
    answer: str


class MatchRequest(BaseModel):
    english_id: str
    hebrew_id: str


class StatisticsResponse(BaseModel):
    total_words: int
    new: int
    learning: int
    learned: int
    weak: int
    last_7_days: list[dict]
    weak_words: list[dict]
    total_quizzes: int
    total_correct: int


# Global state: one learner, one active game
storage: Storage = None
repository: WordRepository = None
statistics: StatisticsAggregator = None
pronouncer: Pronouncer = None
stories: StoryGenerator = None
current_session: GameSession = None


def init_services(store: Storage, speech: SpeechProvider = None,
                  story_provider: StoryProvider = None, rng: random.Random = None) -> None:
    """Build the repository, aggregator and helpers around a store handle."""
    global storage, repository, statistics, pronouncer, stories, current_session
    storage = store
    repository = WordRepository(store, rng=rng)
    statistics = StatisticsAggregator(repository, store)
    pronouncer = Pronouncer(speech) if speech else None
    stories = StoryGenerator(repository, story_provider)
    current_session = None


def create_storage() -> Storage:
    """Use file storage by default, set VOCAB_STORAGE=postgres for PostgreSQL."""
    storage_type = os.environ.get('VOCAB_STORAGE', 'file')
    if storage_type == 'postgres':
        from server.postgres_storage import PostgresStorage
        logger.info("Using PostgreSQL storage")
        return PostgresStorage()
    logger.info("Using file storage")
    return FileStorage()


def create_story_provider(store: Storage) -> StoryProvider | None:
    """Gemini stories when an API key is configured, templates otherwise."""
    api_key = os.environ.get('GEMINI_API_KEY')
    if not api_key:
        try:
            api_key = store.load_config().get('gemini_api_key')
        except FileNotFoundError:
            pass
    if not api_key:
        logger.info("No Gemini API key configured, using template stories")
        return None
    from server.gemini_provider import GeminiStoryProvider
    return GeminiStoryProvider(api_key)


def raise_http_error(error: Exception):
    """Translate core errors into HTTP errors."""
    if isinstance(error, ValidationError):
        raise HTTPException(status_code=422, detail=error.errors)
    if isinstance(error, NotFoundError):
        raise HTTPException(status_code=404, detail=str(error))
    if isinstance(error, GameUnavailableError):
        raise HTTPException(status_code=409, detail=str(error))
    if isinstance(error, PersistenceError):
        logger.error(f"Storage failure: {error}")
        raise HTTPException(status_code=500, detail=f"Storage error: {error}")
    raise error


def word_or_404(word_id: str):
    word = repository.get(word_id)
    if word is None:
        raise_http_error(NotFoundError(word_id))
    return word


def session_or_409() -> GameSession:
    if current_session is None:
        raise_http_error(GameUnavailableError("No game in progress"))
    return current_session


app = FastAPI(title="vocabtrack API", description="English/Hebrew vocabulary practice API")


@app.on_event("startup")
async def startup():
    """Initialize storage, speech and story providers on startup."""
    store = create_storage()
    speech = None
    if os.environ.get('VOCAB_SPEECH', 'on') != 'off':
        from server.gtts_speech import GTTSSpeech
        speech = GTTSSpeech()
    init_services(store, speech, create_story_provider(store))
    logger.info(f"Loaded {repository.count} words")


@app.on_event("shutdown")
async def shutdown():
    if pronouncer:
        pronouncer.shutdown()


@app.get("/")
async def root():
    return {"service": "vocabtrack", "words": repository.count if repository else 0}


# Word endpoints
@app.get("/api/words")
async def list_words(query: str = '', status: str = None, sort_by: str = 'alphabetical'):
    """List words, optionally searched, filtered by status and sorted."""
    if status and status not in STATUSES:
        raise HTTPException(status_code=422, detail=f"Unknown status {status}")
    try:
        words = repository.list_words(query, status, sort_by)
    except ValidationError as e:
        raise_http_error(e)
    return {
        "total": len(words),
        "counts": repository.status_counts(),
        "words": [w.to_dict() for w in words]
    }


@app.post("/api/words", response_model=WordResponse)
async def add_word(request: WordCreateRequest):
    try:
        word = repository.add(request.model_dump())
    except (ValidationError, PersistenceError) as e:
        raise_http_error(e)
    return word.to_dict()


@app.delete("/api/words")
async def clear_words():
    try:
        repository.clear()
    except PersistenceError as e:
        raise_http_error(e)
    return {"success": True}


@app.get("/api/words/random")
async def random_words(count: int = 5, exclude: str = ''):
    exclude_ids = [i for i in exclude.split(',') if i]
    words = repository.sample(count, exclude_ids)
    return {"words": [w.to_dict() for w in words]}


@app.get("/api/words/travel")
async def travel_words():
    words = repository.filter_by_keywords()
    return {"total": len(words), "words": [w.to_dict() for w in words]}


@app.get("/api/words/{word_id}", response_model=WordResponse)
async def get_word(word_id: str):
    return word_or_404(word_id).to_dict()


@app.patch("/api/words/{word_id}", response_model=WordResponse)
async def update_word(word_id: str, request: WordUpdateRequest):
    word_or_404(word_id)
    try:
        word = repository.update(word_id, **request.model_dump(exclude_none=True))
    except (ValidationError, PersistenceError) as e:
        raise_http_error(e)
    return word.to_dict()


@app.delete("/api/words/{word_id}")
async def delete_word(word_id: str):
    try:
        deleted = repository.delete(word_id)
    except PersistenceError as e:
        raise_http_error(e)
    return {"deleted": deleted}


@app.post("/api/words/{word_id}/learned", response_model=WordResponse)
async def mark_learned(word_id: str):
    word_or_404(word_id)
    try:
        word = repository.mark_as_learned(word_id)
    except PersistenceError as e:
        raise_http_error(e)
    return word.to_dict()


@app.post("/api/words/{word_id}/pronounce")
async def pronounce_word(word_id: str):
    word = word_or_404(word_id)
    if pronouncer:
        pronouncer.pronounce_word(word.english)
    return {"queued": pronouncer is not None}


# Progress and statistics
@app.post("/api/attempts", response_model=WordResponse)
async def record_attempt(request: AttemptRequest):
    """Record a single answer from an external game."""
    try:
        word = statistics.record_attempt(request.word_id, request.is_correct, request.game_type)
    except PersistenceError as e:
        raise_http_error(e)
    if word is None:
        raise_http_error(NotFoundError(request.word_id))
    return word.to_dict()


@app.get("/api/statistics", response_model=StatisticsResponse)
async def get_statistics():
    return statistics.rollup()


# Games
@app.get("/api/games")
async def list_games():
    with_examples = len([w for w in repository.words if w.example.strip()])
    games = []
    for game_type, session_cls in GAMES.items():
        available = with_examples if session_cls.requires_example else repository.count
        games.append({
            "id": game_type,
            "min_words": session_cls.min_words,
            "available_words": available,
            "can_play": available >= session_cls.min_words
        })
    return {"games": games}


@app.post("/api/games/{game_type}")
async def start_game(game_type: str):
    global current_session
    try:
        current_session = start_session(game_type, repository, statistics, pronouncer)
    except GameUnavailableError as e:
        raise_http_error(e)
    current_session.play_prompt()
    return current_session.to_dict()


@app.get("/api/games/current")
async def get_current_game():
    return session_or_409().to_dict()


@app.post("/api/games/current/answer")
async def answer_question(request: AnswerRequest):
    session = session_or_409()
    if isinstance(session, (MatchingSession, TravelRevealSession)):
        raise HTTPException(status_code=409, detail=f"{session.game_type} does not take answers")
    try:
        feedback = session.submit_answer(request.answer)
    except (GameUnavailableError, PersistenceError) as e:
        raise_http_error(e)
    if session.completed:
        feedback['summary'] = session.summary()
    else:
        feedback['next'] = session.to_dict()
        session.play_prompt()
    return feedback


@app.post("/api/games/current/match")
async def match_pair(request: MatchRequest):
    session = session_or_409()
    if not isinstance(session, MatchingSession):
        raise HTTPException(status_code=409, detail="Current game is not a matching game")
    try:
        feedback = session.submit_match(request.english_id, request.hebrew_id)
    except (GameUnavailableError, PersistenceError) as e:
        raise_http_error(e)
    if session.completed:
        feedback['summary'] = session.summary()
    return feedback


@app.post("/api/games/current/reveal")
async def reveal_translation():
    session = session_or_409()
    if not isinstance(session, TravelRevealSession):
        raise HTTPException(status_code=409, detail="Current game is not the travel game")
    try:
        return session.reveal()
    except (GameUnavailableError, PersistenceError) as e:
        raise_http_error(e)


@app.post("/api/games/current/next")
async def next_travel_word():
    session = session_or_409()
    if not isinstance(session, TravelRevealSession):
        raise HTTPException(status_code=409, detail="Current game is not the travel game")
    session.next_word()
    return session.to_dict()


@app.delete("/api/games/current")
async def exit_game():
    global current_session
    summary = current_session.summary() if current_session else None
    current_session = None
    return {"summary": summary}


# Stories
@app.post("/api/stories")
async def generate_story():
    try:
        # Run in executor to not block the event loop
        loop = asyncio.get_event_loop()
        story = await loop.run_in_executor(None, stories.generate)
    except GameUnavailableError as e:
        raise_http_error(e)
    except Exception as e:
        logger.error(f"Story generation failed: {e}")
        raise HTTPException(status_code=502, detail=f"Story generation failed: {e}")
    return story


@app.get("/api/stories")
async def story_history():
    return {"stories": stories.history}


def create_app():
    """Factory function for creating the app (useful for testing)."""
    return app
