"""Fire-and-forget pronunciation dispatch."""

import logging
from concurrent.futures import Future, ThreadPoolExecutor

from .config import WORD_SPEECH_RATE, SENTENCE_SPEECH_RATE
from .interfaces import SpeechProvider

logger = logging.getLogger(__name__)


class Pronouncer:
    """Runs a SpeechProvider on a background worker.

    Playback failures are logged and never propagate to the caller.
    """

    def __init__(self, provider: SpeechProvider, executor: ThreadPoolExecutor = None):
        self.provider = provider
        self.executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix='speech')

    def _log_failure(self, future: Future) -> None:
        error = future.exception()
        if error is not None:
            logger.warning(f"Pronunciation failed: {error}")

    def pronounce(self, text: str, rate: float = 1.0) -> Future | None:
        if not text or not isinstance(text, str):
            logger.warning(f"Skipping pronunciation of invalid text {text!r}")
            return None
        future = self.executor.submit(self.provider.pronounce, text, rate)
        future.add_done_callback(self._log_failure)
        return future

    def pronounce_word(self, word: str) -> Future | None:
        return self.pronounce(word, WORD_SPEECH_RATE)

    def pronounce_sentence(self, sentence: str) -> Future | None:
        return self.pronounce(sentence, SENTENCE_SPEECH_RATE)

    def shutdown(self) -> None:
        self.executor.shutdown(wait=True)
