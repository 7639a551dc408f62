"""gTTS-based pronunciation provider."""

import hashlib
import logging
import os
from pathlib import Path

from gtts import gTTS

from core.interfaces import SpeechProvider

logger = logging.getLogger(__name__)

# Rates below this render with gTTS's slow mode
SLOW_RATE_THRESHOLD = 0.85


class GTTSSpeech(SpeechProvider):
    """Renders English text to mp3 files, cached by text and speed."""

    def __init__(self, audio_dir: str = None, lang: str = 'en', tld: str = 'us'):
        self.audio_dir = Path(audio_dir or os.environ.get('VOCAB_AUDIO_DIR', './data/audio'))
        self.lang = lang
        self.tld = tld

    def _audio_path(self, text: str, slow: bool) -> Path:
        digest = hashlib.sha256(f"{text}|{slow}".encode()).hexdigest()[:16]
        return self.audio_dir / f"{digest}.mp3"

    def pronounce(self, text: str, rate: float = 1.0) -> str | None:
        slow = rate < SLOW_RATE_THRESHOLD
        path = self._audio_path(text, slow)
        if path.exists():
            return str(path)
        self.audio_dir.mkdir(parents=True, exist_ok=True)
        tts = gTTS(text=text, lang=self.lang, tld=self.tld, slow=slow)
        tts.save(str(path))
        logger.info(f"Pronunciation generated for {text!r}, file: {path.name}")
        return str(path)
