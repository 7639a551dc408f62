"""Utility functions for vocabtrack."""

import re

from .config import ENGLISH_PATTERN, EXAMPLE_MAX_LENGTH, BLANK
from .errors import ValidationError


def validate_word_fields(candidate: dict, partial: bool = False) -> dict:
    """Validate and normalize english/hebrew/example fields.

    Returns the cleaned fields. With partial=True only the fields present
    in `candidate` are checked. Raises ValidationError listing every bad field.
    """
    errors = {}
    cleaned = {}

    if not partial or 'english' in candidate:
        english = (candidate.get('english') or '').strip()
        if not english:
            errors['english'] = 'English word is required'
        elif not re.match(ENGLISH_PATTERN, english):
            errors['english'] = 'English word may only contain English letters'
        else:
            cleaned['english'] = english.lower()

    if not partial or 'hebrew' in candidate:
        hebrew = (candidate.get('hebrew') or '').strip()
        if not hebrew:
            errors['hebrew'] = 'Hebrew translation is required'
        else:
            cleaned['hebrew'] = hebrew

    if not partial or 'example' in candidate:
        example = candidate.get('example') or ''
        if len(example) > EXAMPLE_MAX_LENGTH:
            errors['example'] = f'Example sentence is too long (max {EXAMPLE_MAX_LENGTH} characters)'
        else:
            cleaned['example'] = example.strip()

    if errors:
        raise ValidationError(errors)
    return cleaned


def make_cloze(sentence: str, word: str) -> str:
    """Replace every whole-word occurrence of `word` in `sentence` with a blank."""
    pattern = r'\b' + re.escape(word) + r'\b'
    return re.sub(pattern, BLANK, sentence, flags=re.IGNORECASE)


def contains_word(text: str, word: str) -> bool:
    """Whole-word, case-insensitive occurrence check."""
    return re.search(r'\b' + re.escape(word) + r'\b', text, flags=re.IGNORECASE) is not None


def success_rate(correct: int, total: int) -> float:
    """Percentage of correct answers rounded to one decimal, 0 when nothing was tried."""
    if total == 0:
        return 0
    return round(correct / total * 100, 1)
