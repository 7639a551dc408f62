"""Mastery classification from a word's attempt counters."""

from .config import (
    MIN_ATTEMPTS_FOR_STATUS, LEARNED_RATE_THRESHOLD, WEAK_RATE_THRESHOLD,
    STATUS_NEW, STATUS_LEARNING, STATUS_LEARNED, STATUS_WEAK
)


def classify(prior_correct: int, prior_incorrect: int, is_correct: bool,
             prior_status: str = STATUS_NEW) -> tuple[int, int, str]:
    """Apply one attempt to a word's counters and derive its status.

    Returns (new_correct, new_incorrect, new_status). Until the word has
    MIN_ATTEMPTS_FOR_STATUS attempts the prior status is kept; after that
    the success rate decides: >= 0.8 learned, <= 0.4 weak, else learning.
    """
    if prior_correct < 0 or prior_incorrect < 0:
        raise ValueError("Attempt counters cannot be negative")

    new_correct = prior_correct + 1 if is_correct else prior_correct
    new_incorrect = prior_incorrect if is_correct else prior_incorrect + 1

    total = new_correct + new_incorrect
    if total < MIN_ATTEMPTS_FOR_STATUS:
        return (new_correct, new_incorrect, prior_status)

    rate = new_correct / total
    if rate >= LEARNED_RATE_THRESHOLD:
        status = STATUS_LEARNED
    elif rate <= WEAK_RATE_THRESHOLD:
        status = STATUS_WEAK
    else:
        status = STATUS_LEARNING
    return (new_correct, new_incorrect, status)
