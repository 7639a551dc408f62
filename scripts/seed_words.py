"""English/Hebrew starter vocabulary, mostly hotel and travel words.

Usage: python -m scripts.seed_words [--reset] [--state-dir DIR]
"""

import argparse
import logging

from core.config import WORDS_KEY, STATS_KEY
from core.errors import ValidationError
from core.repository import WordRepository
from server.file_storage import FileStorage

logger = logging.getLogger(__name__)


def get_seed_words():
    """Starter words as a list of {english, hebrew, example} dicts."""
    return [
        {'english': 'hotel', 'hebrew': 'מלון',
         'example': 'We stayed at a small hotel near the beach.'},
        {'english': 'room', 'hebrew': 'חדר',
         'example': 'Our room has a view of the sea.'},
        {'english': 'key', 'hebrew': 'מפתח',
         'example': 'I left the key at the front desk.'},
        {'english': 'reception', 'hebrew': 'קבלה',
         'example': 'Please ask at reception for a map.'},
        {'english': 'luggage', 'hebrew': 'מזוודות',
         'example': 'The porter carried our luggage upstairs.'},
        {'english': 'breakfast', 'hebrew': 'ארוחת בוקר',
         'example': 'Breakfast is served until ten.'},
        {'english': 'towel', 'hebrew': 'מגבת',
         'example': 'Can I have a clean towel, please?'},
        {'english': 'reservation', 'hebrew': 'הזמנה',
         'example': 'I have a reservation for two nights.'},
        {'english': 'elevator', 'hebrew': 'מעלית',
         'example': 'The elevator is next to the stairs.'},
        {'english': 'shower', 'hebrew': 'מקלחת',
         'example': 'The shower in our room is very hot.'},
        {'english': 'airport', 'hebrew': 'שדה תעופה',
         'example': 'We took a taxi to the airport.'},
        {'english': 'ticket', 'hebrew': 'כרטיס',
         'example': 'She bought a train ticket online.'},
        {'english': 'beach', 'hebrew': 'חוף',
         'example': 'The children played on the beach all day.'},
        {'english': 'market', 'hebrew': 'שוק',
         'example': 'We bought fresh fruit at the market.'},
        {'english': 'delicious', 'hebrew': 'טעים',
         'example': 'The soup was delicious.'},
        {'english': 'friendly', 'hebrew': 'ידידותי',
         'example': 'The staff were very friendly.'},
    ]


def seed(storage: FileStorage, reset: bool = False) -> int:
    """Add the starter words that are not in the collection yet. Returns the count added."""
    if reset:
        storage.delete(WORDS_KEY)
        storage.delete(STATS_KEY)

    repository = WordRepository(storage)
    existing = {w.english for w in repository.words}
    added = 0
    for candidate in get_seed_words():
        if candidate['english'] in existing:
            continue
        try:
            repository.add(candidate)
        except ValidationError as e:
            logger.warning(f"Skipping seed word {candidate['english']!r}: {e}")
            continue
        added += 1
    return added


def main():
    logging.basicConfig(level=logging.INFO)
    parser = argparse.ArgumentParser(description='Seed vocabtrack with starter words')
    parser.add_argument('--reset', action='store_true', help='Remove existing words and statistics first')
    parser.add_argument('--state-dir', default=None, help='Directory holding the JSON state files')
    args = parser.parse_args()

    added = seed(FileStorage(state_dir=args.state_dir), reset=args.reset)
    print(f"Added {added} words.")


if __name__ == '__main__':
    main()
