"""REST API client for the vocabtrack server."""

import requests


class VocabAPIClient:
    """Client for communicating with the vocabtrack REST API."""

    def __init__(self, base_url: str = "http://localhost:8000"):
        self.base_url = base_url.rstrip('/')
        self.session = requests.Session()

    def _get(self, endpoint: str, params: dict = None) -> dict:
        """Make a GET request."""
        response = self.session.get(f"{self.base_url}{endpoint}", params=params or {})
        response.raise_for_status()
        return response.json()

    def _post(self, endpoint: str, data: dict = None) -> dict:
        """Make a POST request."""
        response = self.session.post(f"{self.base_url}{endpoint}", json=data or {})
        response.raise_for_status()
        return response.json()

    def _delete(self, endpoint: str) -> dict:
        """Make a DELETE request."""
        response = self.session.delete(f"{self.base_url}{endpoint}")
        response.raise_for_status()
        return response.json()

    def health_check(self) -> dict:
        """Check if the server is running."""
        return self._get("/")

    def list_words(self, query: str = '', status: str = None, sort_by: str = 'alphabetical') -> dict:
        params = {'query': query, 'sort_by': sort_by}
        if status:
            params['status'] = status
        return self._get("/api/words", params)

    def add_word(self, english: str, hebrew: str, example: str = '') -> dict:
        return self._post("/api/words", {'english': english, 'hebrew': hebrew, 'example': example})

    def delete_word(self, word_id: str) -> dict:
        return self._delete(f"/api/words/{word_id}")

    def mark_learned(self, word_id: str) -> dict:
        return self._post(f"/api/words/{word_id}/learned")

    def get_statistics(self) -> dict:
        return self._get("/api/statistics")

    def list_games(self) -> dict:
        return self._get("/api/games")

    def start_game(self, game_type: str) -> dict:
        return self._post(f"/api/games/{game_type}")

    def submit_answer(self, answer: str) -> dict:
        return self._post("/api/games/current/answer", {'answer': answer})

    def submit_match(self, english_id: str, hebrew_id: str) -> dict:
        return self._post("/api/games/current/match", {'english_id': english_id, 'hebrew_id': hebrew_id})

    def reveal(self) -> dict:
        return self._post("/api/games/current/reveal")

    def next_travel_word(self) -> dict:
        return self._post("/api/games/current/next")

    def exit_game(self) -> dict:
        return self._delete("/api/games/current")

    def generate_story(self) -> dict:
        return self._post("/api/stories")
