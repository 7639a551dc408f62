"""Console UI for vocabtrack."""

import requests

from cli.api_client import VocabAPIClient


class ConsoleUI:
    """Console user interface for vocabtrack."""

    def __init__(self, client: VocabAPIClient):
        self.client = client

    def print_words(self, data: dict):
        """Print the word list with status counts."""
        counts = data['counts']
        print('\n' + '=' * 60)
        print(f"WORDS ({counts['all']}) | new {counts['new']} | learning {counts['learning']} | "
              f"learned {counts['learned']} | weak {counts['weak']}")
        print('=' * 60)
        for word in data['words']:
            attempts = word['times_correct'] + word['times_incorrect']
            print(f"  {word['english']:<20} {word['hebrew']:<20} [{word['status']}] "
                  f"{word['times_correct']}/{attempts}")
            if word['example']:
                print(f"      \"{word['example']}\"")
        print('=' * 60)

    def print_statistics(self, stats: dict):
        """Print the statistics rollup."""
        print('\n' + '=' * 50)
        print('STATISTICS')
        print('=' * 50)
        print(f"\nWords: {stats['total_words']} (learned {stats['learned']}, "
              f"learning {stats['learning']}, weak {stats['weak']}, new {stats['new']})")
        print(f"Total quizzes: {stats['total_quizzes']} | correct: {stats['total_correct']}")

        print('\nLast 7 days:')
        for day in stats['last_7_days']:
            bar = '#' * day['quizzes']
            print(f"  {day['date']}  {day['quizzes']:>3} quizzes  {day['success_rate']:>5}%  {bar}")

        if stats['weak_words']:
            print('\nWords to practice:')
            for word in stats['weak_words']:
                print(f"  {word['english']:<20} {word['hebrew']:<20} {round(word['success_rate'] * 100)}%")
        print('\n' + '=' * 50 + '\n')

    def print_summary(self, summary: dict):
        print('-' * 40)
        print(f"Game over! Score: {summary['score']}/{summary['attempts']} "
              f"({summary['success_rate']}%)")
        print('-' * 40)

    def add_word(self):
        english = input('English word: ').strip()
        hebrew = input('Hebrew translation: ').strip()
        example = input('Example sentence (optional): ').strip()
        try:
            word = self.client.add_word(english, hebrew, example)
            print(f"Added '{word['english']}'.")
        except requests.HTTPError as e:
            print(f"Could not add word: {e.response.json().get('detail')}")

    def play_quiz(self, state: dict):
        """Play a multiple-choice or fill-in-blank game."""
        while not state['completed']:
            question = state['current_question']
            print(f"\nQuestion {state['question_number']}/{state['total_questions']}")
            print(f">>> {question['prompt']}")
            for i, option in enumerate(question['options'], 1):
                print(f"  {i}. {option}")

            choice = ''
            while not choice.isdigit() or not 1 <= int(choice) <= len(question['options']):
                choice = input('==> ').strip()
                if choice.lower() == 'exit':
                    self.print_summary(self.client.exit_game()['summary'])
                    return

            result = self.client.submit_answer(question['options'][int(choice) - 1])
            if result['is_correct']:
                print('Correct!')
            else:
                print(f"Wrong. The answer is: {result['correct_answer']}")

            if result['completed']:
                self.print_summary(result['summary'])
                return
            state = result['next']

    def play_matching(self, state: dict):
        """Play the matching game by typing pairs of numbers."""
        while not state['completed']:
            unmatched = [w for w in state['english'] if w['id'] not in state['matches']]
            matched_ids = set(state['matches'].values())
            targets = [w for w in state['hebrew'] if w['id'] not in matched_ids]
            print()
            for i, word in enumerate(unmatched, 1):
                print(f"  {i}. {word['english']}")
            for i, word in enumerate(targets):
                print(f"  {chr(ord('a') + i)}. {word['hebrew']}")

            choice = input('match (e.g. 1a) ==> ').strip().lower()
            if choice == 'exit':
                self.print_summary(self.client.exit_game()['summary'])
                return
            if len(choice) < 2 or not choice[:-1].isdigit():
                continue
            e_index, h_index = int(choice[:-1]) - 1, ord(choice[-1]) - ord('a')
            if not (0 <= e_index < len(unmatched) and 0 <= h_index < len(targets)):
                continue

            result = self.client.submit_match(unmatched[e_index]['id'], targets[h_index]['id'])
            print('Match!' if result['is_correct'] else 'Not a match.')
            if result['completed']:
                self.print_summary(result['summary'])
                return
            if result['is_correct']:
                state['matches'][unmatched[e_index]['id']] = targets[h_index]['id']

    def play_travel(self, state: dict):
        """Reveal travel words one by one."""
        while True:
            print(f"\nRound {state['round']}: {state['english']}")
            command = input('Enter to reveal, "exit" to stop ==> ').strip().lower()
            if command == 'exit':
                self.print_summary(self.client.exit_game()['summary'])
                return
            revealed = self.client.reveal()
            print(f"  {revealed['english']} = {revealed['hebrew']}  (score {revealed['score']})")
            state = self.client.next_travel_word()

    def play_game(self):
        games = self.client.list_games()['games']
        for i, game in enumerate(games, 1):
            note = '' if game['can_play'] else f" (needs {game['min_words']} words)"
            print(f"  {i}. {game['id']}{note}")
        choice = input('Game ==> ').strip()
        if not choice.isdigit() or not 1 <= int(choice) <= len(games):
            return
        game = games[int(choice) - 1]
        try:
            state = self.client.start_game(game['id'])
        except requests.HTTPError as e:
            print(f"Cannot start game: {e.response.json().get('detail')}")
            return

        if game['id'] == 'matching':
            self.play_matching(state)
        elif game['id'] == 'hotel-game':
            self.play_travel(state)
        else:
            self.play_quiz(state)

    def run(self):
        """Run the main application loop."""
        # Check server connection
        try:
            health = self.client.health_check()
            print(f"Connected to {health['service']} server ({health['words']} words)")
        except Exception:
            print(f"Error: Cannot connect to server at {self.client.base_url}")
            print("Make sure the server is running: python run_server.py")
            return

        commands = {
            'list': lambda: self.print_words(self.client.list_words()),
            'add': self.add_word,
            'play': self.play_game,
            'stats': lambda: self.print_statistics(self.client.get_statistics()),
            'story': lambda: print('\n' + self.client.generate_story()['text'] + '\n'),
        }
        print('Commands: "list", "add", "play", "stats", "story", "exit"\n')

        while True:
            user_input = input('> ').strip().lower()
            if user_input == 'exit':
                print('Goodbye!')
                return
            action = commands.get(user_input)
            if action is None:
                print(f"Unknown command. Try one of: {', '.join(commands)}, exit")
                continue
            try:
                action()
            except requests.HTTPError as e:
                print(f"Error: {e.response.status_code} {e.response.text}")
            except requests.RequestException as e:
                print(f"Error talking to server: {e}")
