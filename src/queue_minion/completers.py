"""
prompt_toolkit completers for Queue Minion
Provides autocomplete for commands and queue names, and the interactive chooser
"""

from typing import Iterable, Optional, Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion, WordCompleter
from prompt_toolkit.document import Document
from prompt_toolkit.styles import Style

from .domain.queues import QueueStore, SelectionError
from .router import QUEUE_ARGUMENT_COMMANDS


PROMPT_STYLE = Style.from_dict({
    'prompt': '#00aa00 bold',
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'completion-menu.meta.completion': '#888888',
    'completion-menu.meta.completion.current': 'bg:#00aaaa #ffffff',
})


class QueueMinionCompleter(Completer):
    """
    Command completer with descriptions.
    Completes command names, then queue names for commands that take one.
    """

    # Format: 'command': ('icon', 'description')
    COMMANDS = {
        # Queue commands
        'create-queue': ('➕', 'Create a new empty queue'),
        'add-files': ('📥', 'Add audio files or directories to a queue'),
        'list': ('📋', 'List all queues'),
        'show': ('🔍', 'Show the tracks of a queue'),
        'shuffle': ('🔀', 'Shuffle a queue, keeping the current track first'),
        'transpose': ('↕', 'Move a track forward or backward by one'),
        'remove': ('➖', 'Remove a track from a queue'),
        'discard': ('🗑', 'Discard a queue'),

        # Playback commands
        'play': ('▶', 'Play a queue from a track'),
        'next': ('⏭', 'Play the next track of a queue'),
        'pause': ('⏸', 'Pause or resume playback'),
        'stop': ('■', 'Stop playback'),

        # System
        'help': ('❓', 'Show help'),
        'quit': ('👋', 'Exit Queue Minion'),
        'exit': ('👋', 'Exit Queue Minion'),
    }

    def __init__(self, store: Optional[QueueStore] = None):
        self.store = store

    def get_completions(self, document: Document, complete_event) -> Iterable[Completion]:
        """Generate command completions, then queue-name completions."""
        text = document.text_before_cursor.lstrip()
        words = text.split()

        if not words or (len(words) == 1 and not text.endswith(' ')):
            word = words[0].lower() if words else ''
            for command, (icon, description) in self.COMMANDS.items():
                if command.startswith(word):
                    yield Completion(
                        command,
                        start_position=-len(word),
                        display_meta=f"{icon}\t{description}"
                    )
            return

        command = words[0].lower()
        in_first_argument = len(words) == 1 or (len(words) == 2 and not text.endswith(' '))
        if command in QUEUE_ARGUMENT_COMMANDS and in_first_argument and self.store:
            word = '' if text.endswith(' ') else words[1]
            yield from complete_queue_names(self.store, word)


def complete_queue_names(store: QueueStore, word: str) -> Iterable[Completion]:
    """Queue names containing ``word``, quoted when they hold spaces."""
    needle = word.strip('"\'').lower()
    for queue in list(store.queues):
        if needle and needle not in queue.name.lower():
            continue
        text = f'"{queue.name}"' if ' ' in queue.name else queue.name
        yield Completion(
            text,
            start_position=-len(word),
            display=queue.name,
            display_meta=f"{len(queue.tracks)} tracks"
        )


class PromptChooser:
    """
    Interactive chooser: a prompt with autocomplete over the candidates.

    With no candidates the prompt takes free text (naming a new queue).
    Ctrl+C / Ctrl+D cancel the selection.
    """

    def choose_one(
        self, prompt: str, candidates: Sequence[str], default: Optional[str] = None
    ) -> str:
        completer = None
        if candidates:
            # sentence=True: labels contain spaces and must complete as a whole
            completer = WordCompleter(
                list(candidates), ignore_case=True, match_middle=True, sentence=True
            )
        session = PromptSession(
            completer=completer,
            style=PROMPT_STYLE,
            complete_while_typing=True,
        )

        try:
            answer = session.prompt(prompt, default=default or '').strip()
        except (KeyboardInterrupt, EOFError):
            raise SelectionError("Selection cancelled")

        if not answer and default is not None:
            return default
        return answer
