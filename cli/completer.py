"""Custom completer for FileHeap CLI with local file autocompletion."""

from pathlib import Path
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS


class FileHeapCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Local path completion for the file argument of 'upload'
    """

    def __init__(self, base_dir: Path | None = None):
        self.base_dir = base_dir

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        """
        Generate completions based on cursor position and context.

        For the first token, completes command names.
        For the second argument of 'upload' (the local file), completes paths.
        """
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        if tokens[0].lower() != "upload":
            return

        # upload <id> <local-file> [remote-path]
        argument_index = len(tokens) - 1 if not is_typing_new_token else len(tokens)
        if argument_index != 2:
            return

        current_word = "" if is_typing_new_token else tokens[-1]
        yield from self._complete_local_paths(current_word)

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_local_paths(self, partial: str) -> Iterable[Completion]:
        """
        Complete local file and directory paths. Directories get a trailing
        slash so completion can continue into them.
        """
        base = self.base_dir or Path.cwd()
        directory, _, name_prefix = partial.rpartition("/")
        search_dir = base / directory if directory else base
        if partial.startswith("/"):
            search_dir = Path(directory or "/")

        if not search_dir.is_dir():
            return

        entries = []
        for item in search_dir.iterdir():
            if not item.name.startswith(name_prefix):
                continue
            if item.name.startswith(".") and not name_prefix.startswith("."):
                continue
            entries.append(item)

        for item in sorted(entries, key=lambda p: p.name):
            suffix = "/" if item.is_dir() else ""
            if directory or partial.startswith("/"):
                completion = f"{directory}/{item.name}{suffix}"
            else:
                completion = f"{item.name}{suffix}"
            yield Completion(completion, start_position=-len(partial))
