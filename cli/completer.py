"""Custom completer for the Sharebox REPL."""

from typing import Iterable

from prompt_toolkit.completion import Completer, Completion, PathCompleter
from prompt_toolkit.document import Document

from cli.constants import COMMANDS, ID_COMMANDS
from sharebox.manager import FileCollectionManager


class ShareboxCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - File id completion (from the held collection) for commands taking a file id
    - Local path completion for the 'upload' command
    """

    def __init__(self, manager: FileCollectionManager):
        self.manager = manager
        self.path_completer = PathCompleter(expanduser=True)

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        """
        Generate completions based on cursor position and context.
        """
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        command = tokens[0].lower()
        current_word = "" if is_typing_new_token else tokens[-1]
        argument_count = len(tokens) - 1 if not is_typing_new_token else len(tokens)

        if command == "upload":
            path_text = text[len(tokens[0]):].lstrip()
            yield from self.path_completer.get_completions(
                Document(path_text, len(path_text)), complete_event
            )
            return

        if command in ID_COMMANDS and argument_count == 1:
            yield from self._complete_file_ids(current_word, include_upload=command == "cancel")

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_file_ids(self, partial: str, include_upload: bool = False) -> Iterable[Completion]:
        """
        Complete file ids of held records, showing the filename alongside.
        """
        if include_upload and "upload".startswith(partial.lower()):
            yield Completion("upload", start_position=-len(partial), display_meta="current upload")

        for record in self.manager.files:
            if record.id.startswith(partial):
                yield Completion(
                    record.id,
                    start_position=-len(partial),
                    display_meta=record.filename,
                )
