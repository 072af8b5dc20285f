from __future__ import annotations

from console_repl.constants import DEFAULT_PROMPT


class Session:
    """Prompt, history path and echo state of one console."""

    def __init__(self, default_prompt: str = DEFAULT_PROMPT) -> None:
        self._default_prompt = default_prompt
        self._prompt = default_prompt
        self.history_path: str | None = None
        self.echo: bool = True

    @property
    def prompt(self) -> str:
        return self._prompt

    @property
    def default_prompt(self) -> str:
        return self._default_prompt

    def set_prompt(self, prompt: str) -> None:
        self._prompt = prompt

    def set_default_prompt(self, prompt: str) -> None:
        """Set the default prompt and make it the current prompt."""
        self._default_prompt = prompt
        self._prompt = prompt

    def reset_prompt(self) -> None:
        self._prompt = self._default_prompt
