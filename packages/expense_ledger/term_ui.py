"""Tiny terminal UI helpers (prompt_toolkit-based).

These prompts belong to the presentation side: the ledger core performs
deletes and clears unconditionally, and the CLI asks for confirmation here
first. Kept separate from the CLI so they can be driven with pipe input in
tests.
"""

from __future__ import annotations

from collections.abc import Iterable

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.validation import ValidationError, Validator

_YES = {"y", "yes"}
_NO = {"n", "no"}


def _session(session: PromptSession | None, kb: KeyBindings) -> PromptSession:
    if session is None:
        return PromptSession(key_bindings=kb)
    return PromptSession(
        input=getattr(session, "input", None),
        output=getattr(session, "output", None),
        key_bindings=kb,
    )


def confirm_action(
    message: str,
    *,
    default: bool = False,
    session: PromptSession | None = None,
) -> bool:
    """Ask a yes/no question; Enter takes ``default`` and Esc answers no."""

    kb = KeyBindings()

    @kb.add("escape")
    def _(event) -> None:  # pragma: no cover - exercised indirectly
        event.app.exit(result="n")

    class _YesNo(Validator):
        def validate(self, document) -> None:
            text = document.text.strip().lower()
            if text and text not in _YES | _NO:
                raise ValidationError(message="Please answer y or n.")

    suffix = " [Y/n] " if default else " [y/N] "
    answer = _session(session, kb).prompt(
        message.rstrip() + suffix,
        validator=_YesNo(),
        validate_while_typing=False,
    )
    text = (answer or "").strip().lower()
    if not text:
        return default
    return text in _YES


def prompt_category(
    categories: Iterable[str],
    *,
    default: str = "",
    session: PromptSession | None = None,
    message: str = "Category: ",
) -> str:
    """Prompt for a category with completion over the ones already in use.

    A case-insensitive match of a known category returns that category's
    stored spelling; anything else is returned as typed (trimmed).
    """

    words = sorted(set(categories), key=str.lower)
    canonical = {w.lower(): w for w in words}
    completer = WordCompleter(words, ignore_case=True, match_middle=True, sentence=True)

    kb = KeyBindings()
    value = _session(session, kb).prompt(message, default=default, completer=completer)
    value = (value or "").strip()
    return canonical.get(value.lower(), value)


__all__ = ["confirm_action", "prompt_category"]
