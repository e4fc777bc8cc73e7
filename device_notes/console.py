from __future__ import annotations

import sys
from typing import Callable, Optional, TextIO

_YES = {"y", "yes"}
_NO = {"n", "no"}


def confirm(prompt: str, default: bool = False, read: Callable[[str], str] = input, out: Optional[TextIO] = None) -> bool:
    """Ask a yes/no question on the console.

    Empty input and end-of-file both take ``default``, so a run with no
    terminal attached never answers yes by accident.
    """
    out = out or sys.stderr
    suffix = " [Y/n] " if default else " [y/N] "
    while True:
        try:
            answer = read(prompt + suffix).strip().lower()
        except EOFError:
            print(file=out)
            return default
        if not answer:
            return default
        if answer in _YES:
            return True
        if answer in _NO:
            return False
        print("Please answer 'y' or 'n'.", file=out)


def ask(prompt: str, read: Callable[[str], str] = input) -> str:
    try:
        return read(prompt).strip()
    except EOFError:
        return ""


def is_interactive(stream: TextIO = sys.stdin) -> bool:
    return bool(getattr(stream, "isatty", lambda: False)())
