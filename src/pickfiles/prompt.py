"""
Line-based user prompts: the per-file decision and overwrite confirmation.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, TextIO

from colorama import Fore

from .core import InputClosedError, echo


class ActionKind(Enum):
    COPY = "copy"
    SKIP = "skip"
    QUIT = "quit"


@dataclass(frozen=True)
class UserAction:
    kind: ActionKind
    path: Path


_DECISIONS: Dict[str, ActionKind] = {
    "y": ActionKind.COPY,
    "yes": ActionKind.COPY,
    "n": ActionKind.SKIP,
    "no": ActionKind.SKIP,
    "q": ActionKind.QUIT,
    "quit": ActionKind.QUIT,
}

_YES_NO: Dict[str, bool] = {"y": True, "yes": True, "n": False, "no": False}


class LineReader:
    """Reads one line of user input at a time."""

    def __init__(self, stream: Optional[TextIO] = None, out: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdin
        self.out = out if out is not None else sys.stdout

    def read_line(self, prompt: str = "") -> str:
        if prompt:
            self.out.write(prompt)
            self.out.flush()
        line = self.stream.readline()
        if not line:
            raise InputClosedError("Input closed while waiting for an answer")
        return line.rstrip("\r\n")


class DecisionPrompt:
    def __init__(self, reader: LineReader):
        self.reader = reader

    def read_decision(self, path: Path) -> UserAction:
        """Ask until the user types a recognised answer; there is no default."""
        while True:
            answer = self.reader.read_line(f"Copy {path.name}? [y]es / [n]o / [q]uit: ")
            kind = _DECISIONS.get(answer.strip().lower())
            if kind is not None:
                return UserAction(kind, path)
            echo("Please answer y(es), n(o) or q(uit).", Fore.YELLOW)


def confirm_overwrite(reader: LineReader, destination: Path) -> bool:
    while True:
        answer = reader.read_line(f"'{destination}' already exists. Overwrite? [y]es / [n]o: ")
        choice = _YES_NO.get(answer.strip().lower())
        if choice is not None:
            return choice
        echo("Please answer y(es) or n(o).", Fore.YELLOW)
