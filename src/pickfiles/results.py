"""
Per-file outcomes and the running tally printed at the end of a session.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union


@dataclass(frozen=True)
class Success:
    source: Path
    target: Path


@dataclass(frozen=True)
class Skipped:
    source: Path
    reason: str


@dataclass(frozen=True)
class Failed:
    source: Path
    message: str
    cause: Optional[BaseException] = None


OperationResult = Union[Success, Skipped, Failed]


@dataclass
class ProcessingState:
    """Counts of what happened to each visited file, in visiting order."""

    total_files: int = 0
    copied_files: int = 0
    skipped_files: int = 0
    error_files: int = 0
    results: List[OperationResult] = field(default_factory=list)

    @property
    def processed_files(self) -> int:
        return self.copied_files + self.skipped_files + self.error_files

    def record(self, result: OperationResult) -> None:
        if isinstance(result, Success):
            self.copied_files += 1
        elif isinstance(result, Skipped):
            self.skipped_files += 1
        elif isinstance(result, Failed):
            self.error_files += 1
        else:
            raise TypeError(f"Unknown operation result: {result!r}")
        self.results.append(result)

    def format_summary(self) -> str:
        return "\n".join(
            [
                "",
                "Operation Summary:",
                "================",
                f"Total files found: {self.total_files}",
                f"Files copied: {self.copied_files}",
                f"Files skipped: {self.skipped_files}",
                f"Files with errors: {self.error_files}",
            ]
        )

    def format_errors(self) -> str:
        failed = [r for r in self.results if isinstance(r, Failed)]
        if not failed:
            return ""
        lines = ["", "Errors:"]
        for r in failed:
            lines.append(f"    - {r.source}: {r.message}")
        return "\n".join(lines)
