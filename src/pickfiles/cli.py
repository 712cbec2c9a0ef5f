"""
CLI entrypoint for pickfiles package.
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from colorama import Fore, init as colorama_init

from . import __version__
from .core import (
    PREVIEW_LINES,
    Config,
    ConfigError,
    CopyExecutor,
    DiscoveryError,
    InputClosedError,
    discover_files,
    echo,
    render_preview,
    validate_config,
    verbose_echo,
)
from .prompt import ActionKind, DecisionPrompt, LineReader, confirm_overwrite
from .results import Failed, ProcessingState, Skipped, Success

USER_DECLINED = "user declined"


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):
        print(f"Error: {message}", file=sys.stderr)
        self.print_usage(sys.stderr)
        sys.exit(1)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = _ArgumentParser(
        prog="pickfiles",
        description="Find files by extension, preview them and pick which ones to copy.",
    )
    p.add_argument("-s", "--source", type=Path, default=Path("."), help="Source dir (default: .)")
    p.add_argument("-t", "--target", type=Path, help="Target dir (asked for if omitted)")
    p.add_argument("-e", "--extension", help="File extension, e.g. txt or .txt (asked for if omitted)")
    p.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to a file with patterns to exclude from discovery (one per line)",
    )
    p.add_argument(
        "-n",
        "--preview-lines",
        type=int,
        default=PREVIEW_LINES,
        help=f"Lines of content shown per file (default {PREVIEW_LINES})",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    ns = p.parse_args(argv)
    if ns.preview_lines < 1:
        p.error("--preview-lines must be at least 1")
    return ns


def _ask_missing(value, reader: LineReader, prompt: str):
    if value is not None:
        return value
    try:
        return reader.read_line(prompt)
    except InputClosedError:
        return None


def _report(result) -> None:
    if isinstance(result, Success):
        echo(f"Copied to {result.target}", Fore.GREEN)
    elif isinstance(result, Skipped):
        echo(f"Skipped ({result.reason})", Fore.YELLOW)
    elif isinstance(result, Failed):
        echo(f"Error: {result.message}", Fore.RED)


def run_session(
    config: Config,
    reader: LineReader,
    verbose: bool = False,
    preview_lines: int = PREVIEW_LINES,
) -> ProcessingState:
    """Walk the discovered files one by one, asking the user what to do with each."""
    state = ProcessingState()

    verbose_echo(verbose, f"Scanning {config.source_dir} for *{config.extension} …")
    try:
        files = discover_files(config)
    except DiscoveryError as e:
        echo(f"Error: {e}", Fore.RED, file=sys.stderr)
        files = []

    if not files:
        echo(f"No files with extension {config.extension} found in {config.source_dir}.")
        return state

    state.total_files = len(files)
    verbose_echo(verbose, f"{len(files)} candidate files found.")

    decisions = DecisionPrompt(reader)
    executor = CopyExecutor(config.target_dir, lambda dest: confirm_overwrite(reader, dest))

    try:
        for idx, path in enumerate(files, 1):
            print(f"\n[{idx}/{len(files)}]")
            print(render_preview(path, preview_lines))
            action = decisions.read_decision(path)

            if action.kind is ActionKind.QUIT:
                echo("Stopping; remaining files were not processed.", Fore.YELLOW)
                break
            if action.kind is ActionKind.COPY:
                result = executor.copy(path)
            elif action.kind is ActionKind.SKIP:
                result = Skipped(path, USER_DECLINED)
            else:
                raise AssertionError(f"Unhandled action: {action.kind}")

            state.record(result)
            _report(result)
            if isinstance(result, Failed):
                verbose_echo(verbose, f"! {result.source}: {result.cause!r}")
    except InputClosedError as e:
        echo(f"\n{e}; stopping.", Fore.YELLOW)

    print(state.format_summary())
    errors = state.format_errors()
    if errors:
        echo(errors, Fore.RED)
    return state


def main(argv: Optional[List[str]] = None) -> None:
    try:
        ns = _parse_args(argv)
        colorama_init()
        print(f"pickfiles v{__version__} - interactive file selection and copy")

        reader = LineReader()
        target = _ask_missing(ns.target, reader, "Target directory: ")
        extension = _ask_missing(ns.extension, reader, "File extension (e.g. txt): ")

        try:
            config = validate_config(ns.source, target, extension, exclude_file=ns.config)
        except ConfigError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

        if ns.verbose:
            print(f"[pickfiles] Source: {config.source_dir}")
            print(f"[pickfiles] Target: {config.target_dir}")
            if ns.config:
                print(f"[pickfiles] Loaded extra patterns from {ns.config}")

        run_session(config, reader, verbose=ns.verbose, preview_lines=ns.preview_lines)

    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
