"""
Core logic for pickfiles package.
"""

from __future__ import annotations

import datetime
import errno
import os
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

import pathspec
from colorama import Style

from .results import Failed, OperationResult, Skipped, Success


# Exceptions
class PickfilesError(Exception): ...
class ConfigError(PickfilesError): ...
class MissingValueError(ConfigError): ...
class InvalidSourceError(ConfigError): ...
class InvalidTargetError(ConfigError): ...
class InvalidExtensionError(ConfigError): ...
class ConfigFileError(ConfigError): ...
class InputClosedError(PickfilesError): ...


class ErrorKind(Enum):
    ACCESS_DENIED = "access denied"
    NOT_FOUND = "not found"
    FS_UNAVAILABLE = "file system unavailable"
    GENERIC_IO = "I/O error"


class DiscoveryError(PickfilesError):
    def __init__(self, kind: ErrorKind, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.kind = kind
        self.cause = cause


_FS_UNAVAILABLE_ERRNOS = {
    errno.ENOSPC,
    errno.EROFS,
    errno.EIO,
    errno.ENODEV,
    errno.ENXIO,
    getattr(errno, "EDQUOT", errno.ENOSPC),
}


def classify_os_error(exc: OSError) -> ErrorKind:
    """Map an ``OSError`` onto one of the user-facing failure categories."""
    if isinstance(exc, PermissionError) or exc.errno in (errno.EACCES, errno.EPERM):
        return ErrorKind.ACCESS_DENIED
    if isinstance(exc, FileNotFoundError):
        return ErrorKind.NOT_FOUND
    if exc.errno in _FS_UNAVAILABLE_ERRNOS:
        return ErrorKind.FS_UNAVAILABLE
    return ErrorKind.GENERIC_IO


# Console helpers
def echo(msg: str, color: str = "", file=None) -> None:
    if color:
        msg = color + msg + Style.RESET_ALL
    print(msg, file=file)


def verbose_echo(verbose: bool, msg: str) -> None:
    if verbose:
        print(f"[pickfiles] {msg}")


# Configuration
@dataclass(frozen=True)
class Config:
    source_dir: Path
    target_dir: Path
    extension: str
    exclude: Optional["pathspec.PathSpec"] = None


def normalize_extension(extension: str) -> str:
    ext = extension.strip()
    if not ext.startswith("."):
        ext = "." + ext
    if len(ext) <= 1:
        raise InvalidExtensionError(
            f"Invalid extension '{extension}': expected something like '.txt' or 'txt'"
        )
    return ext


def load_extra_patterns(config_path: Path) -> "pathspec.PathSpec":
    if not config_path.exists():
        raise ConfigFileError(f"Config file '{config_path}' does not exist")
    if not config_path.is_file():
        raise ConfigFileError(f"'{config_path}' is not a file")
    try:
        with config_path.open("r", encoding="utf-8") as fh:
            lines = [
                ln.strip()
                for ln in fh
                if ln.strip() and not ln.lstrip().startswith("#")
            ]
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileError(f"Could not read config file '{config_path}': {e}")
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


def _resolve(value, label: str) -> Path:
    if value is None or not str(value).strip():
        raise MissingValueError(f"{label} is required")
    try:
        return Path(str(value).strip()).expanduser().resolve()
    except (OSError, RuntimeError) as e:
        raise MissingValueError(f"Could not resolve {label.lower()} '{value}': {e}")


def _target_is_usable(target: Path) -> bool:
    if target.exists():
        return target.is_dir() and os.access(target, os.W_OK | os.X_OK)
    parent = target.parent
    if parent == target:
        return False
    return parent.is_dir() and os.access(parent, os.W_OK | os.X_OK)


def validate_config(
    source_dir,
    target_dir,
    extension: Optional[str],
    exclude_file: Optional[Path] = None,
) -> Config:
    """
    Check the user's settings and build an immutable :class:`Config`.

    The source must be a readable directory. The target must be a writable
    directory, or a missing directory whose parent is writable so it can be
    created on the first copy. The extension gets a leading dot if it lacks
    one.
    """
    source = _resolve(source_dir, "Source directory")
    target = _resolve(target_dir, "Target directory")
    if extension is None or not extension.strip():
        raise MissingValueError("File extension is required")

    if not source.exists():
        raise InvalidSourceError(f"Source directory '{source}' does not exist")
    if not source.is_dir():
        raise InvalidSourceError(f"Source path '{source}' is not a directory")
    if not os.access(source, os.R_OK | os.X_OK):
        raise InvalidSourceError(f"Source directory '{source}' is not readable")

    if not _target_is_usable(target):
        raise InvalidTargetError(
            f"Target directory '{target}' is not writable and cannot be created"
        )

    ext = normalize_extension(extension)
    exclude = load_extra_patterns(Path(exclude_file).expanduser()) if exclude_file else None
    return Config(source_dir=source, target_dir=target, extension=ext, exclude=exclude)


# File discovery
def _raise_walk_error(err: OSError) -> None:
    raise err


def discover_files(config: Config) -> List[Path]:
    """Recursively collect files under the source whose name ends with the extension."""
    root = config.source_dir
    found: List[Path] = []
    try:
        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
            dirnames.sort()
            for name in filenames:
                if not name.endswith(config.extension):
                    continue
                p = Path(dirpath) / name
                if not p.is_file():
                    continue
                if config.exclude and config.exclude.match_file(
                    p.relative_to(root).as_posix()
                ):
                    continue
                found.append(p)
    except OSError as e:
        kind = classify_os_error(e)
        raise DiscoveryError(kind, f"Could not scan directory '{root}' ({kind.value}): {e}", e)
    return sorted(found)


# Preview
PREVIEW_LINES = 20
_SNIFF_BYTES = 8192


def format_size(size: int) -> str:
    if size < 1024:
        return f"{size} bytes"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def _is_binary(data: bytes) -> bool:
    return b"\0" in data


def _preview_body(path: Path, max_lines: int) -> List[str]:
    try:
        lines: List[str] = []
        remaining = 0
        with path.open("rb") as fh:
            if _is_binary(fh.read(_SNIFF_BYTES)):
                return ["[content unavailable: binary file]"]
            fh.seek(0)
            # only the shown head is decoded; the tail is just counted
            for idx, raw in enumerate(fh, 1):
                if idx <= max_lines:
                    text = raw.decode("utf-8").rstrip("\r\n")
                    lines.append(f"{idx:03d}: {text}")
                else:
                    remaining += 1
    except UnicodeDecodeError:
        return ["[content unavailable: not a UTF-8 text file]"]
    except OSError as e:
        return [f"[content unavailable: {e.strerror or e}]"]
    if not lines:
        lines.append("(empty file)")
    if remaining:
        lines.append(f"... ({remaining} more lines)")
    return lines


def render_preview(path: Path, max_lines: int = PREVIEW_LINES) -> str:
    """
    Render file metadata followed by the first *max_lines* numbered lines.

    Only the displayed prefix is held in memory; the rest of the file is
    streamed to count the remaining lines.
    """
    try:
        st = path.stat()
        size = format_size(st.st_size)
        modified = datetime.datetime.fromtimestamp(st.st_mtime).strftime("%Y-%m-%d %H:%M:%S")
    except OSError:
        size = modified = "unknown"

    out = [
        f"File: {path.absolute()}",
        f"Size: {size}",
        f"Modified: {modified}",
        "--- Preview ---",
    ]
    out.extend(_preview_body(path, max_lines))
    return "\n".join(out)


# Copying
OVERWRITE_DECLINED = "existing file, overwrite declined"

_COPY_MESSAGES = {
    ErrorKind.ACCESS_DENIED: "Permission denied",
    ErrorKind.FS_UNAVAILABLE: "File system unavailable",
    ErrorKind.NOT_FOUND: "I/O error",
    ErrorKind.GENERIC_IO: "I/O error",
}


class CopyExecutor:
    """Copies files by name into the target directory, asking before overwriting."""

    def __init__(self, target_dir: Path, confirm: Callable[[Path], bool]):
        self.target_dir = target_dir
        self.confirm = confirm

    def destination_for(self, source: Path) -> Path:
        return self.target_dir / source.name

    def copy(self, source: Path) -> OperationResult:
        dest = self.destination_for(source)
        if dest.is_dir():
            e = IsADirectoryError(errno.EISDIR, "Is a directory", str(dest))
            label = _COPY_MESSAGES[classify_os_error(e)]
            return Failed(source, f"{label} while copying {source.name}: {e}", e)
        if dest.exists() and not self.confirm(dest):
            return Skipped(source, OVERWRITE_DECLINED)
        try:
            self.target_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, dest)
        except OSError as e:
            label = _COPY_MESSAGES[classify_os_error(e)]
            return Failed(source, f"{label} while copying {source.name}: {e}", e)
        return Success(source, dest)
