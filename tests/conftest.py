"""Pytest configuration and fixtures."""
import io
import shutil
import tempfile
from pathlib import Path

import pytest

from pickfiles.core import validate_config
from pickfiles.prompt import LineReader


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp = tempfile.mkdtemp()
    yield Path(temp)
    shutil.rmtree(temp, ignore_errors=True)


@pytest.fixture
def source_tree(temp_dir):
    """Create a small source tree with mixed extensions and a nested folder."""
    src = temp_dir / "src"
    (src / "nested" / "deeper").mkdir(parents=True)
    (src / "a.txt").write_text("alpha\n")
    (src / "b.txt").write_text("bravo\n")
    (src / "c.md").write_text("# charlie\n")
    (src / "nested" / "d.txt").write_text("delta\n")
    (src / "nested" / "deeper" / "e.TXT").write_text("echo\n")
    (src / "nested" / "notes.txt.bak").write_text("backup\n")
    return src


@pytest.fixture
def make_reader():
    """Build a LineReader that answers from the given lines."""
    def _make(*answers):
        text = "".join(f"{a}\n" for a in answers)
        return LineReader(stream=io.StringIO(text), out=io.StringIO())
    return _make


@pytest.fixture
def make_config(temp_dir):
    """Validate a config for *source* with a target under the temp dir."""
    def _make(source, extension="txt", target=None, exclude_file=None):
        target = target or (temp_dir / "target")
        return validate_config(source, target, extension, exclude_file=exclude_file)
    return _make
