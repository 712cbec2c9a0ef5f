"""Tests for settings validation."""
from pathlib import Path

import pytest

from pickfiles import core
from pickfiles.core import (
    ConfigError,
    ConfigFileError,
    InvalidExtensionError,
    InvalidSourceError,
    InvalidTargetError,
    MissingValueError,
    normalize_extension,
    validate_config,
)


class TestNormalizeExtension:
    @pytest.mark.parametrize(
        "raw, expected",
        [("txt", ".txt"), (".txt", ".txt"), ("  md ", ".md"), ("tar.gz", ".tar.gz"), ("..", "..")],
    )
    def test_leading_dot_and_length(self, raw, expected):
        ext = normalize_extension(raw)
        assert ext == expected
        assert ext.startswith(".")
        assert len(ext) > 1

    @pytest.mark.parametrize("raw", [".", " . "])
    def test_dot_only_is_rejected(self, raw):
        with pytest.raises(InvalidExtensionError):
            normalize_extension(raw)


class TestValidateConfig:
    def test_valid_config(self, source_tree, temp_dir):
        target = temp_dir / "out"
        target.mkdir()
        config = validate_config(source_tree, target, "txt")

        assert config.source_dir == source_tree.resolve()
        assert config.target_dir == target.resolve()
        assert config.extension == ".txt"
        assert config.exclude is None

    def test_config_is_immutable(self, source_tree, temp_dir):
        config = validate_config(source_tree, temp_dir / "out", "txt")
        with pytest.raises(AttributeError):
            config.extension = ".md"

    def test_missing_source_fails_before_discovery(self, temp_dir):
        with pytest.raises(InvalidSourceError):
            validate_config(temp_dir / "nope", temp_dir / "out", "txt")

    def test_source_must_be_directory(self, source_tree, temp_dir):
        with pytest.raises(InvalidSourceError):
            validate_config(source_tree / "a.txt", temp_dir / "out", "txt")

    def test_target_may_be_created_later(self, source_tree, temp_dir):
        target = temp_dir / "not-yet"
        config = validate_config(source_tree, target, ".txt")
        assert config.target_dir == target.resolve()
        assert not target.exists()

    def test_target_with_missing_parent_is_rejected(self, source_tree, temp_dir):
        with pytest.raises(InvalidTargetError):
            validate_config(source_tree, temp_dir / "missing" / "out", "txt")

    def test_target_that_is_a_file_is_rejected(self, source_tree, temp_dir):
        blocker = temp_dir / "blocker"
        blocker.write_text("x")
        with pytest.raises(InvalidTargetError):
            validate_config(source_tree, blocker, "txt")

    def test_bad_extension(self, source_tree, temp_dir):
        with pytest.raises(InvalidExtensionError):
            validate_config(source_tree, temp_dir / "out", ".")

    @pytest.mark.parametrize("field", ["source", "target", "extension"])
    def test_missing_values(self, source_tree, temp_dir, field):
        values = {"source": source_tree, "target": temp_dir / "out", "extension": "txt"}
        values[field] = None
        with pytest.raises(MissingValueError):
            validate_config(values["source"], values["target"], values["extension"])

    def test_blank_extension_is_missing(self, source_tree, temp_dir):
        with pytest.raises(MissingValueError):
            validate_config(source_tree, temp_dir / "out", "   ")

    def test_all_errors_are_config_errors(self, temp_dir):
        with pytest.raises(ConfigError):
            validate_config(temp_dir / "nope", temp_dir / "out", "txt")


class TestAccessChecks:
    """Permission checks, faked so they hold even when tests run as root."""

    @pytest.fixture
    def deny(self, monkeypatch):
        def _deny(*denied):
            denied = {p.resolve() for p in denied}
            real_access = core.os.access
            monkeypatch.setattr(
                core.os, "access",
                lambda path, mode: Path(path).resolve() not in denied and real_access(path, mode),
            )
        return _deny

    def test_unreadable_source(self, source_tree, temp_dir, deny):
        deny(source_tree)
        with pytest.raises(InvalidSourceError, match="not readable"):
            validate_config(source_tree, temp_dir / "out", "txt")

    def test_unwritable_existing_target(self, source_tree, temp_dir, deny):
        target = temp_dir / "out"
        target.mkdir()
        deny(target)
        with pytest.raises(InvalidTargetError):
            validate_config(source_tree, target, "txt")

    def test_missing_target_with_unwritable_parent(self, source_tree, temp_dir, deny):
        parent = temp_dir / "locked"
        parent.mkdir()
        deny(parent)
        with pytest.raises(InvalidTargetError):
            validate_config(source_tree, parent / "out", "txt")


class TestExcludeFile:
    def test_patterns_loaded(self, source_tree, temp_dir):
        patterns = temp_dir / "exclude.txt"
        patterns.write_text("# comment\n\nnested/\n")
        config = validate_config(source_tree, temp_dir / "out", "txt", exclude_file=patterns)

        assert config.exclude is not None
        assert config.exclude.match_file("nested/d.txt")
        assert not config.exclude.match_file("a.txt")

    def test_missing_pattern_file(self, source_tree, temp_dir):
        with pytest.raises(ConfigFileError):
            validate_config(source_tree, temp_dir / "out", "txt", exclude_file=temp_dir / "nope")

    def test_pattern_file_must_be_a_file(self, source_tree, temp_dir):
        with pytest.raises(ConfigFileError):
            validate_config(source_tree, temp_dir / "out", "txt", exclude_file=source_tree)
