#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for template resolution across directories and nesting levels."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

import pytest
from hypothesis import given
from hypothesis import strategies as st
from utils import write_template

from docrender.converters.template import TemplateResolver
from docrender.engines import JinjaEngine
from docrender.exceptions import TemplateReadError

NESTINGS = ["jinja2/html5/", "jinja2/", "html5/", ""]


def make_resolver(*dirs, backend: str = "html5", cache: bool = False) -> TemplateResolver:
    return TemplateResolver(backend, [str(d) for d in dirs], JinjaEngine(), cache=cache)


@pytest.mark.unit
class TestResolveBasics:
    """Test single-directory resolution."""

    def test_returns_none_without_match(self, temp_dir):
        """An unmatched node kind resolves to nothing."""
        write_template(temp_dir, "paragraph.jinja2", "<p/>")
        assert make_resolver(temp_dir).resolve("table") is None

    def test_resolves_flat_template(self, temp_dir):
        """A template directly in the directory is found."""
        path = write_template(temp_dir, "paragraph.jinja2", "<p>{{ node.content }}</p>")
        resolved = make_resolver(temp_dir).resolve("paragraph")

        assert resolved is not None
        assert resolved.node_name == "paragraph"
        assert resolved.path == path
        assert resolved.source == "<p>{{ node.content }}</p>"

    def test_empty_directory_list(self):
        """No directories never resolves anything."""
        resolver = TemplateResolver("html5", [], JinjaEngine())
        assert resolver.resolve("paragraph") is None

    def test_none_directory_list(self):
        """None is treated like an empty list."""
        resolver = TemplateResolver("html5", None, JinjaEngine())
        assert resolver.resolve("paragraph") is None

    def test_missing_directory_is_skipped(self, temp_dir):
        """A directory that does not exist is skipped silently."""
        write_template(temp_dir / "real", "paragraph.jinja2", "real")
        resolver = make_resolver(temp_dir / "missing", temp_dir / "real")
        assert resolver.resolve("paragraph").source == "real"

    def test_only_missing_directories(self, temp_dir):
        """Only nonexistent directories degrade to no match."""
        assert make_resolver(temp_dir / "nope", temp_dir / "also-nope").resolve("paragraph") is None

    def test_file_instead_of_directory_is_skipped(self, temp_dir):
        """A template 'directory' that is a regular file is skipped."""
        not_a_dir = temp_dir / "file.txt"
        not_a_dir.write_text("x")
        assert make_resolver(not_a_dir).resolve("paragraph") is None

    def test_directory_named_like_template_is_not_a_match(self, temp_dir):
        """A directory named like a template file means 'not here'."""
        (temp_dir / "first" / "paragraph.jinja2").mkdir(parents=True)
        write_template(temp_dir / "second", "paragraph.jinja2", "second")
        assert make_resolver(temp_dir / "first", temp_dir / "second").resolve("paragraph").source == "second"

    def test_other_extension_is_ignored(self, temp_dir):
        """Only files with the engine's extension are considered."""
        write_template(temp_dir, "paragraph.html", "<p/>")
        assert make_resolver(temp_dir).resolve("paragraph") is None

    def test_other_backend_subdirectory_is_ignored(self, temp_dir):
        """Templates for a different backend are not used."""
        write_template(temp_dir, "docbook5/paragraph.jinja2", "db")
        assert make_resolver(temp_dir, backend="html5").resolve("paragraph") is None


@pytest.mark.unit
class TestNestingPrecedence:
    """Test precedence of nested subdirectories within one directory."""

    @pytest.mark.parametrize("nesting", NESTINGS)
    def test_each_nesting_level_is_found(self, temp_dir, nesting):
        """Each supported nesting location resolves on its own."""
        write_template(temp_dir, f"{nesting}paragraph.jinja2", nesting or "flat")
        assert make_resolver(temp_dir).resolve("paragraph").source == (nesting or "flat")

    def test_deep_beats_flat(self, temp_dir):
        """The engine/backend nesting wins over a flat template."""
        write_template(temp_dir, "paragraph.jinja2", "flat")
        write_template(temp_dir, "jinja2/html5/paragraph.jinja2", "deep")
        assert make_resolver(temp_dir).resolve("paragraph").source == "deep"

    def test_engine_dir_beats_backend_dir(self, temp_dir):
        """The engine subdirectory is searched before the backend subdirectory."""
        write_template(temp_dir, "html5/paragraph.jinja2", "backend")
        write_template(temp_dir, "jinja2/paragraph.jinja2", "engine")
        assert make_resolver(temp_dir).resolve("paragraph").source == "engine"

    def test_candidate_paths_order(self, temp_dir):
        """Candidate paths list only existing directories, most specific first."""
        (temp_dir / "jinja2" / "html5").mkdir(parents=True)
        (temp_dir / "html5").mkdir()
        resolver = make_resolver(temp_dir)

        assert resolver.candidate_paths(temp_dir, "paragraph") == [
            temp_dir / "jinja2" / "html5" / "paragraph.jinja2",
            temp_dir / "jinja2" / "paragraph.jinja2",
            temp_dir / "html5" / "paragraph.jinja2",
            temp_dir / "paragraph.jinja2",
        ]

    def test_candidate_paths_skip_missing_subdirectories(self, temp_dir):
        """Subdirectories that do not exist are not candidates."""
        assert make_resolver(temp_dir).candidate_paths(temp_dir, "paragraph") == [temp_dir / "paragraph.jinja2"]

    def test_candidate_paths_deduplicate(self, temp_dir):
        """A backend named like the engine does not produce duplicate candidates."""
        (temp_dir / "jinja2" / "jinja2").mkdir(parents=True)
        resolver = make_resolver(temp_dir, backend="jinja2")

        paths = resolver.candidate_paths(temp_dir, "paragraph")
        assert len(paths) == len(set(paths))
        assert paths[0] == temp_dir / "jinja2" / "jinja2" / "paragraph.jinja2"


@pytest.mark.unit
class TestDirectoryPrecedence:
    """Test precedence across multiple directories."""

    def test_first_directory_wins(self, temp_dir):
        """The earlier directory shadows the later one."""
        write_template(temp_dir / "custom", "paragraph.jinja2", "custom")
        write_template(temp_dir / "fallback", "paragraph.jinja2", "fallback")
        resolver = make_resolver(temp_dir / "custom", temp_dir / "fallback")
        assert resolver.resolve("paragraph").source == "custom"

    def test_flat_in_first_beats_deep_in_second(self, temp_dir):
        """Directory order outranks nesting depth."""
        write_template(temp_dir / "custom", "paragraph.jinja2", "custom-flat")
        write_template(temp_dir / "fallback", "jinja2/html5/paragraph.jinja2", "fallback-deep")
        resolver = make_resolver(temp_dir / "custom", temp_dir / "fallback")
        assert resolver.resolve("paragraph").source == "custom-flat"

    def test_falls_through_to_later_directory(self, temp_dir):
        """A kind missing from the first directory is taken from the next."""
        write_template(temp_dir / "custom", "paragraph.jinja2", "custom")
        write_template(temp_dir / "fallback", "table.jinja2", "fallback-table")
        resolver = make_resolver(temp_dir / "custom", temp_dir / "fallback")
        assert resolver.resolve("table").source == "fallback-table"

    @given(
        layout=st.lists(
            st.one_of(st.none(), st.sampled_from(NESTINGS)),
            min_size=1,
            max_size=5,
        )
    )
    def test_first_matching_directory_wins(self, layout):
        """Whatever the layout, the first directory holding a match wins."""
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            dirs = []
            for index, nesting in enumerate(layout):
                directory = root / f"dir{index}"
                directory.mkdir()
                if nesting is not None:
                    write_template(directory, f"{nesting}paragraph.jinja2", str(index))
                dirs.append(directory)

            resolved = make_resolver(*dirs).resolve("paragraph")

            expected = next((str(i) for i, nesting in enumerate(layout) if nesting is not None), None)
            if expected is None:
                assert resolved is None
            else:
                assert resolved.source == expected


@pytest.mark.unit
class TestReadFailures:
    """Test that read failures are distinct from not-found."""

    def test_undecodable_template_raises(self, temp_dir):
        """A template with invalid UTF-8 raises TemplateReadError."""
        path = temp_dir / "paragraph.jinja2"
        path.write_bytes(b"\xff\xfe\xfa invalid")

        with pytest.raises(TemplateReadError) as exc_info:
            make_resolver(temp_dir).resolve("paragraph")
        assert exc_info.value.template_path == str(path)
        assert isinstance(exc_info.value.original_error, UnicodeDecodeError)

    @pytest.mark.skipif(sys.platform == "win32" or os.geteuid() == 0, reason="requires POSIX permissions as non-root")
    def test_unreadable_template_raises(self, temp_dir):
        """A template without read permission raises TemplateReadError."""
        path = write_template(temp_dir, "paragraph.jinja2", "<p/>")
        path.chmod(0)
        try:
            with pytest.raises(TemplateReadError):
                make_resolver(temp_dir).resolve("paragraph")
        finally:
            path.chmod(0o644)

    def test_read_error_is_raised_from_os_error(self, temp_dir, monkeypatch):
        """OSErrors other than not-found propagate as TemplateReadError."""
        write_template(temp_dir, "paragraph.jinja2", "<p/>")

        def fail(self, *args, **kwargs):
            raise PermissionError("denied")

        monkeypatch.setattr(Path, "read_text", fail)
        with pytest.raises(TemplateReadError, match="denied"):
            make_resolver(temp_dir).resolve("paragraph")


@pytest.mark.unit
class TestResolverCache:
    """Test the optional per-kind cache."""

    def test_uncached_resolver_sees_new_templates(self, temp_dir):
        """Without caching, every call reads the filesystem again."""
        resolver = make_resolver(temp_dir)
        assert resolver.resolve("paragraph") is None

        write_template(temp_dir, "paragraph.jinja2", "late")
        assert resolver.resolve("paragraph").source == "late"

    def test_cached_resolver_remembers_results(self, temp_dir):
        """With caching, results (including misses) are reused."""
        resolver = make_resolver(temp_dir, cache=True)
        assert resolver.resolve("paragraph") is None

        write_template(temp_dir, "paragraph.jinja2", "late")
        assert resolver.resolve("paragraph") is None

    def test_cached_resolver_returns_same_object(self, temp_dir):
        """A cached hit is returned as the same ResolvedTemplate."""
        write_template(temp_dir, "paragraph.jinja2", "x")
        resolver = make_resolver(temp_dir, cache=True)
        assert resolver.resolve("paragraph") is resolver.resolve("paragraph")
