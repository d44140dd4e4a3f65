"""
Tests for output file naming and extension detection.
"""

import pytest

from proto_tmpl.naming import (
    find_ext,
    output_name,
    path_ext,
    resolve_ext,
    strip_ext,
    unix_path,
)
from proto_tmpl.templates import TemplateSet


class TestPathExt:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("foo.proto", ".proto"),
            ("pkg/foo.proto", ".proto"),
            ("pkg/foo", ""),
            ("pkg.v1/foo", ""),
            ("archive.tar.gz", ".gz"),
            ("pkg\\foo.proto", ".proto"),
            ("pkg.v1\\foo", ""),
        ],
    )
    def test_extension_of_last_element(self, name, expected):
        assert path_ext(name) == expected


class TestStripExt:
    def test_strips_extension(self):
        assert strip_ext("pkg/foo.proto") == "pkg/foo"

    def test_no_extension_unchanged(self):
        assert strip_ext("pkg/foo") == "pkg/foo"

    def test_dot_in_directory_kept(self):
        assert strip_ext("pkg.v1/foo") == "pkg.v1/foo"


class TestUnixPath:
    def test_backslashes_become_slashes(self):
        assert unix_path("pkg\\sub\\foo.go") == "pkg/sub/foo.go"

    def test_forward_slashes_unchanged(self):
        assert unix_path("pkg/foo.go") == "pkg/foo.go"


class TestOutputName:
    def test_replaces_extension(self):
        assert output_name("pkg/foo.proto", ".go") == "pkg/foo.go"

    def test_appends_when_no_extension(self):
        assert output_name("pkg/foo", ".go") == "pkg/foo.go"

    def test_normalizes_separators(self):
        assert output_name("pkg\\foo.proto", ".go") == "pkg/foo.go"

    def test_empty_extension(self):
        assert output_name("pkg/foo.proto", "") == "pkg/foo"


class TestFindExt:
    def test_first_source_with_extension(self):
        template = TemplateSet({"main": "x", "doc.html": "y", "other.md": "z"})
        assert find_ext(template) == ".html"

    def test_no_extension_found(self):
        template = TemplateSet({"main": "x"})
        assert find_ext(template) == ""

    def test_explicit_extension_wins(self):
        template = TemplateSet({"doc.html": "x"})
        assert resolve_ext(".txt", template) == ".txt"

    def test_empty_explicit_falls_back(self):
        template = TemplateSet({"doc.html": "x"})
        assert resolve_ext("", template) == ".html"
