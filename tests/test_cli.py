"""
Tests for the proto-tmpl command line interface.
"""

from pathlib import Path

import pytest
from google.protobuf.descriptor_pb2 import FileDescriptorSet

from conftest import make_file
from proto_tmpl.cli import main


@pytest.fixture
def descriptor_path(tmp_path: Path) -> Path:
    path = tmp_path / "api.pb"
    descriptor_set = FileDescriptorSet(
        file=[make_file("shop/book.proto", package="shop", messages=["Book", "Shelf"])]
    )
    path.write_bytes(descriptor_set.SerializeToString())
    return path


@pytest.fixture
def doc_template(template_dir: Path) -> Path:
    path = template_dir / "doc.md"
    path.write_text(
        "# {{ file.name }}\n"
        "{% for m in all_messages() %}\n"
        "- [{{ m.name }}]({{ url_to_type(m.full_name) }})\n"
        "{% endfor %}\n"
    )
    return path


class TestMain:
    def test_writes_outputs(self, tmp_path, descriptor_path, doc_template):
        out = tmp_path / "out"

        code = main([str(descriptor_path), "-t", str(doc_template), "-o", str(out)])

        assert code == 0
        assert (out / "shop/book.md").read_text() == (
            "# shop/book.proto\n"
            "- [Book](shop/book.md#Book)\n"
            "- [Shelf](shop/book.md#Shelf)\n"
        )

    def test_root_dir_and_extension(self, tmp_path, descriptor_path, doc_template):
        out = tmp_path / "out"

        code = main(
            [
                str(descriptor_path),
                "-t",
                str(doc_template),
                "--ext",
                ".txt",
                "--root-dir",
                "/api",
                "-o",
                str(out),
            ]
        )

        assert code == 0
        assert "(/api/shop/book.txt#Book)" in (out / "shop/book.txt").read_text()

    def test_prints_without_output_dir(self, descriptor_path, doc_template, capsys):
        assert main([str(descriptor_path), "-t", str(doc_template)]) == 0
        assert "shop/book.md" in capsys.readouterr().out

    def test_generation_failure(self, descriptor_path, template_dir, capsys):
        template = template_dir / "bad.txt"
        template.write_text("{{ fail('no docs for ' ~ file.name) }}")

        assert main([str(descriptor_path), "-t", str(template)]) == 1
        assert "no docs for shop/book.proto" in capsys.readouterr().out

    def test_requires_template(self, descriptor_path, capsys):
        assert main([str(descriptor_path)]) == 1
        assert "--template" in capsys.readouterr().out

    def test_requires_descriptor_set(self, capsys):
        assert main([]) == 1

    def test_missing_descriptor_set(self, tmp_path, doc_template):
        assert main([str(tmp_path / "missing.pb"), "-t", str(doc_template)]) == 1

    def test_unknown_file_filter(self, descriptor_path, doc_template):
        assert (
            main([str(descriptor_path), "-t", str(doc_template), "--files", "x.proto"])
            == 1
        )

    def test_list_helpers(self, capsys):
        assert main(["--list-helpers"]) == 0
        assert "url_to_type" in capsys.readouterr().out

    def test_files_filter_keeps_imports_for_lookups(
        self, tmp_path, library_files, template_dir
    ):
        descriptor = tmp_path / "library.pb"
        descriptor.write_bytes(FileDescriptorSet(file=library_files).SerializeToString())
        template = template_dir / "doc.md"
        template.write_text("{{ url_to_type('.common.Money') }}")
        out = tmp_path / "out"

        code = main(
            [
                str(descriptor),
                "-t",
                str(template),
                "--files",
                "shop/library.proto",
                "-o",
                str(out),
            ]
        )

        assert code == 0
        assert (out / "shop/library.md").read_text() == "common/types.md#Money"
        assert not (out / "common/types.md").exists()

    def test_config_values_reach_templates(self, tmp_path, descriptor_path, template_dir):
        template = template_dir / "doc.md"
        template.write_text("{{ params().title }}: {{ file.name }}")
        config = tmp_path / "tmpl.json"
        config.write_text('{"title": "Shop API"}')
        out = tmp_path / "out"

        code = main(
            [str(descriptor_path), "-t", str(template), "--config", str(config), "-o", str(out)]
        )

        assert code == 0
        assert (out / "shop/book.md").read_text() == "Shop API: shop/book.proto"

    def test_error_text_is_not_markup(self, descriptor_path, template_dir, capsys):
        template = template_dir / "bad.txt"
        template.write_text("{{ fail('see [/x] and [bold]') }}")

        assert main([str(descriptor_path), "-t", str(template)]) == 1
        assert "see [/x] and [bold]" in capsys.readouterr().out
