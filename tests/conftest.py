"""
Shared test fixtures: proto descriptors built in memory.
"""

from pathlib import Path

import pytest
from google.protobuf.compiler import plugin_pb2
from google.protobuf.descriptor_pb2 import FieldDescriptorProto, FileDescriptorProto

from proto_tmpl.templates import from_string


def make_file(name: str, package: str = "", messages=()) -> FileDescriptorProto:
    """Create a FileDescriptorProto with empty messages of the given names."""
    f = FileDescriptorProto(name=name, package=package)
    for message in messages:
        f.message_type.add(name=message)
    return f


def make_request(*files: FileDescriptorProto) -> plugin_pb2.CodeGeneratorRequest:
    request = plugin_pb2.CodeGeneratorRequest()
    request.file_to_generate.extend(f.name for f in files)
    request.proto_file.extend(files)
    return request


@pytest.fixture
def name_template():
    """Template rendering the proto file's name."""
    return from_string("{{ file.name }}", name="name.txt")


@pytest.fixture
def failing_template():
    """Template that fails for b.proto."""
    return from_string(
        '{% if file.name == "b.proto" %}{{ fail("bad field") }}{% endif %}{{ file.name }}',
        name="fail.txt",
    )


@pytest.fixture
def library_files():
    """Two files in different packages, the second referencing the first."""
    common = FileDescriptorProto(name="common/types.proto", package="common")
    common.message_type.add(name="Money").field.add(
        name="units",
        number=1,
        label=FieldDescriptorProto.LABEL_OPTIONAL,
        type=FieldDescriptorProto.TYPE_INT64,
    )
    common.enum_type.add(name="Currency").value.add(name="EUR", number=0)

    library = FileDescriptorProto(name="shop/library.proto", package="shop")
    book = library.message_type.add(name="Book")
    book.field.add(
        name="title",
        number=1,
        label=FieldDescriptorProto.LABEL_OPTIONAL,
        type=FieldDescriptorProto.TYPE_STRING,
    )
    book.field.add(
        name="price",
        number=2,
        label=FieldDescriptorProto.LABEL_OPTIONAL,
        type=FieldDescriptorProto.TYPE_MESSAGE,
        type_name=".common.Money",
    )
    book.field.add(
        name="tags",
        number=3,
        label=FieldDescriptorProto.LABEL_REPEATED,
        type=FieldDescriptorProto.TYPE_MESSAGE,
        type_name=".shop.Book.Tag",
    )
    book.nested_type.add(name="Tag").field.add(
        name="label",
        number=1,
        label=FieldDescriptorProto.LABEL_OPTIONAL,
        type=FieldDescriptorProto.TYPE_STRING,
    )
    entry = book.nested_type.add(name="MetaEntry")
    entry.options.map_entry = True
    book.enum_type.add(name="Format").value.add(name="PAPER", number=0)

    location = library.source_code_info.location.add()
    location.path.extend([4, 0])
    location.leading_comments = " A book in the shop.\n"
    location = library.source_code_info.location.add()
    location.path.extend([4, 0, 2, 0])
    location.leading_comments = " Title of the book.\n"

    return [common, library]


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """Directory for template files."""
    path = tmp_path / "templates"
    path.mkdir()
    return path
