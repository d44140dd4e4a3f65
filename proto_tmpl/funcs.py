"""
Helper functions exposed to templates.

A fresh helper mapping is built for every proto file, closed over an
immutable RenderContext describing that rendering pass.
"""

import posixpath
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional, Tuple

from google.protobuf.descriptor_pb2 import (
    DescriptorProto,
    FieldDescriptorProto,
    FileDescriptorProto,
)

from .naming import output_name as _output_name
from .templates import RenderError

# Field numbers used in SourceCodeInfo location paths.
FILE_MESSAGE_TYPE = 4
FILE_ENUM_TYPE = 5
MESSAGE_NESTED_TYPE = 3
MESSAGE_ENUM_TYPE = 4


@dataclass(frozen=True)
class RenderContext:
    """Everything the helpers know about one rendering pass."""

    file: FileDescriptorProto
    proto_files: Tuple[FileDescriptorProto, ...]
    ext: str = ""
    root_dir: str = ""
    params: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


class TypeEntry(NamedTuple):
    """A message or enum declared in a proto file."""

    name: str  # Name relative to the package, e.g. "Outer.Inner"
    full_name: str  # Fully-qualified, e.g. ".pkg.Outer.Inner"
    descriptor: Any
    path: Tuple[int, ...]  # SourceCodeInfo path of the declaration


def _package_prefix(f: FileDescriptorProto) -> str:
    return f".{f.package}." if f.package else "."


def _walk_message(
    message: DescriptorProto,
    package: str,
    scope: str,
    path: Tuple[int, ...],
    messages: List[TypeEntry],
    enums: List[TypeEntry],
) -> None:
    name = scope + message.name
    messages.append(TypeEntry(name, package + name, message, path))
    for i, enum in enumerate(message.enum_type):
        enum_name = f"{name}.{enum.name}"
        enums.append(
            TypeEntry(enum_name, package + enum_name, enum, path + (MESSAGE_ENUM_TYPE, i))
        )
    for i, nested in enumerate(message.nested_type):
        if nested.options.map_entry:
            continue
        _walk_message(
            nested, package, name + ".", path + (MESSAGE_NESTED_TYPE, i), messages, enums
        )


def declared_types(f: FileDescriptorProto) -> Tuple[List[TypeEntry], List[TypeEntry]]:
    """
    Flatten the messages and enums declared in a file.

    Map entry messages generated by the compiler are skipped.

    Returns:
        Tuple of (messages, enums) in declaration order
    """
    package = _package_prefix(f)
    messages: List[TypeEntry] = []
    enums: List[TypeEntry] = []
    for i, message in enumerate(f.message_type):
        _walk_message(message, package, "", (FILE_MESSAGE_TYPE, i), messages, enums)
    for i, enum in enumerate(f.enum_type):
        enums.append(TypeEntry(enum.name, package + enum.name, enum, (FILE_ENUM_TYPE, i)))
    return messages, enums


def clean_label(label: int) -> str:
    """Return a field label as the proto keyword ("optional", "repeated", ...)."""
    return FieldDescriptorProto.Label.Name(label)[len("LABEL_"):].lower()


def clean_type(field_type: int) -> str:
    """Return a scalar field type as the proto keyword ("int32", "string", ...)."""
    return FieldDescriptorProto.Type.Name(field_type)[len("TYPE_"):].lower()


def trim_prefix(s: str, prefix: str) -> str:
    """Remove a prefix from a string if present."""
    if prefix and s.startswith(prefix):
        return s[len(prefix):]
    return s


def func_map(ctx: RenderContext) -> Dict[str, Callable[..., Any]]:
    """
    Build the helper mapping for one rendering pass.

    Args:
        ctx: Context of the proto file being rendered

    Returns:
        Mapping of helper name to function
    """
    index: Dict[str, Tuple[FileDescriptorProto, TypeEntry]] = {}

    def type_index() -> Dict[str, Tuple[FileDescriptorProto, TypeEntry]]:
        if not index:
            for f in ctx.proto_files:
                messages, enums = declared_types(f)
                for entry in messages + enums:
                    index.setdefault(entry.full_name, (f, entry))
        return index

    def output_name(name: str) -> str:
        """Output file name for a proto file name."""
        return _output_name(name, ctx.ext)

    def proto_files() -> Tuple[FileDescriptorProto, ...]:
        """All proto files of the request, in request order."""
        return ctx.proto_files

    def find_file(type_name: str) -> Optional[FileDescriptorProto]:
        """Proto file declaring a fully-qualified message or enum, or None."""
        found = type_index().get(_qualify(type_name))
        return found[0] if found else None

    def short_type(type_name: str) -> str:
        """Type name relative to the current file's package."""
        qualified = _qualify(type_name)
        return trim_prefix(qualified, _package_prefix(ctx.file)).lstrip(".")

    def url_to_type(type_name: str) -> str:
        """Link to the generated output that documents a type."""
        found = type_index().get(_qualify(type_name))
        if found is None:
            raise RenderError(f"url_to_type: unknown type {type_name}")
        f, entry = found
        url = _output_name(f.name, ctx.ext)
        if ctx.root_dir:
            url = posixpath.join(ctx.root_dir, url)
        return f"{url}#{entry.name}"

    def field_type(field: FieldDescriptorProto) -> str:
        """Type of a field: the message/enum name or the scalar keyword."""
        if field.type_name:
            return short_type(field.type_name)
        return clean_type(field.type)

    def comments(*path: int) -> str:
        """Leading comments of the declaration at a SourceCodeInfo path."""
        wanted = list(path)
        for location in ctx.file.source_code_info.location:
            if list(location.path) == wanted:
                return location.leading_comments.strip()
        return ""

    def all_messages() -> List[TypeEntry]:
        """Messages of the current file, nested ones flattened."""
        return declared_types(ctx.file)[0]

    def all_enums() -> List[TypeEntry]:
        """Enums of the current file, nested ones flattened."""
        return declared_types(ctx.file)[1]

    def fail(message: str) -> None:
        """Abort rendering of the current file with an error message."""
        raise RenderError(message)

    def root_dir() -> str:
        """Configured root directory prefix for links."""
        return ctx.root_dir

    def ext() -> str:
        """Extension of generated files."""
        return ctx.ext

    def params() -> Mapping[str, Any]:
        """Extra plugin parameters and config file settings."""
        return ctx.params

    return {
        "output_name": output_name,
        "proto_files": proto_files,
        "find_file": find_file,
        "short_type": short_type,
        "url_to_type": url_to_type,
        "field_type": field_type,
        "clean_label": clean_label,
        "clean_type": clean_type,
        "comments": comments,
        "all_messages": all_messages,
        "all_enums": all_enums,
        "trim_prefix": trim_prefix,
        "base": posixpath.basename,
        "dir": posixpath.dirname,
        "fail": fail,
        "root_dir": root_dir,
        "ext": ext,
        "params": params,
    }


def _qualify(type_name: str) -> str:
    return type_name if type_name.startswith(".") else "." + type_name


def list_helpers() -> Dict[str, str]:
    """Describe the available helpers by name (first docstring line)."""
    ctx = RenderContext(file=FileDescriptorProto(), proto_files=())
    result = {}
    for name, fn in sorted(func_map(ctx).items()):
        doc = (fn.__doc__ or "").strip().splitlines()
        result[name] = doc[0] if doc else ""
    return result
