"""Utility functions for loading compiled proto descriptors.

This module reads FileDescriptorSet files written by
``protoc --descriptor_set_out`` and turns them into plugin requests, so
templates can be rendered without going through protoc.
"""

from pathlib import Path
from typing import Iterable, Optional

from google.protobuf.compiler import plugin_pb2
from google.protobuf.descriptor_pb2 import FileDescriptorSet
from google.protobuf.message import DecodeError

from .logging_config import get_logger

logger = get_logger(__name__)


class DescriptorLoadError(Exception):
    """Custom exception for descriptor loading errors."""

    pass


def load_descriptor_set(file_path: str | Path) -> FileDescriptorSet:
    """Load a FileDescriptorSet from a local file.

    Args:
        file_path: Path to the descriptor set file.

    Returns:
        Parsed descriptor set.

    Raises:
        DescriptorLoadError: If the file cannot be read or parsed.
    """
    file_path = Path(file_path)
    logger.debug("Attempting to load descriptor set from file: %s", file_path)

    if not file_path.exists():
        logger.error("File not found: %s", file_path)
        raise DescriptorLoadError(f"File not found: {file_path}")

    try:
        data = file_path.read_bytes()
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e, exc_info=True)
        raise DescriptorLoadError(f"Error reading file {file_path}: {e}") from e

    try:
        descriptor_set = FileDescriptorSet.FromString(data)
    except DecodeError as e:
        logger.error("Invalid descriptor set in file %s: %s", file_path, e)
        raise DescriptorLoadError(f"Invalid descriptor set in file {file_path}: {e}") from e

    logger.info("Loaded %d proto file(s) from %s", len(descriptor_set.file), file_path)
    return descriptor_set


def build_request(
    descriptor_set: FileDescriptorSet,
    files_to_generate: Optional[Iterable[str]] = None,
    parameter: str = "",
) -> plugin_pb2.CodeGeneratorRequest:
    """Build a plugin request from a descriptor set.

    Like protoc, every file of the set goes into ``proto_file`` so that
    cross-file lookups see imported files; only ``file_to_generate`` is
    narrowed.

    Args:
        descriptor_set: Descriptors of the proto files.
        files_to_generate: Names of the files to render (default: all).
        parameter: Parameter string, as protoc would pass it.

    Returns:
        Request carrying all proto files, in descriptor set order.

    Raises:
        DescriptorLoadError: If a requested file is not in the descriptor set.
    """
    known = [f.name for f in descriptor_set.file]
    wanted = list(files_to_generate) if files_to_generate else known

    missing = [name for name in wanted if name not in known]
    if missing:
        raise DescriptorLoadError(f"Not in descriptor set: {', '.join(missing)}")

    request = plugin_pb2.CodeGeneratorRequest(parameter=parameter)
    request.file_to_generate.extend(wanted)
    request.proto_file.extend(descriptor_set.file)
    return request
