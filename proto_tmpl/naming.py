"""
Naming utilities for generated output files.

Handles extension detection from template sources and derivation of
output file names from proto file names.
"""

import os
import re
from typing import Iterable

# Extension of the final path element: a dot followed by anything but
# another dot or a path separator, anchored at the end.
_EXT_RE = re.compile(r"\.[^./\\]*$")


def path_ext(name: str) -> str:
    """Return the extension of the last path element, or an empty string."""
    match = _EXT_RE.search(name)
    return match.group(0) if match else ""


def strip_ext(name: str) -> str:
    """Remove the extension from the last path element of a name."""
    ext = path_ext(name)
    if not ext:
        return name
    return name[: len(name) - len(ext)]


def unix_path(name: str) -> str:
    """Rewrite platform path separators to forward slashes."""
    name = name.replace("\\", "/")
    if os.sep != "/":
        name = name.replace(os.sep, "/")
    return name


def output_name(name: str, ext: str) -> str:
    """
    Derive the output file name for a proto file.

    Args:
        name: Proto file name as given by the compiler (e.g. "pkg/foo.proto")
        ext: Extension of generated files (e.g. ".go")

    Returns:
        Forward-slash output name (e.g. "pkg/foo.go")
    """
    return unix_path(strip_ext(name) + ext)


def first_ext(names: Iterable[str]) -> str:
    """Return the first non-empty extension among the given names."""
    for name in names:
        ext = path_ext(name)
        if ext:
            return ext
    return ""


def find_ext(template) -> str:
    """
    Find the output extension from the names a template was parsed from.

    Args:
        template: Template set exposing ``source_names``

    Returns:
        Extension of the first source name that has one, or an empty string
    """
    return first_ext(template.source_names)


def resolve_ext(explicit: str, template) -> str:
    """Use an explicit extension verbatim, falling back to the template's."""
    if explicit:
        return explicit
    return find_ext(template)
