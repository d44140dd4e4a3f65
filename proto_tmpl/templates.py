"""
Template engine wrapper for proto file generation.

Provides a compiled template set around Jinja2, with the helper
functions of the current rendering pass bound before each execution.
"""

import re
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from jinja2 import (
    DictLoader,
    Environment,
    StrictUndefined,
    select_autoescape,
)
from jinja2 import TemplateError as JinjaTemplateError

from .logging_config import get_logger

logger = get_logger(__name__)


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


class RenderError(TemplateError):
    """Raised from inside a template to abort rendering with a message."""

    pass


class TemplateSet:
    """
    An entry template and the templates associated with it.

    The entry template is the one executed for every proto file; the
    associated templates can be included or imported from it by name.
    """

    def __init__(self, sources: Dict[str, str], entry: Optional[str] = None):
        """
        Compile a template set.

        Args:
            sources: Mapping of template name to template source, in parse order
            entry: Name of the template to execute (defaults to the first one)

        Raises:
            TemplateError: If there are no sources or a template fails to parse
        """
        if not sources:
            raise TemplateError("no templates given")

        self.source_names: List[str] = list(sources)
        self.name = entry or self.source_names[0]
        if self.name not in sources:
            raise TemplateError(f"entry template {self.name!r} is not defined")

        self._env = _create_environment(sources)
        self._funcs: Dict[str, Callable[..., Any]] = {}

        try:
            for name in self.source_names:
                self._env.get_template(name)
            self._entry = self._env.get_template(self.name)
        except JinjaTemplateError as e:
            raise TemplateError(f"failed to parse template {_where(e)}: {e}") from e

    def funcs(self, mapping: Dict[str, Callable[..., Any]]) -> "TemplateSet":
        """
        Bind helper functions for subsequent executions.

        Replaces any previously bound helpers. Returns the set itself so
        binding and execution can be chained.
        """
        self._funcs = dict(mapping)
        return self

    def execute(self, data: Any) -> str:
        """
        Render the entry template with ``file`` set to the given data.

        Raises:
            TemplateError: If rendering fails for any reason
        """
        context = dict(self._funcs)
        context["file"] = data
        try:
            return self._entry.render(**context)
        except TemplateError:
            raise
        except Exception as e:
            raise TemplateError(str(e)) from e


def _where(error: JinjaTemplateError) -> str:
    name = getattr(error, "name", None)
    lineno = getattr(error, "lineno", None)
    if name and lineno:
        return f"{name}:{lineno}"
    return name or "<template>"


def _create_environment(sources: Dict[str, str]) -> Environment:
    """Setup Jinja2 environment with code generation utilities."""
    env = Environment(
        loader=DictLoader(dict(sources)),
        autoescape=select_autoescape(["html", "htm", "xml"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )

    # Add custom filters for code generation
    env.filters["snake_case"] = snake_case
    env.filters["camel_case"] = camel_case
    env.filters["pascal_case"] = pascal_case
    env.filters["indent_lines"] = indent_lines
    env.filters["comment"] = comment

    return env


def load_templates(*paths: Union[str, Path]) -> TemplateSet:
    """
    Parse template files into a template set.

    The first file is the entry template; the others are registered under
    their base names for use with include and import.

    Args:
        paths: Template file paths

    Returns:
        Compiled template set

    Raises:
        TemplateError: If a file cannot be read or parsed
    """
    if not paths:
        raise TemplateError("no template files given")

    sources: Dict[str, str] = {}
    for path in map(Path, paths):
        if path.name in sources:
            logger.warning("Template %s shadows an earlier template with the same name", path)
        try:
            sources[path.name] = path.read_text(encoding="utf-8")
        except OSError as e:
            raise TemplateError(f"failed to read template {path}: {e}") from e
        logger.debug("Loaded template %s", path)

    return TemplateSet(sources, entry=Path(paths[0]).name)


def from_string(source: str, name: str = "template") -> TemplateSet:
    """Compile a single in-memory template."""
    return TemplateSet({name: source})


# Template filters for code generation


def snake_case(value: str) -> str:
    """Convert string to snake_case."""
    # Insert underscore before uppercase letters
    s1 = re.sub("([a-z0-9])([A-Z])", r"\1_\2", str(value))
    # Replace spaces and hyphens with underscores
    s2 = re.sub(r"[-\s]+", "_", s1)
    return s2.lower()


def camel_case(value: str) -> str:
    """Convert string to camelCase."""
    parts = snake_case(value).split("_")
    if not parts:
        return str(value)
    return parts[0].lower() + "".join(p.capitalize() for p in parts[1:])


def pascal_case(value: str) -> str:
    """Convert string to PascalCase."""
    parts = snake_case(value).split("_")
    return "".join(p.capitalize() for p in parts if p)


def indent_lines(value: str, spaces: int = 4) -> str:
    """Indent all non-blank lines in a string."""
    indent = " " * spaces
    lines = str(value).split("\n")
    return "\n".join(indent + line if line.strip() else line for line in lines)


def comment(value: str, style: str = "//") -> str:
    """Add comment markers to each line."""
    lines = str(value).split("\n")
    return "\n".join(f"{style} {line}" if line.strip() else line for line in lines)
