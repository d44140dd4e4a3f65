"""
Template-based protoc code generation.

Renders a Jinja2 template once per proto file of a protoc
CodeGeneratorRequest and returns the results as a CodeGeneratorResponse.
"""

__version__ = "0.1.0"

from .config import ConfigError, GeneratorConfig, load_config, parse_parameter
from .funcs import RenderContext, func_map, list_helpers
from .generator import Generator, GeneratorError, new
from .naming import find_ext, output_name, strip_ext, unix_path
from .templates import (
    RenderError,
    TemplateError,
    TemplateSet,
    from_string,
    load_templates,
)

# Export main interfaces
__all__ = [
    # Generation
    "Generator",
    "GeneratorError",
    "new",
    # Templates
    "TemplateSet",
    "TemplateError",
    "RenderError",
    "load_templates",
    "from_string",
    # Helpers
    "RenderContext",
    "func_map",
    "list_helpers",
    # Naming
    "find_ext",
    "output_name",
    "strip_ext",
    "unix_path",
    # Configuration
    "GeneratorConfig",
    "ConfigError",
    "load_config",
    "parse_parameter",
]
