"""Protocol Buffers compiler plugin entry point (protoc-gen-tmpl)."""

import sys
from typing import BinaryIO, Optional

from google.protobuf.compiler import plugin_pb2

from .config import ConfigError, GeneratorConfig, load_config
from .generator import Generator
from .logging_config import get_logger, setup_logging
from .templates import TemplateError, load_templates

logger = get_logger(__name__)


def _error_response(message: str) -> plugin_pb2.CodeGeneratorResponse:
    return plugin_pb2.CodeGeneratorResponse(error=message)


def run(
    request: plugin_pb2.CodeGeneratorRequest,
    config: Optional[GeneratorConfig] = None,
) -> plugin_pb2.CodeGeneratorResponse:
    """
    Render the configured templates for a request.

    Configuration and template loading problems are reported through the
    response's error field, which protoc shows to the user.

    Args:
        request: Request from protoc
        config: Configuration (default: parsed from ``request.parameter``)

    Returns:
        Populated response message
    """
    try:
        if config is None:
            config = load_config(request.parameter)
        setup_logging(config.log_level)

        if not config.templates:
            raise ConfigError("no template given (use --tmpl_opt=template=FILE)")
        template = load_templates(*config.templates)
    except (ConfigError, TemplateError) as e:
        logger.error("%s", e)
        return _error_response(f"protoc-gen-tmpl: {e}")

    generator = Generator(
        request=request,
        template=template,
        extension=config.extension,
        root_dir=config.root_dir,
        params=config.custom,
    )
    response = generator.generate()
    response.supported_features = plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL
    return response


def main(stdin: Optional[BinaryIO] = None, stdout: Optional[BinaryIO] = None) -> int:
    """Execute the protoc plugin workflow."""
    stdin = stdin or sys.stdin.buffer
    stdout = stdout or sys.stdout.buffer

    request = plugin_pb2.CodeGeneratorRequest()
    payload = stdin.read()
    if payload:
        request.ParseFromString(payload)

    response = run(request)
    stdout.write(response.SerializeToString())
    stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
