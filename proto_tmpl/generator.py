"""
Template-driven generation of protoc plugin responses.

Renders a template once per proto file of a CodeGeneratorRequest and
collects the results into a CodeGeneratorResponse.
"""

from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, Optional

from google.protobuf.compiler import plugin_pb2

from .funcs import RenderContext, func_map
from .logging_config import get_logger
from .naming import output_name, resolve_ext
from .templates import TemplateError, TemplateSet

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Fatal error that prevents generation from running at all."""

    pass


class Generator:
    """
    Generates a response for a protoc request from a template.

    Attributes:
        request: Request from the protoc compiler; callers fill it in
        template: Template set executed for every proto file
        extension: Extension of generated files; empty means use the
            extension of the first template file that has one
        root_dir: Root directory prefix placed onto links to generated types
        params: Extra settings made available to templates via ``params()``
        files: Names of the proto files to render; None renders every
            file of the request. All files stay visible to the helpers.
    """

    def __init__(
        self,
        request: Optional[plugin_pb2.CodeGeneratorRequest] = None,
        template: Optional[TemplateSet] = None,
        extension: str = "",
        root_dir: str = "",
        params: Optional[Mapping[str, Any]] = None,
        files: Optional[Iterable[str]] = None,
    ):
        self.request = request if request is not None else plugin_pb2.CodeGeneratorRequest()
        self.template = template
        self.extension = extension
        self.root_dir = root_dir
        self.params = dict(params or {})
        self.files = list(files) if files is not None else None
        self._response = plugin_pb2.CodeGeneratorResponse()

    def generate(self) -> plugin_pb2.CodeGeneratorResponse:
        """
        Generate a response for ``self.request``.

        Every call starts by resetting the response, so a generator can be
        reused for several requests. Every proto file is rendered even after
        a failure; if any file fails, the returned response carries no
        files and an error with one line per failing file, in request order.

        Returns:
            A copy of the generated response

        Raises:
            GeneratorError: If no template is set
        """
        self._response.Clear()

        if self.template is None:
            raise GeneratorError("no template set")

        ext = resolve_ext(self.extension, self.template)
        proto_files = tuple(self.request.proto_file)
        params = MappingProxyType(dict(self.params))
        targets = proto_files
        if self.files is not None:
            targets = tuple(f for f in proto_files if f.name in self.files)
        logger.debug("Generating %d file(s) with extension %r", len(targets), ext)

        errors: List[str] = []
        for f in targets:
            ctx = RenderContext(
                file=f,
                proto_files=proto_files,
                ext=ext,
                root_dir=self.root_dir,
                params=params,
            )

            try:
                content = self.template.funcs(func_map(ctx)).execute(f)
            except TemplateError as e:
                logger.warning("Failed to render %s: %s", f.name, e)
                errors.append(f"{f.name}: {e}\n")
                continue

            name = output_name(f.name, ext)
            logger.debug("Rendered %s -> %s", f.name, name)
            self._response.file.add(name=name, content=content)

        if errors:
            del self._response.file[:]
            self._response.error = "".join(errors)
            logger.info("Generation failed for %d of %d file(s)", len(errors), len(targets))
        else:
            logger.info("Generated %d file(s)", len(self._response.file))

        response = plugin_pb2.CodeGeneratorResponse()
        response.CopyFrom(self._response)
        return response


def new() -> Generator:
    """Return a generator with an empty request, ready for a template."""
    return Generator()
