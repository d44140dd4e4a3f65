"""
Command-line interface for rendering templates outside of protoc.

Reads a FileDescriptorSet written by ``protoc --descriptor_set_out`` and
renders templates against it exactly as the protoc plugin would.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from . import __version__
from .config import ConfigError, load_config
from .funcs import list_helpers
from .generator import Generator
from .loader import DescriptorLoadError, build_request, load_descriptor_set
from .logging_config import get_logger, setup_logging
from .templates import TemplateError, load_templates

logger = get_logger(__name__)

# Initialize rich console
console = Console()


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="proto-tmpl",
        description="Render templates against compiled proto descriptors",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  protoc --include_source_info --include_imports -o api.pb api.proto
  proto-tmpl api.pb -t doc.html -o docs/
  proto-tmpl api.pb -t main.md -t partials.md --ext .md --root-dir /api
  proto-tmpl --list-helpers
        """.strip(),
    )

    parser.add_argument(
        "descriptor_set", nargs="?", help="FileDescriptorSet file produced by protoc"
    )

    parser.add_argument(
        "--template",
        "-t",
        action="append",
        dest="templates",
        metavar="FILE",
        help="Template file; repeat to add templates it includes (first one is executed)",
    )

    parser.add_argument(
        "--ext",
        dest="extension",
        metavar="EXT",
        help="Extension of generated files (default: from the template file name)",
    )

    parser.add_argument(
        "--root-dir",
        metavar="PATH",
        help="Root directory prefix for links between generated files",
    )

    parser.add_argument(
        "--output",
        "-o",
        metavar="DIR",
        help="Output directory (default: print to console)",
    )

    parser.add_argument("--config", metavar="FILE", help="JSON configuration file")

    parser.add_argument(
        "--files",
        nargs="+",
        metavar="NAME",
        help="Only render these proto files (names as in the descriptor set)",
    )

    info_group = parser.add_argument_group("information")
    info_group.add_argument(
        "--list-helpers",
        action="store_true",
        help="List the helper functions available to templates and exit",
    )
    info_group.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    info_group.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the command line interface.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = create_parser().parse_args(argv)

    if args.list_helpers:
        return _list_helpers()

    if not args.descriptor_set:
        console.print("[red]✗[/red] A descriptor set file is required")
        return 1

    try:
        config = load_config(
            config_file=args.config,
            overrides={
                "templates": args.templates,
                "extension": args.extension,
                "root_dir": args.root_dir,
                "log_level": "DEBUG" if args.verbose else None,
            },
        )
        setup_logging(config.log_level)

        if not config.templates:
            raise ConfigError("At least one --template is required")

        descriptor_set = load_descriptor_set(args.descriptor_set)
        request = build_request(descriptor_set, args.files)
        template = load_templates(*config.templates)

    except (ConfigError, DescriptorLoadError, TemplateError) as e:
        console.print(f"[red]✗ Error:[/red] {escape(str(e))}")
        return 1

    generator = Generator(
        request=request,
        template=template,
        extension=config.extension,
        root_dir=config.root_dir,
        params=config.custom,
        files=args.files,
    )
    response = generator.generate()

    if response.error:
        console.print(
            Panel(
                Text(response.error.rstrip("\n")),
                title="✗ Generation failed",
                border_style="red",
            )
        )
        return 1

    if args.output:
        return _write_outputs(response, Path(args.output))

    _print_outputs(response)
    return 0


def _write_outputs(response, output_dir: Path) -> int:
    """Write generated files below an output directory."""
    table = Table(title="📄 Generated Files", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("File", style="bold green")
    table.add_column("Size", style="cyan", justify="right")

    try:
        for generated in response.file:
            path = output_dir / generated.name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(generated.content, encoding="utf-8")
            logger.debug("Wrote %s", path)
            table.add_row(str(path), f"{len(generated.content)} chars")
    except OSError as e:
        console.print(f"[red]✗ Failed to write output:[/red] {escape(str(e))}")
        return 1

    console.print(table)
    console.print(f"[green]✓[/green] Wrote {len(response.file)} file(s) to {escape(str(output_dir))}")
    return 0


def _print_outputs(response):
    """Display generated files on the console."""
    for generated in response.file:
        lexer = Syntax.guess_lexer(generated.name, code=generated.content)
        console.print(
            Panel(
                Syntax(generated.content, lexer, line_numbers=False),
                title=generated.name,
                border_style="blue",
            )
        )


def _list_helpers() -> int:
    """List template helper functions."""
    table = Table(
        title="🔧 Template Helpers", box=box.ROUNDED, title_style="bold cyan"
    )
    table.add_column("Name", style="bold green", no_wrap=True)
    table.add_column("Description")

    for name, description in list_helpers().items():
        table.add_row(name, description or "[dim]none[/dim]")

    console.print()
    console.print(table)
    console.print()
    console.print(
        Panel(
            "The proto file being rendered is available as [cyan]file[/cyan].\n"
            "[bold]Example:[/bold] {% for m in all_messages() %}{{ m.name }} "
            "{{ comments(*m.path) }}{% endfor %}",
            title="💡 Usage",
            border_style="blue",
        )
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
