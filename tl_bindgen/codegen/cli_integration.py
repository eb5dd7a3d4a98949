"""
CLI integration for code generation functionality.

Provides command-line options and the handler that runs a generation.
"""

import argparse

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.syntax import Syntax
from rich import box

from . import (
    build_bindings,
    check_bindings,
    generate_bindings,
    get_registry,
    get_language_info,
    list_supported_languages,
    is_language_supported,
    load_config,
    ConfigError,
    GeneratorConfig,
    GeneratorError,
    RegistryError,
)
from ..logging_config import get_logger
from ..utils import SchemaLoaderError, load_schema_file

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_DRIFT = 2


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Initialize rich console
console = Console()


def add_codegen_args(parser: argparse.ArgumentParser):
    """Add code generation arguments to an existing CLI parser."""

    parser.add_argument("schema", nargs="?", help="JSON schema description file")

    codegen_group = parser.add_argument_group("code generation")

    codegen_group.add_argument(
        "--output",
        "-o",
        metavar="FILE",
        help="Output file for generated code (default: output_file from config)",
    )

    codegen_group.add_argument(
        "--language",
        "-l",
        default="rust",
        help="Target language (default: rust)",
    )

    codegen_group.add_argument(
        "--config", metavar="FILE", help="JSON configuration file for code generation"
    )

    codegen_group.add_argument(
        "--check",
        action="store_true",
        help="Exit with status 2 if the output file is out of date; never write",
    )

    codegen_group.add_argument(
        "--stdout",
        action="store_true",
        help="Print the generated code instead of writing it",
    )

    codegen_group.add_argument(
        "--list-languages",
        action="store_true",
        help="List supported target languages and exit",
    )

    common_group = parser.add_argument_group("common generation options")
    common_group.add_argument(
        "--no-comments",
        action="store_true",
        help="Don't generate doc comments in output code",
    )

    common_group.add_argument(
        "--line-ending",
        choices=["lf", "crlf"],
        help="Line terminator of the output file (default: host convention)",
    )

    common_group.add_argument(
        "--verbose",
        action="store_true",
        help="Show generation result metadata",
    )


def handle_codegen_command(args: argparse.Namespace) -> int:
    """
    Handle code generation command from CLI arguments.

    Returns:
        Exit code (0 for success, 1 for error, 2 for drift in check mode)
    """
    try:
        if args.list_languages:
            return _list_languages()

        if not is_language_supported(args.language):
            supported = ", ".join(list_supported_languages())
            raise CLIError(f"Unsupported language '{args.language}' (supported: {supported})")

        if not args.schema:
            raise CLIError("A schema description file is required")

        config = _build_config(args)
        schema = load_schema_file(args.schema)

        if args.stdout:
            return _print_code(schema, args.language, config, args)

        output = args.output or config.output_file
        if not output:
            raise CLIError("No output file given (use --output or output_file in config)")

        if args.check:
            return _check_output(schema, args.language, config, output)

        return _write_output(schema, args.language, config, output, args)

    except (CLIError, ConfigError, RegistryError, SchemaLoaderError) as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return EXIT_ERROR
    except FileNotFoundError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return EXIT_ERROR
    except GeneratorError as e:
        console.print(f"[red]✗ Code generation failed:[/red] {e}")
        return EXIT_ERROR
    except OSError as e:
        logger.error("Failed to write output: %s", e, exc_info=True)
        console.print(f"[red]✗ Failed to write output:[/red] {e}")
        return EXIT_ERROR


def _list_languages() -> int:
    """List supported languages with details."""
    table = Table(
        title="📋 Supported Languages", box=box.ROUNDED, title_style="bold cyan"
    )

    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for language in list_supported_languages():
        info = get_language_info(language)
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(f"🔧 {language}", info["file_extension"], info["class"], aliases)

    console.print()
    console.print(table)
    console.print()
    return EXIT_OK


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Build configuration from CLI arguments."""
    overrides = {}

    if args.no_comments:
        overrides["add_comments"] = False

    if args.line_ending:
        overrides["line_ending"] = args.line_ending

    language = get_registry().resolve(args.language)
    config = load_config(language, custom_config=overrides, config_file=args.config)
    logger.debug("Effective configuration: %s", config)
    return config


def _print_code(schema, language: str, config: GeneratorConfig, args) -> int:
    """Render generated code to the console."""
    result = build_bindings(schema, language, config)

    syntax = Syntax(result.code, language, theme="monokai", line_numbers=False)
    console.print(syntax)

    _report(result, args)
    return EXIT_OK


def _check_output(schema, language: str, config: GeneratorConfig, output: str) -> int:
    """Report whether the output file is stale."""
    if check_bindings(schema, output, language, config):
        console.print(f"[yellow]⚠️  {output} is out of date[/yellow]")
        return EXIT_DRIFT

    console.print(f"[green]✓[/green] {output} is up to date")
    return EXIT_OK


def _write_output(schema, language: str, config: GeneratorConfig, output: str, args) -> int:
    """Generate and conditionally write the output file."""
    result = build_bindings(schema, language, config)
    outcome = generate_bindings(schema, output, language, config, result=result)

    if outcome.changed:
        console.print(
            f"[green]✓[/green] Generated {language} code saved to [cyan]{outcome.path}[/cyan] "
            f"({outcome.size} bytes)"
        )
    else:
        console.print(f"[green]✓[/green] [cyan]{outcome.path}[/cyan] is up to date")

    _report(result, args)

    return EXIT_OK


def _report(result, args: argparse.Namespace):
    """Show metadata and warnings of a generation result."""
    if args.verbose and result.metadata:
        metadata_table = Table(
            title="📊 Generation Metadata",
            box=box.SIMPLE,
            show_header=True,
            header_style="bold cyan",
        )

        metadata_table.add_column("Property", style="bold")
        metadata_table.add_column("Value", style="green")

        for key, value in result.metadata.items():
            metadata_table.add_row(key.replace("_", " ").title(), str(value))

        console.print()
        console.print(metadata_table)

    if result.warnings:
        console.print(
            Panel(
                "\n".join(f"• {warning}" for warning in result.warnings),
                title="⚠️  Warnings",
                border_style="yellow",
            )
        )
