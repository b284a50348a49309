"""Click-based CLI for the token engine."""

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import click

from . import __version__
from .config import EngineConfig, load_config
from .css_generator import generate_css, theme_selector
from .engine_logging import LogCategory, get_category_logger, setup_logging
from .errors import TokenEngineError, handle_exception
from .projection import build_variable_map, canonical_to_dict, parse_token_value
from .token_adapters import ImportResult, get_default_registry

logger = get_category_logger(LogCategory.CLI)


@dataclass
class CLIContext:
    """Shared state for subcommands."""

    config: EngineConfig
    verbose: bool = False
    quiet: bool = False


def _fail(error: Exception, verbose: bool = False) -> None:
    message, exit_code = handle_exception(
        error, use_color=sys.stderr.isatty(), verbose=verbose
    )
    click.echo(message, err=True)
    sys.exit(exit_code)


def _load_tokens(ctx: CLIContext, paths: tuple[Path, ...]) -> ImportResult:
    """Import every file, reporting warnings and exiting on fatal errors."""
    registry = get_default_registry()
    result = ImportResult()
    try:
        for path in paths:
            result = result.merge(registry.extract(path))
    except TokenEngineError as e:
        _fail(e, ctx.verbose)

    if not ctx.quiet:
        for warning in result.warnings:
            click.echo(f"Warning: {warning}", err=True)
    for error in result.errors:
        click.echo(f"Error: {error}", err=True)

    if result.errors and not result.tokens:
        sys.exit(1)

    logger.debug(f"Loaded {len(result.tokens)} tokens from {len(paths)} file(s)")
    return result


token_files = click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)


@click.group()
@click.version_option(version=__version__, prog_name="token-engine")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file path",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool, quiet: bool) -> None:
    """Token engine - normalize design tokens and project them to CSS variables."""
    try:
        config = load_config(config_path=config_path)
    except TokenEngineError as e:
        _fail(e, verbose)

    setup_logging(
        level=config.logging.level,
        quiet=quiet,
        verbose=verbose,
        log_file=config.logging.file,
        log_format=config.logging.format,
    )
    ctx.obj = CLIContext(config=config, verbose=verbose, quiet=quiet)


@cli.command()
@token_files
@click.option("--selector", help="Rule selector (default from config, ':root')")
@click.option("--minify", is_flag=True, help="Minify the stylesheet")
@click.option("--no-comments", is_flag=True, help="Omit category comments")
@click.option("--no-header", is_flag=True, help="Omit the generation header")
@click.option("--theme", help="Scope variables to the .theme-<name> class")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the stylesheet to a file instead of stdout",
)
@click.pass_obj
def export(
    ctx: CLIContext,
    files: tuple[Path, ...],
    selector: str | None,
    minify: bool,
    no_comments: bool,
    no_header: bool,
    theme: str | None,
    output: Path | None,
) -> None:
    """Export token files as a CSS custom-property stylesheet.

    Examples:
        token-engine export tokens.json
        token-engine export tokens.json --theme dark -o dark.css
    """
    result = _load_tokens(ctx, files)
    options = ctx.config.export

    if theme:
        selector = theme_selector(theme)

    css = generate_css(
        result.tokens,
        selector=selector or options.selector,
        include_comments=options.include_comments and not no_comments,
        minify=options.minify or minify,
        include_header=options.include_header and not no_header,
    )

    if output is None:
        click.echo(css, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(css, encoding="utf-8")
    if not ctx.quiet:
        click.echo(f"Wrote {len(result.tokens)} tokens to {output}", err=True)


def _token_summary(ctx: CLIContext, result: ImportResult) -> list[dict[str, Any]]:
    profiles = ctx.config.dimensions.profiles()
    return [
        {
            "name": token.name,
            "path": token.path,
            "category": token.category.value,
            "type": token.type,
            "css_variable": token.css_variable,
            "value": token.value,
            "canonical": canonical_to_dict(parse_token_value(token, profiles)),
        }
        for token in result.tokens
    ]


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def inspect(ctx: CLIContext, file: Path, as_json: bool) -> None:
    """Summarize the tokens in a token file.

    Examples:
        token-engine inspect tokens.json
        token-engine inspect tokens.json --json
    """
    result = _load_tokens(ctx, (file,))
    metadata = result.metadata

    if as_json:
        output = {
            "metadata": metadata,
            "errors": result.errors,
            "warnings": result.warnings,
            "tokens": _token_summary(ctx, result),
        }
        click.echo(json.dumps(output, indent=2, default=str))
        return

    click.echo(click.style(f"Token file: {file}", bold=True))
    click.echo(f"  Format:  {metadata.get('format', 'unknown')}")
    click.echo(f"  Parsed:  {metadata.get('totalParsed', 0)}")
    click.echo(f"  Skipped: {metadata.get('totalSkipped', 0)}")
    categories = metadata.get("categories", {})
    if categories:
        click.echo()
        click.echo("Categories:")
        for category, count in sorted(categories.items()):
            click.echo(f"  {category:<12} {count}")
    if ctx.verbose:
        click.echo()
        click.echo("Tokens:")
        for token in result.tokens:
            click.echo(f"  {token.css_variable}  ({token.category.value}/{token.type})")


@cli.command("vars")
@token_files
@click.pass_obj
def vars_command(ctx: CLIContext, files: tuple[Path, ...]) -> None:
    """Print the projected CSS variable map as JSON.

    Composite typography tokens are expanded into their sub-variables.
    """
    result = _load_tokens(ctx, files)
    click.echo(json.dumps(build_variable_map(result.tokens), indent=2))


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
