"""Main CLI entry point for stubcraft."""

import logging
import sys
from pathlib import Path
from typing import Any

import click
from click.core import ParameterSource
from rich.console import Console
from rich.markup import escape

from ..adapters.io.declaration_loader import load_declarations
from ..adapters.io.file_sink import TestFileSink
from ..adapters.io.rich_logging import setup_logging
from ..config.loader import ConfigLoader, ConfigurationError
from ..config.models import StubCraftConfig
from ..domain.models import StubCraftError
from ..ports.sink_port import ByteSink
from ..render.engine import RenderEngine
from ..render.registry import TemplateRegistry

logger = logging.getLogger(__name__)


class ClickContext:
    """Context object for Click commands."""

    def __init__(self) -> None:
        self.config_file: Path | None = None
        self.console: Console = Console(stderr=True)
        self.verbose: bool = False
        self.quiet: bool = False


def build_registry(config: StubCraftConfig) -> TemplateRegistry:
    """Select the template set named by the configuration."""
    if config.templates.directory:
        return TemplateRegistry.from_directory(config.templates.directory)
    if config.templates.name:
        return TemplateRegistry.from_name(config.templates.name)
    return TemplateRegistry.from_defaults()


def _fail(ctx: click.Context, message: str) -> None:
    ctx.obj.console.print(f"[bold red]Error:[/] {escape(message)}", highlight=False)
    sys.exit(1)


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Reduce output: set log level to WARNING and hide INFO",
)
@click.pass_context
def app(ctx: click.Context, config: Path | None, verbose: bool, quiet: bool) -> None:
    """stubcraft - generate unit-test stubs from analyzed declarations."""
    ctx.ensure_object(ClickContext)
    ctx.obj.config_file = config
    ctx.obj.verbose = verbose
    ctx.obj.quiet = quiet


@app.command()
@click.argument("declarations", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the generated tests to this file instead of stdout",
)
@click.option(
    "--write",
    "-w",
    is_flag=True,
    help="Write the generated tests next to the source file (foo.go -> foo_test.go)",
)
@click.option(
    "--template-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Load every file of this directory as the template set",
)
@click.option("--template", "template_name", help="Use a bundled alternate template set")
@click.option(
    "--subtests/--no-subtests", default=True, help="Wrap each test case in a sub-test"
)
@click.option("--parallel", is_flag=True, help="Run sub-tests in parallel")
@click.option(
    "--print-inputs",
    is_flag=True,
    help="Fill one test case with zero values and print inputs in failure messages",
)
@click.option(
    "--only",
    multiple=True,
    help="Only generate tests for these function names (repeatable)",
)
@click.pass_context
def render(
    ctx: click.Context,
    declarations: Path,
    output: Path | None,
    write: bool,
    template_dir: Path | None,
    template_name: str | None,
    subtests: bool,
    parallel: bool,
    print_inputs: bool,
    only: tuple[str, ...],
) -> None:
    """Render tests for the functions described in DECLARATIONS (YAML or JSON)."""
    if output and write:
        _fail(ctx, "--output and --write cannot be combined")

    cli_overrides: dict[str, Any] = {}
    # A template source given on the command line replaces the configured one
    templates: dict[str, Any] = {}
    if template_dir or template_name:
        templates["directory"] = str(template_dir) if template_dir else None
        templates["name"] = template_name
    if templates:
        cli_overrides["templates"] = templates
    # Only flags given on the command line override the configuration file
    flags = {
        key: value
        for key, value in (
            ("subtests", subtests),
            ("parallel", parallel),
            ("print_inputs", print_inputs),
        )
        if ctx.get_parameter_source(key) is ParameterSource.COMMANDLINE
    }
    if flags:
        cli_overrides["render"] = flags

    try:
        config = ConfigLoader(ctx.obj.config_file).load_config(cli_overrides=cli_overrides)
    except ConfigurationError as e:
        _fail(ctx, f"Configuration error: {e}")

    level = config.logging.level
    if ctx.obj.verbose:
        level = "DEBUG"
    elif ctx.obj.quiet:
        level = "WARNING"
    setup_logging(level, rich_tracebacks=config.logging.rich_tracebacks)

    try:
        engine = RenderEngine(build_registry(config))
        document = load_declarations(declarations)
    except StubCraftError as e:
        _fail(ctx, str(e))

    functions = [f for f in document.functions if not only or f.name in only]
    if only and not functions:
        _fail(ctx, f"No functions named {', '.join(only)} in {declarations}")

    def emit(sink: ByteSink) -> None:
        engine.render_header(sink, document.header)
        for function in functions:
            engine.render_function(
                sink,
                function,
                document.header,
                constructor=document.constructor_for(function),
                print_inputs=config.render.print_inputs,
                subtests=config.render.subtests,
                parallel=config.render.parallel,
                template_params=config.templates.params,
            )

    destination = output or (Path(document.source_path.test_path) if write else None)
    try:
        if destination is None:
            emit(click.get_binary_stream("stdout"))
        else:
            with TestFileSink(destination) as sink:
                emit(sink)
            logger.info(f"Generated {len(functions)} tests in {destination}")
    except StubCraftError as e:
        _fail(ctx, str(e))


@app.command(name="templates")
def list_templates() -> None:
    """List the bundled alternate template sets."""
    for name in TemplateRegistry.available_sets():
        click.echo(name)


if __name__ == "__main__":
    app()
