"""Root CLI group for rf2ctl with global flags and command registration."""

from __future__ import annotations

import click

from rf2ctl import __version__
from rf2ctl.commands import register_commands
from rf2ctl.commands._context import AppContext
from rf2ctl.config.settings import Rf2Settings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="rf2ctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--release-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Unpacked RF2 release to search for relationship files.",
)
@click.option(
    "--stated",
    "stated_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Stated relationship release file.",
)
@click.option(
    "--inferred",
    "inferred_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Inferred relationship release file.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    release_dir: str | None,
    stated_file: str | None,
    inferred_file: str | None,
) -> None:
    """rf2ctl — SNOMED CT stated/inferred relationship graph tool."""
    ctx.ensure_object(dict)
    settings = Rf2Settings.from_cli(
        config_path=config_path,
        release_dir=release_dir,
        stated_file=stated_file,
        inferred_file=inferred_file,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
