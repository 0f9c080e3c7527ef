"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy Workspace initialization and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rf2ctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from rf2ctl.config.settings import Rf2Settings
    from rf2ctl.infrastructure.workspace import Workspace
    from rf2ctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.  The workspace is lazily
    initialized on first use so ``--help`` and ``--version`` never read
    release files.
    """

    def __init__(self, settings: Rf2Settings) -> None:
        self.settings = settings
        self._workspace: Workspace | None = None

        # Configure structured logging
        from rf2ctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        # Enable telemetry context var when verbose
        if settings.verbose:
            from rf2ctl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def workspace(self) -> Workspace:
        """The workspace instance (created lazily on first access).

        A hash namespace that cannot be parsed aborts the command here,
        before any release row is read.
        """
        if self._workspace is None:
            from rf2ctl.domain.errors import HashInitializationError
            from rf2ctl.infrastructure.workspace import Workspace

            try:
                self._workspace = Workspace(self.settings)
            except HashInitializationError as exc:
                raise click.ClickException(str(exc)) from exc
        return self._workspace

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
