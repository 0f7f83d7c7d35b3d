"""Command-line entry point.

Wires :class:`~buildbox.config.Settings`, the sandbox configuration file
and the :class:`~buildbox.sandbox.SandboxLauncher` together, and acts as
the process boundary: any :class:`~buildbox.errors.BuildboxError` is logged
and turned into the process exit status, as are filesystem errors and
invalid configuration files.  A failed container run exits
with the container's own status.
"""

from __future__ import annotations

import logging
import sys

import click
from pydantic import ValidationError

from buildbox.config import Settings, load_sandbox_config
from buildbox.errors import BuildboxError
from buildbox.sandbox import SandboxLauncher

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class CLIContext:
    """Shared state handed to every subcommand."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def load_config(self):
        return load_sandbox_config(self.settings.config_path)

    def launcher(self) -> SandboxLauncher:
        return SandboxLauncher(runtime=self.settings.runtime)


@click.group()
@click.option("--log-level", default=None, help="Override BUILDBOX_LOG_LEVEL.")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Run builds and shells inside the pinned build container."""
    settings = Settings()
    if log_level:
        settings.log_level = log_level
    _configure_logging(settings.log_level)
    ctx.obj = CLIContext(settings)


@cli.command()
@click.option("--print", "print_only", is_flag=True, help="Print the container command instead of running it.")
@click.option("-c", "command", default=None, help="Command to run in the shell.")
@click.pass_obj
def shell(obj: CLIContext, print_only: bool, command: str | None) -> None:
    """Open an interactive shell in the build container."""
    obj.launcher().shell(obj.load_config(), print_only=print_only, command=command)


@cli.command(
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False}
)
@click.option("--print", "print_only", is_flag=True, help="Print the container command instead of running it.")
@click.option("--interactive", is_flag=True, help="Allocate an interactive terminal.")
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_obj
def run(obj: CLIContext, print_only: bool, interactive: bool, command: tuple[str, ...]) -> None:
    """Run COMMAND in the build container."""
    obj.launcher().run(
        obj.load_config(),
        list(command),
        interactive=interactive,
        print_only=print_only,
    )


def main(argv: list[str] | None = None) -> int:
    """Invoke the CLI and map errors onto the process exit status."""
    try:
        cli.main(args=argv, standalone_mode=False)
    except click.exceptions.Abort:
        click.echo("Aborted!", err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except BuildboxError as exc:
        logger.error("%s", exc)
        return exc.exit_code
    except (OSError, ValidationError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
