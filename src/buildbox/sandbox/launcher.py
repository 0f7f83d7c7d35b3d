"""Container runtime invocation for sandboxed builds and shells."""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Sequence

from buildbox.errors import (
    EnvironmentResolutionError,
    PermissionMismatch,
    SubprocessFailure,
)
from buildbox.models.component import Mount, SandboxConfig
from buildbox.sandbox.permissions import PermissionGuard

logger = logging.getLogger(__name__)

# Fixed account baked into every sandbox image.
SANDBOX_USER: str = "buildbox"
SANDBOX_HOME: str = f"/home/{SANDBOX_USER}"
SANDBOX_WORKDIR: str = f"{SANDBOX_HOME}/volume"

# Reported when the runtime was terminated without an exit status.
UNKNOWN_EXIT_CODE: int = 1001


class SandboxLauncher:
    """Builds and runs container-runtime invocations.

    The current directory is mounted read-write as the working directory
    inside the container, the host ``~/.gitconfig`` is mounted read-only,
    and the command runs as the sandbox account.  The child process
    inherits this process's standard streams, so interactive sessions work
    transparently, and the call blocks until it exits.

    Parameters
    ----------
    runtime:
        Name or path of the container runtime executable.
    home:
        Host home directory.  Resolved from the process when omitted.
    cwd:
        Host directory to mount as the project.  Defaults to the process's
        current directory.
    guard:
        Permission guard consulted before a real launch.
    """

    def __init__(
        self,
        runtime: str = "docker",
        home: Path | None = None,
        cwd: Path | None = None,
        guard: PermissionGuard | None = None,
    ) -> None:
        self.runtime = runtime
        self._home = home
        self._cwd = cwd
        self._guard = guard or PermissionGuard()

    # ------------------------------------------------------------------
    # Host state
    # ------------------------------------------------------------------

    def _resolve_home(self) -> Path:
        if self._home is not None:
            return self._home
        try:
            return Path.home()
        except (KeyError, RuntimeError) as exc:
            raise EnvironmentResolutionError(
                "Unable to resolve the home directory"
            ) from exc

    def _resolve_cwd(self) -> Path:
        return self._cwd if self._cwd is not None else Path.cwd()

    # ------------------------------------------------------------------
    # Invocation
    # ------------------------------------------------------------------

    def mounts_for(self, config: SandboxConfig) -> list[Mount]:
        """Return configured mounts followed by the two implicit ones."""
        home = self._resolve_home()
        cwd = self._resolve_cwd()
        mounts = list(config.mounts)
        mounts.append(
            Mount(
                src=str(home / ".gitconfig"),
                dest=f"{SANDBOX_HOME}/.gitconfig",
                readonly=True,
            )
        )
        mounts.append(Mount(src=str(cwd), dest=SANDBOX_WORKDIR))
        return mounts

    def build_invocation(
        self,
        config: SandboxConfig,
        command: Sequence[str],
        interactive: bool = False,
    ) -> list[str]:
        """Return the runtime arguments (excluding the executable itself)."""
        args = ["run", "--rm"]
        for mount in self.mounts_for(config):
            logger.debug(" - mounting %s", mount.src)
            args.extend(["-v", mount.flag()])
        args.extend(["-w", SANDBOX_WORKDIR])
        args.extend(["--user", SANDBOX_USER])
        args.append("-it" if interactive else "-t")
        args.append(config.image)
        args.extend(command)
        return args

    def render(
        self,
        config: SandboxConfig,
        command: Sequence[str],
        interactive: bool = False,
    ) -> str:
        """Render the full invocation as a single shell-pasteable line."""
        args = self.build_invocation(config, command, interactive)
        return shlex.join([self.runtime, *args])

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(
        self,
        config: SandboxConfig,
        command: Sequence[str],
        *,
        interactive: bool = False,
        print_only: bool = False,
    ) -> None:
        """Run *command* in the sandbox, or print the invocation.

        Raises
        ------
        SubprocessFailure
            If the runtime exits non-zero.  Signal termination is reported
            with :data:`UNKNOWN_EXIT_CODE`.
        EnvironmentResolutionError
            If the home directory cannot be resolved.
        """
        if print_only:
            print(self.render(config, command, interactive))
            return

        args = self.build_invocation(config, command, interactive)

        logger.debug("Performing permission sanity check")
        try:
            self._guard.check()
        except (PermissionMismatch, OSError, subprocess.CalledProcessError) as exc:
            logger.warning("%s", exc)
            logger.warning("You will likely have permission issues")

        logger.debug("Entering container: %s %s", self.runtime, " ".join(args))
        completed = subprocess.run([self.runtime, *args])
        logger.debug("Exited container with status %s", completed.returncode)

        if completed.returncode != 0:
            code = completed.returncode
            raise SubprocessFailure(code if code > 0 else UNKNOWN_EXIT_CODE)

    def shell(
        self,
        config: SandboxConfig,
        *,
        print_only: bool = False,
        command: str | None = None,
    ) -> None:
        """Open an interactive bash login shell in the sandbox.

        When *command* is given it is run through ``bash -c``.  It is passed
        as a single argument token; no host shell sits between this process
        and the runtime, so no extra quoting is needed.
        """
        if not print_only:
            logger.info("Entering sandbox container")
        bash = ["/bin/bash"]
        if command is not None:
            bash.extend(["-c", command])
        self.run(config, bash, interactive=True, print_only=print_only)
