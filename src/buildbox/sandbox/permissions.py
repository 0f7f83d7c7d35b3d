"""Host identity checks against the sandbox's fixed account."""

from __future__ import annotations

import logging
import subprocess
from typing import Callable

from buildbox.errors import PermissionMismatch

logger = logging.getLogger(__name__)

# The sandbox image is built around a single unprivileged account.  Files
# written through bind mounts keep these ids on the host side.
SANDBOX_UID: int = 1000
SANDBOX_GID: int = 1000


def _id_output(flag: str) -> str:
    """Run ``id <flag>`` and return its raw standard output."""
    result = subprocess.run(
        ["id", flag], capture_output=True, text=True, check=True
    )
    return result.stdout


def _parse_id(raw: str) -> int:
    value = int(raw.strip())
    if value < 0:
        raise ValueError(f"id reported a negative value: {raw!r}")
    return value


class PermissionGuard:
    """Verifies that the host user matches the sandbox account.

    Container user namespaces are not used, so a build only behaves when the
    invoking host user has the same uid and gid as the account inside the
    image.  :meth:`check` raises on mismatch; deciding whether that is fatal
    is left to the caller.

    Parameters
    ----------
    identity:
        Callable returning the raw output of ``id`` for a flag (``"-u"`` or
        ``"-g"``).  Defaults to running the real ``id`` binary.
    """

    def __init__(self, identity: Callable[[str], str] | None = None) -> None:
        self._identity = identity or _id_output

    def check(self) -> None:
        """Raise :class:`PermissionMismatch` if uid or gid is not 1000.

        Output that does not parse as an unsigned integer raises
        :class:`ValueError`; that indicates a broken host, not a user error.
        """
        uid = _parse_id(self._identity("-u"))
        if uid != SANDBOX_UID:
            raise PermissionMismatch(f"UID is {uid}, not {SANDBOX_UID}")

        gid = _parse_id(self._identity("-g"))
        if gid != SANDBOX_GID:
            raise PermissionMismatch(f"GID is {gid}, not {SANDBOX_GID}")

        logger.debug("Host uid/gid match sandbox account (%d/%d)", uid, gid)
