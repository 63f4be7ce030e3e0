# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vrboot/errors.py
from __future__ import annotations

from typing import Optional, Sequence


class BootError(RuntimeError):
    """Base class for failures that abort the boot run."""


class NotReadyError(BootError):
    """Raised inside a readiness probe when the precondition does not hold yet."""


class ReadinessTimeout(BootError):
    """Raised when a readiness gate gives up."""

    def __init__(self, description: str, timeout: float):
        super().__init__(f"timed out after {timeout:g}s waiting for {description}")
        self.description = description
        self.timeout = timeout


class MalformedBootstrapError(BootError, ValueError):
    """The bootstrap payload is unparseable, incomplete or refers to unknown hardware."""


class CommandError(BootError):
    """A checked shell command exited non-zero."""

    def __init__(
        self,
        cmd: Sequence[str],
        returncode: int,
        stdout: str = "",
        stderr: str = "",
        message: Optional[str] = None,
    ):
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stdout = stdout or ""
        self.stderr = stderr or ""
        detail = self.stderr.strip() or self.stdout.strip()
        msg = message or f"command failed (rc={returncode}): {' '.join(self.cmd)}"
        if detail:
            msg = f"{msg}\n{detail}"
        super().__init__(msg)


class ConfigCommitError(CommandError):
    """The configuration engine rejected the directive batch."""


class ServiceRestartError(CommandError):
    """The control-plane agent could not be restarted."""
