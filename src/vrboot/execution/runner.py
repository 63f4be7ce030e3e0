# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vrboot/execution/runner.py
from __future__ import annotations

import logging
import os
import subprocess
import time
from dataclasses import dataclass, field
from typing import Optional, Sequence, Type, Union

from vrboot.errors import CommandError

Cmd = Sequence[Union[str, "os.PathLike[str]"]]


@dataclass
class CommandRunner:
    """Runs local commands, logging argv, output and exit status at DEBUG."""

    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("vrboot"))
    label: Optional[str] = None
    timeout: Optional[float] = 300.0

    def run(
        self,
        cmd: Cmd,
        *,
        check: bool = False,
        as_user: Optional[str] = None,
        input: Optional[str] = None,
        error_cls: Type[CommandError] = CommandError,
    ) -> subprocess.CompletedProcess:
        """
        Execute ``cmd`` and return the completed process.

        as_user:   run through ``sudo -n -u <user>``
        check:     raise ``error_cls`` on a non-zero exit
        """
        label = self.label or "cmd"
        argv = [str(c) for c in cmd]
        if as_user:
            argv = ["sudo", "-n", "-u", as_user, *argv]
        cmd_str = " ".join(argv)

        self.logger.debug(f"[{label}] $ {cmd_str}")

        start = time.monotonic()
        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                check=False,
                text=True,
                input=input,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            # a missing binary looks like any other failed command to callers
            result = subprocess.CompletedProcess(argv, 127, "", str(e))
        except subprocess.TimeoutExpired as e:
            raise error_cls(argv, -1, message=f"command timed out after {e.timeout}s: {cmd_str}") from e

        duration = time.monotonic() - start

        if result.stdout:
            self.logger.debug(f"[{label}][stdout]\n{result.stdout.rstrip()}")
        if result.stderr:
            self.logger.debug(f"[{label}][stderr]\n{result.stderr.rstrip()}")
        self.logger.debug(f"[{label}][exit {result.returncode}] ({duration:.2f}s)")

        if check and result.returncode != 0:
            raise error_cls(argv, result.returncode, result.stdout, result.stderr)

        return result
