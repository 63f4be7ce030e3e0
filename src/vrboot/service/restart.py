# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vrboot/service/restart.py
from __future__ import annotations

import logging
from typing import Optional, Sequence

from vrboot.errors import ServiceRestartError
from vrboot.execution.runner import CommandRunner

log = logging.getLogger("vrboot")


def restart_agent(command: Sequence[str], runner: Optional[CommandRunner] = None) -> None:
    """Restart the control-plane agent; raises ServiceRestartError on failure."""
    runner = runner or CommandRunner(label="agent-restart")
    runner.run(command, check=True, error_cls=ServiceRestartError)
    log.info(f"restarted control-plane agent: {' '.join(command)}")
