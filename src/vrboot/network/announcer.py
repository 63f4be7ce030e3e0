# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vrboot/network/announcer.py
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from vrboot.errors import CommandError
from vrboot.execution.runner import CommandRunner
from vrboot.vyos.synthesizer import InterfaceAssignment

log = logging.getLogger("vrboot")


def arping_command(nic: str, ip: str, gateway: str) -> List[str]:
    return ["arping", "-A", "-U", "-c", "1", "-I", nic, "-s", ip, gateway]


class NetworkAnnouncer:
    """
    Sends one gratuitous ARP per configured interface so neighbours learn
    the new address without waiting for their caches to expire.
    """

    def __init__(self, runner: Optional[CommandRunner] = None):
        self.runner = runner or CommandRunner(label="arping", timeout=10.0)

    def announce(self, nics: Iterable[InterfaceAssignment]) -> int:
        """Returns how many announcements were sent successfully."""
        sent = 0
        for nic in nics:
            if not nic.gateway:
                log.warning(f"no gateway for {nic.name}, skipping address announcement")
                continue
            try:
                result = self.runner.run(arping_command(nic.name, nic.ip, nic.gateway))
            except (CommandError, OSError) as exc:
                log.warning(f"arping on {nic.name} failed: {exc}")
                continue
            if result.returncode != 0:
                log.warning(
                    f"arping on {nic.name} exited {result.returncode}: {(result.stderr or '').strip()}"
                )
                continue
            sent += 1
        return sent
