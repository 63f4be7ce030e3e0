# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vrboot/host/nics.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from vrboot.errors import MalformedBootstrapError
from vrboot.utils.net import canonical_mac

log = logging.getLogger("vrboot")

ARPHRD_ETHER = "1"


def _natural_key(name: str):
    # eth2 before eth10
    return [int(p) if p.isdigit() else p for p in re.split(r"(\d+)", name)]


@dataclass(frozen=True)
class NicRecord:
    name: str
    mac: str


class NicInventory:
    """
    Physical host network interfaces keyed by MAC.

    Built from a snapshot of sysfs; call ``scan`` again for a fresh view.
    A MAC carried by more than one interface only fails when looked up.
    """

    def __init__(self, nics: List[NicRecord]):
        self._nics: List[NicRecord] = []
        self._by_mac: Dict[str, List[NicRecord]] = {}
        for nic in nics:
            record = NicRecord(name=nic.name, mac=canonical_mac(nic.mac))
            self._nics.append(record)
            self._by_mac.setdefault(record.mac, []).append(record)

    @classmethod
    def scan(cls, sysfs_net: Path | str = "/sys/class/net") -> "NicInventory":
        root = Path(sysfs_net)
        nics: List[NicRecord] = []
        for dev in sorted(root.iterdir()):
            if dev.name == "lo":
                continue
            # vifs, bonds and bridges reuse a parent's MAC and have no device link
            if "." in dev.name or not (dev / "device").exists():
                log.debug(f"skipping virtual interface {dev.name}")
                continue
            type_file = dev / "type"
            if type_file.exists() and type_file.read_text().strip() != ARPHRD_ETHER:
                log.debug(f"skipping non-ethernet interface {dev.name}")
                continue
            address = (dev / "address").read_text().strip()
            if not address:
                continue
            nics.append(NicRecord(name=dev.name, mac=address))
        log.debug(f"nic inventory: {[(n.name, n.mac) for n in nics]}")
        return cls(nics)

    def lookup(self, mac: str) -> NicRecord | None:
        try:
            records = self._by_mac.get(canonical_mac(mac), [])
        except ValueError:
            return None
        if len(records) > 1:
            raise MalformedBootstrapError(
                f"MAC {mac} is shared by {', '.join(r.name for r in records)}"
            )
        return records[0] if records else None

    def names(self) -> List[str]:
        return sorted((n.name for n in self._nics), key=_natural_key)

    def __iter__(self):
        return iter(sorted(self._nics, key=lambda n: _natural_key(n.name)))

    def __len__(self) -> int:
        return len(self._nics)
