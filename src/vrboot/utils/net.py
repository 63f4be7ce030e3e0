# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vrboot/utils/net.py
from __future__ import annotations

import ipaddress
import re

_MAC_RE = re.compile(r"^[0-9a-f]{2}([:-])(?:[0-9a-f]{2}\1){4}[0-9a-f]{2}$")


def netmask_to_prefix(netmask: str) -> int:
    """
    Convert a dotted-decimal netmask to a CIDR prefix length.

    Only contiguous masks are accepted; "255.0.255.0" and host masks such as
    "0.0.0.255" raise ValueError.
    """
    try:
        bits = int(ipaddress.IPv4Address(str(netmask).strip()))
    except ipaddress.AddressValueError as exc:
        raise ValueError(f"invalid netmask {netmask!r}: {exc}") from exc

    inverted = ~bits & 0xFFFFFFFF
    if inverted & (inverted + 1):
        raise ValueError(f"invalid netmask {netmask!r}: not a contiguous mask")
    return 32 - inverted.bit_length()


def canonical_mac(mac: str) -> str:
    """Lower-case, colon separated form of a 48-bit hardware address."""
    value = str(mac).strip().lower()
    if not _MAC_RE.match(value):
        raise ValueError(f"invalid MAC address {mac!r}")
    return value.replace("-", ":")
