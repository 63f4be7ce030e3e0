# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vrboot/vyos/firewall.py
from __future__ import annotations

from typing import List

from .directives import Directive, Op

# established/related plus ICMP, shared by the local and inbound rule sets
BASE_RULES = (
    "rule 1 action accept",
    "rule 1 state established enable",
    "rule 1 state related enable",
    "rule 2 action accept",
    "rule 2 protocol icmp",
)


def local_ruleset_name(nic: str) -> str:
    return f"{nic}.local"


def in_ruleset_name(nic: str) -> str:
    return f"{nic}.in"


def _ruleset(nic: str, name: str, direction: str, rules) -> List[Directive]:
    out = [Directive(Op.SET, f"firewall name {name} {r}") for r in rules]
    out.append(Directive(Op.SET, f"interfaces ethernet {nic} firewall {direction} name {name}"))
    return out


def make_firewall_local_rules(nic: str, *rules: str) -> List[Directive]:
    """Rule set for traffic addressed to the appliance itself on ``nic``."""
    return _ruleset(nic, local_ruleset_name(nic), "local", rules or BASE_RULES)


def make_firewall_in_rules(nic: str, *rules: str) -> List[Directive]:
    """Rule set for traffic entering through ``nic`` and routed onward."""
    return _ruleset(nic, in_ruleset_name(nic), "in", rules or BASE_RULES)


def make_port_ruleset(name: str, port: int, action: str, protocol: str = "tcp") -> List[Directive]:
    return [
        Directive(Op.SET, f"firewall name {name} rule 1 destination port {port}"),
        Directive(Op.SET, f"firewall name {name} rule 1 protocol {protocol}"),
        Directive(Op.SET, f"firewall name {name} rule 1 action {action}"),
    ]
