# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vrboot/vyos/synthesizer.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from vrboot.bootstrap.models import BootstrapDocument, NicSpec, SshPublicKey
from vrboot.errors import MalformedBootstrapError
from vrboot.host.nics import NicInventory
from vrboot.utils.net import netmask_to_prefix

from .config_tree import ConfigSnapshot
from .directives import DirectiveBatch
from .firewall import make_firewall_in_rules, make_firewall_local_rules, make_port_ruleset

log = logging.getLogger("vrboot")

SSH_ALLOW_RULESET = "sshon"
SSH_DENY_RULESET = "sshoff"


@dataclass(frozen=True)
class InterfaceAssignment:
    """A bootstrap NIC resolved to the host interface that carries it."""

    name: str
    mac: str
    ip: str
    prefix: int
    gateway: Optional[str] = None
    is_default_route: bool = False

    @property
    def config_path(self) -> str:
        return f"interfaces ethernet {self.name}"

    @property
    def address(self) -> str:
        return f"{self.ip}/{self.prefix}"


def _prefix(nic: NicSpec) -> int:
    try:
        return netmask_to_prefix(nic.netmask)
    except ValueError as exc:
        raise MalformedBootstrapError(f"nic[mac:{nic.mac}]: {exc}") from exc


def resolve_interfaces(
    document: BootstrapDocument,
    inventory: NicInventory,
    *,
    primary_interface: str = "eth0",
) -> List[InterfaceAssignment]:
    """
    Map every NIC in the document to a host interface.

    The management NIC must land on ``primary_interface``. Resolution stops
    at the first NIC whose MAC the host does not have.
    """
    out: List[InterfaceAssignment] = []

    mgmt = document.management_nic
    record = inventory.lookup(mgmt.mac)
    if record is None:
        raise MalformedBootstrapError(f"cannot find the management nic[mac:{mgmt.mac}]")
    if record.name != primary_interface:
        raise MalformedBootstrapError(
            f"the management nic is not {primary_interface} but {record.name}"
        )
    out.append(_assignment(record.name, mgmt))

    for nic in document.additional_nics:
        record = inventory.lookup(nic.mac)
        if record is None:
            raise MalformedBootstrapError(f"the nic with mac[{nic.mac}] is not found in the system")
        out.append(_assignment(record.name, nic))

    return out


def _assignment(name: str, nic: NicSpec) -> InterfaceAssignment:
    return InterfaceAssignment(
        name=name,
        mac=nic.mac,
        ip=nic.ip,
        prefix=_prefix(nic),
        gateway=nic.gateway,
        is_default_route=nic.is_default_route,
    )


def _ssh_key_directives(batch: DirectiveBatch, key: SshPublicKey, user: str) -> None:
    base = f"system login user {user} authentication public-keys {key.comment}"
    batch.set(f"{base} key {key.key}")
    batch.set(f"{base} type {key.key_type}")


def _interface_directives(batch: DirectiveBatch, nic: InterfaceAssignment, live: ConfigSnapshot) -> None:
    # drop whatever an earlier boot left behind before redefining the interface
    if live.exists(nic.config_path):
        batch.delete(nic.config_path)
    batch.set(f"{nic.config_path} address {nic.address}")
    batch.set(f"{nic.config_path} duplex auto")
    batch.set(f"{nic.config_path} smp_affinity auto")
    batch.set(f"{nic.config_path} speed auto")


def _default_route_directives(
    batch: DirectiveBatch, nics: List[InterfaceAssignment], live: ConfigSnapshot
) -> None:
    for nic in nics:
        if not nic.is_default_route:
            continue
        if not nic.gateway:
            log.warning(f"{nic.name} is flagged as default route but has no gateway; skipping")
            continue
        if live.exists("system gateway-address"):
            batch.delete("system gateway-address")
        batch.set(f"system gateway-address {nic.gateway}")
        return


def _firewall_directives(
    batch: DirectiveBatch, host_nics: List[str], ssh_port: int, primary_interface: str
) -> None:
    batch.set("firewall name default default-action reject")

    for name in host_nics:
        batch.extend(make_firewall_local_rules(name))
        batch.extend(make_firewall_in_rules(name))

    # ssh is reachable through the management interface only
    batch.extend(make_port_ruleset(SSH_ALLOW_RULESET, ssh_port, "accept"))
    batch.set(f"interfaces ethernet {primary_interface} firewall local name {SSH_ALLOW_RULESET}")

    batch.extend(make_port_ruleset(SSH_DENY_RULESET, ssh_port, "reject"))
    for name in host_nics:
        if name == primary_interface:
            continue
        batch.set(f"interfaces ethernet {name} firewall local name {SSH_DENY_RULESET}")


def synthesize(
    document: BootstrapDocument,
    inventory: NicInventory,
    live: ConfigSnapshot,
    *,
    config_user: str = "vyos",
    primary_interface: str = "eth0",
) -> DirectiveBatch:
    """
    Build the directive batch that brings the appliance in line with ``document``.

    Order: ssh key, management interface, additional interfaces (document
    order), default route, ssh service, firewall. Every interface that
    already has configuration is deleted before its new settings.
    """
    batch = DirectiveBatch()

    try:
        key = document.ssh_key
    except ValueError as exc:
        raise MalformedBootstrapError(f"cannot use 'publicKey' from bootstrap info: {exc}") from exc
    _ssh_key_directives(batch, key, config_user)

    nics = resolve_interfaces(document, inventory, primary_interface=primary_interface)
    for nic in nics:
        _interface_directives(batch, nic, live)

    _default_route_directives(batch, nics, live)

    if live.exists("service ssh"):
        batch.delete("service ssh")
    batch.set(f"service ssh port {document.ssh_port}")

    _firewall_directives(batch, inventory.names(), document.ssh_port, primary_interface)

    log.debug(f"synthesized {len(batch)} directives ({len(batch.deletes())} deletes)")
    return batch
