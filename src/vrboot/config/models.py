# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vrboot/config/models.py

from typing import List
from pydantic import BaseModel, Field, PositiveFloat


class ReadinessSpec(BaseModel):
    timeout_seconds: PositiveFloat
    interval_seconds: PositiveFloat


class BootSettings(BaseModel):
    """Paths, commands and timings used by a boot run.

    Defaults describe the stock appliance image; an optional YAML file can
    override any of them (see ``vrboot.config.loader``).
    """

    # Side channel and cache
    channel_path: str = "/dev/virtio-ports/applianceVm.vport"
    cache_path: str = "/home/vyos/zvr/bootstrap-info.json"

    # Logs
    log_path: str = "/home/vyos/zvr/zvrboot.log"
    events_path: str = "/home/vyos/zvr/zvrboot-events.jsonl"

    # Configuration engine
    config_user: str = "vyos"
    primary_interface: str = "eth0"
    vbash_path: str = "/bin/vbash"
    show_config_command: List[str] = Field(
        default_factory=lambda: [
            "/opt/vyatta/bin/vyatta-op-cmd-wrapper",
            "show",
            "configuration",
        ]
    )

    # Probes and services
    firewall_probe_command: List[str] = Field(
        default_factory=lambda: ["/sbin/iptables-save"]
    )
    restart_command: List[str] = Field(
        default_factory=lambda: ["/etc/init.d/zstack-virtualrouteragent", "restart"]
    )
    sysfs_net_path: str = "/sys/class/net"

    # Readiness gates
    firewall_wait: ReadinessSpec = ReadinessSpec(timeout_seconds=120, interval_seconds=0.5)
    channel_wait: ReadinessSpec = ReadinessSpec(timeout_seconds=120, interval_seconds=0.5)
    payload_wait: ReadinessSpec = ReadinessSpec(timeout_seconds=300, interval_seconds=1)
