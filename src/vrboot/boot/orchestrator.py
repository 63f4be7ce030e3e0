# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/vrboot/boot/orchestrator.py
from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from vrboot.bootstrap.channel import ChannelReader
from vrboot.bootstrap.models import BootstrapDocument
from vrboot.config.models import BootSettings
from vrboot.execution.runner import CommandRunner
from vrboot.host.nics import NicInventory
from vrboot.network.announcer import NetworkAnnouncer
from vrboot.observers.dispatcher import EventBus
from vrboot.observers.events import BootSummary, PhaseCompleted, PhaseFailed, PhaseStarted, new_ctx
from vrboot.service.restart import restart_agent
from vrboot.utils.readiness import wait_until
from vrboot.vyos.applier import DirectiveApplier
from vrboot.vyos.config_tree import ConfigSnapshot, ConfigTree
from vrboot.vyos.directives import DirectiveBatch
from vrboot.vyos.synthesizer import InterfaceAssignment, resolve_interfaces, synthesize

log = logging.getLogger("vrboot")


class BootPhase(str, Enum):
    WAIT_FIREWALL = "WAIT_FIREWALL"
    WAIT_CHANNEL = "WAIT_CHANNEL"
    DOCUMENT_PARSED = "DOCUMENT_PARSED"
    CONFIG_SYNTHESIZED = "CONFIG_SYNTHESIZED"
    CONFIG_APPLIED = "CONFIG_APPLIED"
    ANNOUNCED = "ANNOUNCED"
    SERVICE_RESTARTED = "SERVICE_RESTARTED"


@dataclass
class BootResult:
    document: BootstrapDocument
    batch: DirectiveBatch
    interfaces: List[InterfaceAssignment]
    announced: int
    completed: List[BootPhase] = field(default_factory=list)


class BootOrchestrator:
    """
    Runs the first-boot sequence once, strictly in order:

        firewall ready -> channel present -> document parsed ->
        directives synthesized -> directives applied -> addresses announced ->
        agent restarted

    Each wait retries internally; any error escaping a phase ends the run.
    Only the announcement phase swallows its own failures.
    """

    def __init__(
        self,
        settings: BootSettings,
        *,
        run_id: str = "-",
        bus: Optional[EventBus] = None,
        runner: Optional[CommandRunner] = None,
        reader: Optional[ChannelReader] = None,
        inventory_loader: Optional[Callable[[], NicInventory]] = None,
        snapshot_loader: Optional[Callable[[], ConfigSnapshot]] = None,
        applier: Optional[DirectiveApplier] = None,
        announcer: Optional[NetworkAnnouncer] = None,
        restarter: Optional[Callable[[], None]] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings
        self.run_id = run_id
        self.bus = bus or EventBus()
        self.runner = runner or CommandRunner()
        self.clock = clock
        self.sleep = sleep
        self.reader = reader or ChannelReader(
            settings.channel_path, settings.cache_path, clock=clock, sleep=sleep
        )
        self.inventory_loader = inventory_loader or (
            lambda: NicInventory.scan(settings.sysfs_net_path)
        )
        self.snapshot_loader = snapshot_loader or (
            lambda: ConfigTree.load(self.runner, settings.show_config_command)
        )
        self.applier = applier or DirectiveApplier(
            self.runner, config_user=settings.config_user, vbash=settings.vbash_path
        )
        self.announcer = announcer or NetworkAnnouncer(self.runner)
        self.restarter = restarter or (
            lambda: restart_agent(settings.restart_command, self.runner)
        )
        self.completed: List[BootPhase] = []

    # ------------------ phase plumbing ------------------

    def _ctx(self) -> dict:
        return new_ctx(self.run_id)

    @contextmanager
    def _phase(self, phase: BootPhase):
        self.bus.emit(PhaseStarted(phase=phase.value, **self._ctx()))
        start = self.clock()
        detail: dict = {}
        try:
            yield detail
        except Exception as exc:
            self.bus.emit(PhaseFailed(phase=phase.value, error=str(exc), **self._ctx()))
            raise
        self.completed.append(phase)
        self.bus.emit(
            PhaseCompleted(
                phase=phase.value,
                duration_ms=int((self.clock() - start) * 1000),
                detail=detail.get("detail"),
                **self._ctx(),
            )
        )

    # ------------------ probes ------------------

    def firewall_ready(self) -> bool:
        # a CommandError here counts as "not ready" inside wait_until
        self.runner.run(self.settings.firewall_probe_command, check=True)
        return True

    # ------------------ run ------------------

    def run(self) -> BootResult:
        try:
            result = self._run()
        except Exception as exc:
            last = self.completed[-1].value if self.completed else "NONE"
            self.bus.emit(BootSummary(status="FAILED", last_phase=last, error=str(exc), **self._ctx()))
            raise
        self.bus.emit(BootSummary(status="OK", last_phase=self.completed[-1].value, **self._ctx()))
        log.debug("successfully configured the system and bootstrapped the control-plane agent")
        return result

    def _run(self) -> BootResult:
        s = self.settings

        with self._phase(BootPhase.WAIT_FIREWALL):
            wait_until(
                self.firewall_ready,
                timeout=s.firewall_wait.timeout_seconds,
                interval=s.firewall_wait.interval_seconds,
                description="iptables service",
                clock=self.clock,
                sleep=self.sleep,
            )

        with self._phase(BootPhase.WAIT_CHANNEL):
            self.reader.wait_for_device(s.channel_wait)

        with self._phase(BootPhase.DOCUMENT_PARSED):
            document = self.reader.read(s.payload_wait)

        with self._phase(BootPhase.CONFIG_SYNTHESIZED) as info:
            inventory = self.inventory_loader()
            live = self.snapshot_loader()
            batch = synthesize(
                document,
                inventory,
                live,
                config_user=s.config_user,
                primary_interface=s.primary_interface,
            )
            interfaces = resolve_interfaces(document, inventory, primary_interface=s.primary_interface)
            info["detail"] = f"{len(batch)} directives for {len(interfaces)} interface(s)"

        with self._phase(BootPhase.CONFIG_APPLIED):
            self.applier.apply(batch, run_id=self.run_id)

        with self._phase(BootPhase.ANNOUNCED) as info:
            announced = self.announcer.announce(interfaces)
            info["detail"] = f"{announced}/{len(interfaces)} announced"

        with self._phase(BootPhase.SERVICE_RESTARTED):
            self.restarter()

        return BootResult(
            document=document,
            batch=batch,
            interfaces=interfaces,
            announced=announced,
            completed=list(self.completed),
        )
